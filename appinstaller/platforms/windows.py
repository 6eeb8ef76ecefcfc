import logging
import tempfile
from pathlib import Path

from ..errors import ExternalProcessError
from ..execution import run_command
from ..fileops import copy_resource, escape_backslashes, render_template
from ..paths import Platform
from .base import LogCallback, PlatformSetup

SHORTCUT_SCRIPT_NAME = "create_shortcut.ps1"
ICON_NAME = "icon.ico"

_logging = logging.getLogger(__name__)


class WindowsSetup(PlatformSetup):
    """Batch launcher, PowerShell-built .lnk shortcuts and a batch uninstaller."""

    platform = Platform.WINDOWS

    def __init__(self, *args, temp_dir: Path | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.temp_dir = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())

    @property
    def shortcut_name(self) -> str:
        return f"{self.config.app_name}.lnk"

    def setup(self, install_dir: Path, start_menu_dir: Path, artifact: Path, on_log: LogCallback) -> None:
        install_dir = Path(install_dir).absolute()
        start_menu_dir = Path(start_menu_dir).absolute()

        batch = self.config.install.batch
        launcher = self._write_script(install_dir, batch.file_name, render_template(batch.content, {
            "%dirPath%": escape_backslashes(install_dir),
            "%jarPath%": escape_backslashes(Path(artifact).absolute()),
        }), on_log)

        self.state.shortcut_path = self.desktop_dir / self.shortcut_name
        self.state.start_menu_shortcut_path = start_menu_dir / self.shortcut_name

        icon = self._copy_icon(self.config.install.icons.windows, install_dir, ICON_NAME, on_log)

        exe_config = self.config.install.exe
        exe_source = self.config.resource(exe_config.resource_path)
        exe = copy_resource(exe_source, install_dir, exe_config.file_name)
        if exe is None:
            on_log(self._translate(
                "IO.File.CopyError",
                source=str(exe_source),
                destination=str(install_dir / exe_config.file_name),
                error="not found",
            ))
        else:
            on_log(self._translate("IO.File.Copied", source=str(exe_source), destination=str(exe)))

        # Without the bundled exe the shortcut points at the batch launcher
        target = exe or launcher
        if target is not None:
            self.state.application_to_launch = target
            shortcut = install_dir / self.shortcut_name
            if self.create_shortcut(shortcut, target, icon, on_log):
                self._place_shortcuts(shortcut, on_log)
                try:
                    shortcut.unlink()
                except OSError as e:
                    on_log(self._translate("IO.File.DeleteError", path=str(shortcut), error=str(e)))

        uninstall = self.config.uninstall.batch
        self._write_script(install_dir, uninstall.file_name, render_template(
            uninstall.content, self._uninstall_tokens(install_dir, escape_backslashes)
        ), on_log)

    def create_shortcut(self, shortcut: Path, exe: Path, icon: Path | None, on_log: LogCallback) -> bool:
        """Build a .lnk at shortcut by running the configured PowerShell template.

        The script is written to a temporary file and removed again whatever
        the interpreter's exit code was.

        Returns:
            True if the shortcut file exists afterwards
        """
        script = render_template(self.config.install.exe.powershell, {
            "%shortcutPath%": escape_backslashes(shortcut),
            "%exePath%": escape_backslashes(exe),
            "%iconPath%": escape_backslashes(icon if icon is not None else ""),
        })
        script_path = self.temp_dir / SHORTCUT_SCRIPT_NAME
        try:
            script_path.write_text(script, encoding="utf-8")
        except OSError as e:
            on_log(self._translate("IO.File.CreateError", path=str(script_path), error=str(e)))
            return False

        try:
            result = run_command(
                ["powershell.exe", "-ExecutionPolicy", "Bypass", "-File", str(script_path)]
            ).check("PowerShell")
            on_log(self._translate("Process.Success", processName="PowerShell", exitCode=result.returncode))
        except ExternalProcessError as e:
            on_log(self._translate(
                "Process.Failed", processName="PowerShell", exitCode=e.returncode, error=e.stderr
            ))
        finally:
            try:
                script_path.unlink()
            except OSError as e:
                _logging.warning(f"Failed to delete temporary script {script_path}: {e}")
                on_log(self._translate("IO.File.DeleteError", path=str(script_path), error=str(e)))

        return shortcut.is_file()
