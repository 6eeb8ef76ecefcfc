"""Common contract and helpers for the platform setup strategies."""

import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

from ..config import InstallerConfig
from ..execution import CHMOD_TIMEOUT
from ..fileops import copy_directory, copy_resource, delete_path, make_executable, write_script
from ..messages import Translator, localize
from ..paths import Platform, get_desktop_directory, get_uninstall_config_path
from ..state import InstallationState

LogCallback = Callable[[str], None]

_logging = logging.getLogger(__name__)


class PlatformSetup(ABC):
    """Turn a downloaded artifact into launchers, shortcuts and an uninstaller.

    Each step is independent: a failing step is logged through ``on_log``
    and the remaining steps still run. Shortcut locations are recorded on
    the shared InstallationState for the uninstaller.
    """

    platform: Platform = Platform.UNSUPPORTED

    def __init__(
        self,
        config: InstallerConfig,
        state: InstallationState,
        desktop_dir: Path | None = None,
        translate: Translator = localize,
        uninstall_config_path: Path | None = None,
    ):
        self.config = config
        self.state = state
        self.desktop_dir = Path(desktop_dir) if desktop_dir is not None else get_desktop_directory(self.platform)
        self.uninstall_config_path = (
            Path(uninstall_config_path)
            if uninstall_config_path is not None
            else get_uninstall_config_path(config.app_name, self.platform)
        )
        self._translate = translate

    @abstractmethod
    def setup(self, install_dir: Path, start_menu_dir: Path, artifact: Path, on_log: LogCallback) -> None:
        """Create the platform launch artifacts for an installed artifact."""

    def _uninstall_tokens(self, install_dir: Path, quote: Callable[[Path], str] = str) -> dict[str, str]:
        """Tokens for the uninstaller templates, including the uninstall config to remove."""
        return {
            "%installDir%": quote(install_dir),
            "%desktopShortcut%": quote(self.state.shortcut_path),
            "%startmenuShortcut%": quote(self.state.start_menu_shortcut_path),
            "%configPath%": quote(self.uninstall_config_path),
        }

    def _copy_icon(self, relative_path: str, install_dir: Path, target_name: str, on_log: LogCallback) -> Path | None:
        source = self.config.resource(relative_path)
        destination = install_dir / target_name
        icon = copy_resource(source, install_dir, target_name)
        if icon is None:
            on_log(self._translate(
                "IO.File.CopyError", source=str(source), destination=str(destination), error="not found"
            ))
        else:
            on_log(self._translate("IO.File.Copied", source=str(source), destination=str(icon)))
        return icon

    def _write_script(
        self,
        directory: Path,
        file_name: str,
        content: str,
        on_log: LogCallback,
        executable: bool = False,
    ) -> Path | None:
        """Write a rendered script, optionally marking it executable."""
        target = directory / file_name
        try:
            script = write_script(directory, file_name, content)
        except OSError as e:
            _logging.error(f"Failed to write script {target}: {e}")
            on_log(self._translate("IO.File.CreateError", path=str(target), error=str(e)))
            return None
        on_log(self._translate("IO.File.Created", path=str(script.absolute())))

        if executable:
            result = make_executable(script)
            if result.timed_out:
                on_log(self._translate("Process.Timeout", processName="chmod", timeout=CHMOD_TIMEOUT))
            elif result.returncode != 0:
                on_log(self._translate(
                    "Process.Failed", processName="chmod", exitCode=result.returncode, error=result.stderr
                ))
        return script

    def _copy_shortcut(self, source: Path, target: Path, on_log: LogCallback) -> bool:
        """Copy a file or bundle shortcut to target, replacing what is there."""
        _logging.debug(f"Creating shortcut: {target}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if source.is_dir():
                if target.exists():
                    delete_path(target)
                copy_directory(source, target)
            else:
                shutil.copyfile(source, target)
        except OSError as e:
            _logging.error(f"Failed to copy shortcut {source} to {target}: {e}")
            on_log(self._translate(
                "IO.File.CopyError", source=str(source), destination=str(target), error=str(e)
            ))
            return False
        on_log(self._translate("IO.File.Copied", source=str(source), destination=str(target)))
        return True

    def _place_shortcuts(self, source: Path, on_log: LogCallback) -> None:
        """Copy source to the desktop and start menu per the user's choices."""
        if self.state.create_desktop_shortcut and self.state.shortcut_path is not None:
            self._copy_shortcut(source, self.state.shortcut_path, on_log)
        if self.state.create_start_menu_shortcut and self.state.start_menu_shortcut_path is not None:
            self._copy_shortcut(source, self.state.start_menu_shortcut_path, on_log)


__all__ = ["LogCallback", "PlatformSetup"]
