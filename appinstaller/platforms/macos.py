import logging
import os
import shutil
from pathlib import Path

from ..fileops import LAUNCHER_MODE, delete_path, render_template
from ..paths import Platform
from .base import LogCallback, PlatformSetup

ICON_NAME = "icon.icns"
LAUNCHER_NAME = "execute.sh"

_logging = logging.getLogger(__name__)


class MacOSSetup(PlatformSetup):
    """Launcher and uninstaller .app bundles, copied to the Desktop and /Applications."""

    platform = Platform.MACOS

    def setup(self, install_dir: Path, start_menu_dir: Path, artifact: Path, on_log: LogCallback) -> None:
        install_dir = Path(install_dir).absolute()
        start_menu_dir = Path(start_menu_dir).absolute()
        app = self.config.install.macos_app

        icon = self._copy_icon(self.config.install.icons.macos, install_dir, ICON_NAME, on_log)

        self.state.shortcut_path = self.desktop_dir / app.file_name
        self.state.start_menu_shortcut_path = start_menu_dir / app.file_name

        launcher_script = render_template(app.script, {
            "%dirPath%": str(install_dir),
            "%jarPath%": str(Path(artifact).absolute()),
        })
        bundle_path = install_dir / app.file_name
        try:
            bundle = self.create_app_bundle(bundle_path, launcher_script, icon)
        except OSError as e:
            _logging.error(f"Failed to create macOS app bundle: {e}")
            on_log(self._translate("IO.File.CreateError", path=str(bundle_path), error=str(e)))
        else:
            on_log(self._translate("IO.File.Created", path=str(bundle)))
            self.state.application_to_launch = bundle
            self._place_shortcuts(bundle, on_log)

        zsh = self.config.uninstall.zsh
        uninstall_script = render_template(zsh.content, self._uninstall_tokens(install_dir))
        uninstall_path = install_dir / zsh.file_name
        try:
            uninstaller = self.create_app_bundle(uninstall_path, uninstall_script, icon)
        except OSError as e:
            _logging.error(f"Failed to create macOS uninstaller app bundle: {e}")
            on_log(self._translate("IO.File.CreateError", path=str(uninstall_path), error=str(e)))
        else:
            on_log(self._translate("IO.File.Created", path=str(uninstaller)))

    def create_app_bundle(self, bundle_path: Path, script: str, icon: Path | None) -> Path:
        """Build ``<name>.app/Contents/{MacOS,Resources}`` at bundle_path.

        An existing bundle at the same path is removed first, so re-running
        setup leaves exactly one bundle behind.

        Raises:
            OSError: If any part of the bundle cannot be written
        """
        if bundle_path.exists() or bundle_path.is_symlink():
            delete_path(bundle_path)

        contents = bundle_path / "Contents"
        macos_dir = contents / "MacOS"
        resources = contents / "Resources"
        macos_dir.mkdir(parents=True)
        resources.mkdir(parents=True)

        info_plist = self.config.install.macos_app.info_plist
        if icon is not None:
            info_plist = render_template(info_plist, {"%iconPath%": icon.name})
        else:
            _logging.warning("No icon file found for macOS app bundle.")
        (contents / "Info.plist").write_text(info_plist, encoding="utf-8")

        launcher = macos_dir / LAUNCHER_NAME
        launcher.write_text(script, encoding="utf-8")
        os.chmod(launcher, LAUNCHER_MODE)

        if icon is not None and icon.is_file():
            shutil.copy2(icon, resources / icon.name)

        _logging.debug(f"Created macOS app bundle at: {bundle_path}")
        return bundle_path
