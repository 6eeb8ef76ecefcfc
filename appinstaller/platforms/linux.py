from pathlib import Path

from ..fileops import render_template
from ..paths import Platform
from .base import LogCallback, PlatformSetup

ICON_NAME = "icon.png"


class LinuxSetup(PlatformSetup):
    """Bash launcher, freedesktop .desktop entries and a shell uninstaller."""

    platform = Platform.LINUX

    def setup(self, install_dir: Path, start_menu_dir: Path, artifact: Path, on_log: LogCallback) -> None:
        install_dir = Path(install_dir).absolute()
        start_menu_dir = Path(start_menu_dir).absolute()
        tokens = {
            "%dirPath%": str(install_dir),
            "%jarPath%": str(Path(artifact).absolute()),
        }

        bash = self.config.install.bash
        launcher = self._write_script(
            install_dir, bash.file_name, render_template(bash.content, tokens), on_log, executable=True
        )
        if launcher is not None:
            self.state.application_to_launch = launcher

        self._copy_icon(self.config.install.icons.linux, install_dir, ICON_NAME, on_log)

        desktop = self.config.install.linux_desktop
        self.state.shortcut_path = self.desktop_dir / desktop.file_name
        self.state.start_menu_shortcut_path = start_menu_dir / desktop.file_name

        entry = self._write_script(
            install_dir, desktop.file_name, render_template(desktop.content, tokens), on_log
        )
        if entry is not None:
            self._place_shortcuts(entry, on_log)

        uninstall = self.config.uninstall.bash
        self._write_script(install_dir, uninstall.file_name, render_template(
            uninstall.content, self._uninstall_tokens(install_dir)
        ), on_log, executable=True)
