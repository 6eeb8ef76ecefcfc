"""Installation state shared by the setup and uninstall engines.

A single InstallationState instance is created by the front end, filled in
screen by screen, and handed explicitly to every component that needs it.
There is no locking: the wizard only ever mutates it from one place at a time.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import yaml

from .config import ConfigError, load_config
from .download import format_size
from .errors import format_field_error

_logging = logging.getLogger(__name__)

# Keys of the persisted uninstall configuration
KEY_INSTALL_DIR = "installDir"
KEY_START_MENU_DIR = "startMenuDir"
KEY_DESKTOP_SHORTCUT = "desktopShortcut"
KEY_START_MENU_SHORTCUT = "startMenuShortcut"
KEY_APPLICATION = "applicationToLaunch"


def _optional_path(value) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value))


@dataclass
class InstallationState:
    install_path: Path | None = None
    start_menu_path: Path | None = None
    create_desktop_shortcut: bool = True
    create_start_menu_shortcut: bool = True
    required_space_bytes: int = 0
    shortcut_path: Path | None = None
    start_menu_shortcut_path: Path | None = None
    application_to_launch: Path | None = None
    uninstall_mode_active: bool = False
    license_accepted: bool = False
    debug_mode: bool = False
    language: str = "eng"

    @property
    def required_space(self) -> str:
        return format_size(self.required_space_bytes)

    def to_uninstall_config(self) -> dict[str, str]:
        """Serialize the paths an uninstall needs into a flat mapping."""
        def _text(path: Path | None) -> str:
            return str(path) if path is not None else ""

        return {
            KEY_INSTALL_DIR: _text(self.install_path),
            KEY_START_MENU_DIR: _text(self.start_menu_path),
            KEY_DESKTOP_SHORTCUT: _text(self.shortcut_path),
            KEY_START_MENU_SHORTCUT: _text(self.start_menu_shortcut_path),
            KEY_APPLICATION: _text(self.application_to_launch),
        }

    @classmethod
    def from_uninstall_config(cls, data: dict) -> "InstallationState":
        """Build a state in uninstall mode from a persisted mapping.

        Raises:
            ConfigError: If the install directory is not recorded
        """
        install_path = _optional_path(data.get(KEY_INSTALL_DIR))
        if install_path is None:
            raise ConfigError(format_field_error("Uninstall config", KEY_INSTALL_DIR, "is required"))

        return cls(
            install_path=install_path,
            start_menu_path=_optional_path(data.get(KEY_START_MENU_DIR)),
            shortcut_path=_optional_path(data.get(KEY_DESKTOP_SHORTCUT)),
            start_menu_shortcut_path=_optional_path(data.get(KEY_START_MENU_SHORTCUT)),
            application_to_launch=_optional_path(data.get(KEY_APPLICATION)),
            uninstall_mode_active=True,
        )


def save_uninstall_config(state: InstallationState, path: Path) -> Path:
    """Write the uninstall configuration for state to path.

    Raises:
        OSError: If the file cannot be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(state.to_uninstall_config(), f, default_flow_style=False, sort_keys=False)
    _logging.debug(f"Wrote uninstall config: {path}")
    return path


def load_uninstall_config(path: Path) -> InstallationState:
    """Read a persisted uninstall configuration back into a state.

    Raises:
        ConfigError: If the file is missing, unreadable or incomplete
    """
    data = load_config(path)
    return InstallationState.from_uninstall_config(data)


__all__ = [
    "InstallationState",
    "save_uninstall_config",
    "load_uninstall_config",
]
