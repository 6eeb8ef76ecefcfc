"""Platform detection and OS-specific directory helpers."""

import logging
import os
import platform as _platform
from enum import Enum
from pathlib import Path

_logging = logging.getLogger(__name__)


class Platform(Enum):
    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"
    UNSUPPORTED = "unsupported"


def detect_platform(system_name: str | None = None) -> Platform:
    """Map an OS name (default: the running system) to a Platform.

    Args:
        system_name: OS name such as ``platform.system()`` returns

    Returns:
        The matching Platform, or Platform.UNSUPPORTED
    """
    name = (system_name if system_name is not None else _platform.system()).lower()
    # "darwin" contains "win", so macOS has to be matched first
    if "darwin" in name or "mac" in name:
        return Platform.MACOS
    if "win" in name:
        return Platform.WINDOWS
    if "linux" in name:
        return Platform.LINUX
    return Platform.UNSUPPORTED


def _resolve(platform: Platform | None) -> Platform:
    return platform if platform is not None else detect_platform()


def _appdata() -> Path | None:
    value = os.environ.get("APPDATA")
    return Path(value) if value else None


def get_xdg_user_dir(name: str, home: Path | None = None) -> Path | None:
    """Read an entry such as XDG_DESKTOP_DIR from ~/.config/user-dirs.dirs.

    Args:
        name: XDG variable name
        home: Home directory (default: current user's home)

    Returns:
        Resolved path, or None if the file or entry is missing
    """
    home = home or Path.home()
    user_dirs = home / ".config" / "user-dirs.dirs"
    if not user_dirs.is_file():
        return None

    try:
        lines = user_dirs.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        _logging.error(f"Error reading {user_dirs}: {e}")
        return None

    prefix = f"{name}="
    for line in lines:
        if not line.startswith(prefix):
            continue
        value = line[len(prefix):].replace('"', "")
        if value.startswith("$HOME/"):
            return home / value[len("$HOME/"):]
        return (home / value).resolve()
    return None


def get_default_install_path(app_name: str, platform: Platform | None = None) -> Path:
    """Return the conventional per-user installation directory for app_name."""
    platform = _resolve(platform)
    home = Path.home()

    if platform == Platform.WINDOWS:
        appdata = _appdata()
        if appdata is None:
            _logging.error("APPDATA is not set, falling back to the home directory")
            return home / app_name
        return appdata / app_name
    if platform == Platform.LINUX:
        data_home = os.environ.get("XDG_DATA_HOME")
        base = Path(data_home) if data_home else home / ".local" / "share"
        return base / app_name
    if platform == Platform.MACOS:
        return home / "Library" / "Application Support" / app_name

    _logging.warning(f"Unrecognized platform, installing {app_name} under the home directory")
    return home / app_name


def get_start_menu_root(platform: Platform | None = None) -> Path:
    """Return the OS-wide launcher directory shared by every application."""
    platform = _resolve(platform)
    home = Path.home()

    if platform == Platform.WINDOWS:
        appdata = _appdata()
        if appdata is None:
            return home
        return appdata / "Microsoft" / "Windows" / "Start Menu" / "Programs"
    if platform == Platform.LINUX:
        return home / ".local" / "share" / "applications"
    if platform == Platform.MACOS:
        return Path("/Applications")
    return home


def get_start_menu_directory(folder_name: str = "", platform: Platform | None = None) -> Path:
    """Return the start-menu style directory shortcuts are placed in.

    On Windows a per-application folder is created below the Programs
    folder; Linux and macOS use the shared launcher directory as-is.
    """
    platform = _resolve(platform)
    root = get_start_menu_root(platform)
    if platform in (Platform.WINDOWS, Platform.UNSUPPORTED) and folder_name:
        return root / folder_name
    return root


def get_desktop_directory(platform: Platform | None = None) -> Path:
    """Return the current user's desktop directory."""
    platform = _resolve(platform)
    home = Path.home()

    if platform == Platform.LINUX:
        xdg_desktop = get_xdg_user_dir("XDG_DESKTOP_DIR", home)
        return xdg_desktop if xdg_desktop is not None else home / "Desktop"
    if platform in (Platform.WINDOWS, Platform.MACOS):
        return home / "Desktop"

    _logging.warning("Unable to determine desktop directory, falling back to home")
    return home


def get_uninstall_config_path(app_name: str, platform: Platform | None = None) -> Path:
    """Return the location of the persisted uninstall configuration."""
    platform = _resolve(platform)
    home = Path.home()
    slug = app_name.lower().replace(" ", "_")

    if platform == Platform.WINDOWS:
        appdata = _appdata()
        return (appdata or home) / f"{slug}_config.yaml"
    if platform == Platform.LINUX:
        return home / ".config" / f".{slug}_config.yaml"
    if platform == Platform.MACOS:
        return home / "Library" / "Application Support" / f".{slug}_config.yaml"
    return home / f"{slug}_config.yaml"


__all__ = [
    "Platform",
    "detect_platform",
    "get_xdg_user_dir",
    "get_default_install_path",
    "get_start_menu_root",
    "get_start_menu_directory",
    "get_desktop_directory",
    "get_uninstall_config_path",
]
