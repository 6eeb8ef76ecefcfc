import logging
import sys

from .config import ConfigError, InstallerConfig, load_installer_config
from .errors import (
    ExternalProcessError,
    FilesystemError,
    InstallAborted,
    InstallerError,
    IntegrityError,
    NetworkError,
    UnsupportedPlatformError,
)
from .paths import Platform, detect_platform
from .state import InstallationState

__version__ = "1.0.0"

_debug_enabled = False


def set_debug(enabled: bool):
    """Enable or disable debug mode globally."""
    global _debug_enabled
    _debug_enabled = enabled


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return _debug_enabled


def setup_logging(debug: bool = False) -> None:
    """Configure root logging on stderr; DEBUG when debug is on, else WARNING."""
    set_debug(debug)
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


__all__ = [
    "__version__",
    "set_debug",
    "is_debug",
    "setup_logging",
    "ConfigError",
    "InstallerConfig",
    "load_installer_config",
    "InstallerError",
    "NetworkError",
    "IntegrityError",
    "FilesystemError",
    "ExternalProcessError",
    "UnsupportedPlatformError",
    "InstallAborted",
    "Platform",
    "detect_platform",
    "InstallationState",
]
