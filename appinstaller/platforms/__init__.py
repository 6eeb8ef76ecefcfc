"""Platform setup strategies, one per supported operating system."""

from ..config import InstallerConfig
from ..errors import UnsupportedPlatformError
from ..paths import Platform
from ..state import InstallationState
from .base import LogCallback, PlatformSetup
from .linux import LinuxSetup
from .macos import MacOSSetup
from .windows import WindowsSetup

STRATEGIES: dict[Platform, type[PlatformSetup]] = {
    Platform.WINDOWS: WindowsSetup,
    Platform.LINUX: LinuxSetup,
    Platform.MACOS: MacOSSetup,
}


def get_platform_setup(
    platform: Platform,
    config: InstallerConfig,
    state: InstallationState,
    **kwargs,
) -> PlatformSetup:
    """Return the setup strategy for platform.

    Raises:
        UnsupportedPlatformError: If no strategy exists for platform
    """
    strategy = STRATEGIES.get(platform)
    if strategy is None:
        raise UnsupportedPlatformError(f"Unsupported operating system: {platform.value}")
    return strategy(config, state, **kwargs)


__all__ = [
    "LogCallback",
    "PlatformSetup",
    "WindowsSetup",
    "LinuxSetup",
    "MacOSSetup",
    "STRATEGIES",
    "get_platform_setup",
]
