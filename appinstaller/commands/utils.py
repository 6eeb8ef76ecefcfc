"""Shared utility functions for commands."""

import platform as _platform
import sys
from pathlib import Path

import click

from appinstaller import setup_logging
from appinstaller.config import ConfigError, InstallerConfig, load_installer_config
from appinstaller.errors import format_error, format_suggestion
from appinstaller.paths import Platform, detect_platform, get_default_install_path, get_start_menu_directory

# Exit codes
EXIT_SUCCESS = 0
EXIT_DECLINED = 1
EXIT_INVALID_ARGS = 2
EXIT_INTEGRITY_ABORTED = 3
EXIT_CONFIG_ERROR = 4
EXIT_INSTALL_FAILED = 5
EXIT_UNSUPPORTED_PLATFORM = 6


def load_command_config(ctx: click.Context) -> InstallerConfig:
    """Load the installer config for a command and configure logging.

    Exits with EXIT_CONFIG_ERROR when the config cannot be loaded.
    """
    debug = ctx.obj.get("debug", False)
    try:
        config = load_installer_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        setup_logging(debug)
        click.echo(format_error(str(e)), err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    setup_logging(debug or config.debug)
    return config


def default_install_path(config: InstallerConfig, platform: Platform) -> Path:
    """Install directory from install.default_dirs, else the OS default."""
    if config.install.default_dirs.install:
        return Path(config.install.default_dirs.install).expanduser()
    return get_default_install_path(config.app_name, platform)


def default_start_menu_path(config: InstallerConfig, platform: Platform) -> Path:
    if config.install.default_dirs.start_menu:
        return Path(config.install.default_dirs.start_menu).expanduser()
    return get_start_menu_directory(config.app_name, platform)


def platform_name() -> str:
    return _platform.system() or "unknown"


def require_supported_platform() -> Platform:
    """Detect the OS once, exiting with EXIT_UNSUPPORTED_PLATFORM if unknown."""
    platform = detect_platform()
    if platform == Platform.UNSUPPORTED:
        click.echo(
            format_suggestion(
                f"unsupported operating system: {platform_name()}",
                "Windows, Linux and macOS are supported",
            ),
            err=True,
        )
        sys.exit(EXIT_UNSUPPORTED_PLATFORM)
    return platform
