"""Install command implementation."""

import logging
import sys
from pathlib import Path

import click

from appinstaller import is_debug, tui
from appinstaller.commands.utils import (
    EXIT_DECLINED,
    EXIT_INSTALL_FAILED,
    EXIT_INTEGRITY_ABORTED,
    EXIT_INVALID_ARGS,
    EXIT_UNSUPPORTED_PLATFORM,
    default_install_path,
    default_start_menu_path,
    load_command_config,
    require_supported_platform,
)
from appinstaller.config import InstallerConfig
from appinstaller.download import fetch_content_length
from appinstaller.errors import UnsupportedPlatformError, format_error, format_suggestion
from appinstaller.paths import (
    Platform,
    get_uninstall_config_path,
)
from appinstaller.setup_manager import SetupManager, SetupStage, launch_application
from appinstaller.state import InstallationState

LICENSE_FILE_NAME = "license.txt"

_logging = logging.getLogger(__name__)


def _accept_license(config: InstallerConfig, yes: bool) -> bool:
    license_file = config.resource(LICENSE_FILE_NAME)
    if yes or not license_file.is_file():
        return True
    tui.show_license(license_file.read_text(encoding="utf-8"))
    return tui.confirm("Do you accept the license agreement?", default=False)


@click.command()
@click.option("--path", "install_path", type=click.Path(path_type=Path), help="Installation directory")
@click.option(
    "--start-menu-dir",
    type=click.Path(path_type=Path),
    help="Directory the start menu shortcut is placed in",
)
@click.option("--desktop/--no-desktop", default=True, help="Create a desktop shortcut")
@click.option("--start-menu/--no-start-menu", default=True, help="Create a start menu shortcut")
@click.option("--yes", "-y", is_flag=True, help="Accept the license and use defaults without prompting")
@click.option("--launch", is_flag=True, help="Start the application after installing")
@click.pass_context
def install(
    ctx,
    install_path: Path | None,
    start_menu_dir: Path | None,
    desktop: bool,
    start_menu: bool,
    yes: bool,
    launch: bool,
):
    """Download and install the application."""
    config = load_command_config(ctx)
    platform = require_supported_platform()

    uninstall_config = get_uninstall_config_path(config.app_name, platform)
    if uninstall_config.exists():
        click.echo(
            format_suggestion(
                f"{config.app_name} is already installed",
                "run 'appinstaller uninstall' first",
            ),
            err=True,
        )
        sys.exit(EXIT_INVALID_ARGS)

    if not _accept_license(config, yes):
        click.echo("License declined. Nothing was installed.")
        sys.exit(EXIT_DECLINED)

    if install_path is None:
        install_path = default_install_path(config, platform)
        if not yes:
            install_path = tui.prompt_path("Installation directory:", install_path)
    if install_path.exists() and not install_path.is_dir():
        raise click.BadOptionUsage("--path", f"Not a directory: {install_path}")

    state = InstallationState(
        install_path=install_path.absolute(),
        start_menu_path=(start_menu_dir or default_start_menu_path(config, platform)).absolute(),
        create_desktop_shortcut=desktop,
        create_start_menu_shortcut=start_menu,
        license_accepted=True,
        debug_mode=is_debug(),
        language=config.language,
    )
    state.required_space_bytes = fetch_content_length(config.download.link)
    click.echo(f"Installing {config.app_name} to {state.install_path}")
    click.echo(f"Required space: {state.required_space}")

    manager = run_setup(config, state, platform, yes)
    stage = manager.stage

    if stage == SetupStage.COMPLETE:
        click.secho(f"\n✅ {config.app_name} installed successfully", fg="green")
        if launch:
            launch_application(state, platform)
        return

    if stage == SetupStage.ABORTED:
        click.secho("\n❌ Installation aborted", fg="red", err=True)
        sys.exit(EXIT_INTEGRITY_ABORTED)
    if stage == SetupStage.CANCELLED:
        click.secho("\n❌ Installation cancelled", fg="red", err=True)
    else:
        click.secho("\n❌ Installation failed", fg="red", err=True)
        if manager.error is not None:
            click.echo(format_error(str(manager.error)), err=True)
    sys.exit(EXIT_INSTALL_FAILED)


def run_setup(config: InstallerConfig, state: InstallationState, platform: Platform, yes: bool) -> SetupManager:
    """Run SetupManager on its worker thread and wait for it.

    Ctrl+C while downloading requests cancellation instead of killing
    the process.
    """
    printer = tui.ProgressPrinter()

    def on_log(message: str) -> None:
        printer.finish()
        tui.print_log(message)

    manager = SetupManager(
        config,
        state,
        platform=platform,
        on_log=on_log,
        on_progress=printer,
        confirm=(lambda _result: False) if yes else tui.confirm_checksum_override,
    )
    worker = manager.start()
    try:
        while worker.is_alive():
            worker.join(timeout=0.2)
    except KeyboardInterrupt:
        _logging.debug("Interrupted, cancelling download")
        manager.cancel()
        worker.join()
    printer.finish()

    if isinstance(manager.error, UnsupportedPlatformError):
        click.echo(format_suggestion(str(manager.error), "Windows, Linux and macOS are supported"), err=True)
        sys.exit(EXIT_UNSUPPORTED_PLATFORM)
    return manager
