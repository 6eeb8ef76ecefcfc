"""Uninstall command implementation."""

import sys

import click

from appinstaller import tui
from appinstaller.commands.utils import (
    EXIT_CONFIG_ERROR,
    EXIT_DECLINED,
    EXIT_INSTALL_FAILED,
    load_command_config,
    require_supported_platform,
)
from appinstaller.config import ConfigError
from appinstaller.errors import format_error, format_suggestion
from appinstaller.paths import get_uninstall_config_path
from appinstaller.state import load_uninstall_config
from appinstaller.uninstall import UninstallManager


@click.command()
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def uninstall(ctx, yes: bool):
    """Remove the installed application, its shortcuts and its uninstall config."""
    config = load_command_config(ctx)
    platform = require_supported_platform()

    config_path = get_uninstall_config_path(config.app_name, platform)
    if not config_path.is_file():
        click.echo(
            format_suggestion(
                f"no installation of {config.app_name} found",
                f"expected uninstall config at {config_path}",
            ),
            err=True,
        )
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        state = load_uninstall_config(config_path)
    except ConfigError as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    click.echo(f"{config.app_name} is installed in {state.install_path}")
    if not yes and not tui.confirm(f"Remove {config.app_name}?", default=False):
        click.echo("Uninstall cancelled.")
        sys.exit(EXIT_DECLINED)

    def on_progress(completed: int, total: int) -> None:
        click.echo(f"  [{completed}/{total}]")

    manager = UninstallManager(
        state,
        config.app_name,
        platform=platform,
        on_log=tui.print_log,
        on_progress=on_progress,
        config_path=config_path,
        completion_delay=0,
    )
    results = manager.run()

    failed = [r for r in results if r.status == "error"]
    if failed:
        click.secho(f"\n⚠️  {len(failed)} step(s) failed, some files may remain", fg="yellow", err=True)
        sys.exit(EXIT_INSTALL_FAILED)
    click.secho(f"\n✅ {config.app_name} uninstalled", fg="green")
