"""CLI command definitions for appinstaller."""

from pathlib import Path

import click

from appinstaller.commands.info import info
from appinstaller.commands.install import install
from appinstaller.commands.uninstall import uninstall


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="Installer configuration file (default: $APPINSTALLER_CONFIG or the packaged config)",
)
@click.pass_context
def cli(ctx, debug, config_path):
    """Install and uninstall the application."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = config_path


cli.add_command(install)
cli.add_command(uninstall)
cli.add_command(info)

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
