"""Info command implementation."""

import click

from appinstaller.commands.utils import (
    default_install_path,
    default_start_menu_path,
    load_command_config,
    platform_name,
)
from appinstaller.download import fetch_content_length, format_size
from appinstaller.paths import (
    Platform,
    detect_platform,
    get_desktop_directory,
    get_uninstall_config_path,
)


@click.command()
@click.option("--offline", is_flag=True, help="Skip the download size request")
@click.pass_context
def info(ctx, offline: bool):
    """Show the detected platform, default paths and download size."""
    config = load_command_config(ctx)
    platform = detect_platform()

    click.echo(f"Application:     {config.app_name}")
    if config.project is not None:
        click.echo(f"Version:         {config.project.version}")
    click.echo(f"Platform:        {platform.value} ({platform_name()})")
    if platform == Platform.UNSUPPORTED:
        click.secho("  This operating system is not supported.", fg="yellow")
        return

    uninstall_config = get_uninstall_config_path(config.app_name, platform)
    click.echo(f"Install path:    {default_install_path(config, platform)}")
    click.echo(f"Start menu:      {default_start_menu_path(config, platform)}")
    click.echo(f"Desktop:         {get_desktop_directory(platform)}")
    click.echo(f"Uninstall config: {uninstall_config}")
    click.echo(f"Installed:       {'yes' if uninstall_config.is_file() else 'no'}")
    click.echo(f"Download:        {config.download.link}")

    if offline:
        return
    size = fetch_content_length(config.download.link)
    if size > 0:
        click.echo(f"Download size:   {format_size(size)}")
    else:
        click.echo("Download size:   unknown")
