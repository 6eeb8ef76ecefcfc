"""Terminal UI helpers for the install and uninstall commands.

- questionary for rich interactive prompts (when TTY available)
- click as fallback for CI/headless scenarios
- TTY guards before all interactive prompts
"""

import sys
from pathlib import Path

import click
import questionary

from .download import format_size
from .integrity import VerifyResult, VerifyStatus, confirm_override


def is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def show_license(text: str) -> None:
    """Print the license text framed by a header."""
    header = "License Agreement"
    click.echo("")
    click.secho(f"  {header}", bold=True)
    click.secho("  " + "-" * len(header), dim=True)
    click.echo("")
    for line in text.splitlines():
        click.echo(f"  {line}")
    click.echo("")


def confirm(message: str, default: bool = False) -> bool:
    """Ask a yes/no question.

    Returns:
        The answer; a cancelled questionary prompt (Ctrl+C) counts as no
    """
    if not is_interactive():
        return click.confirm(message, default=default)

    try:
        answer = questionary.confirm(message, default=default).ask()
    except KeyboardInterrupt:
        return False
    return bool(answer)


def prompt_path(message: str, default: Path) -> Path:
    """Ask for a directory, offering default."""
    if not is_interactive():
        return Path(click.prompt(message, default=str(default))).expanduser()

    try:
        answer = questionary.path(message, default=str(default), only_directories=True).ask()
    except KeyboardInterrupt:
        answer = None
    if not answer:
        return default
    return Path(answer).expanduser()


def confirm_checksum_override(result: VerifyResult) -> bool:
    """Ask whether to keep going after a failed checksum verification."""
    if not is_interactive():
        return confirm_override(result)

    click.echo("")
    if result.status == VerifyStatus.MISMATCH:
        click.secho("  ⚠️  WARNING: Checksum mismatch", fg="yellow", bold=True)
        click.echo(f"      Expected: {result.expected}")
        click.echo(f"      Actual:   {result.actual}")
    else:
        click.secho("  ❌ ERROR: Checksum could not be calculated", fg="red", bold=True)
        click.echo(f"      {result.reason}")
    return confirm("Continue with installation anyway?", default=False)


class ProgressPrinter:
    """Render download progress on a single, rewritten terminal line."""

    def __init__(self, label: str = "Downloading"):
        self.label = label
        self._last = None

    def __call__(self, done: int, total: int) -> None:
        if total > 0:
            percent = min(done * 100 // total, 100)
            if percent == self._last:
                return
            self._last = percent
            line = f"  {self.label}... {percent:3d}% ({format_size(done)} / {format_size(total)})"
        else:
            # Unknown size: refresh once per MiB
            step = done // (1024 * 1024)
            if step == self._last:
                return
            self._last = step
            line = f"  {self.label}... {format_size(done)}"
        click.echo(f"\r{line}", nl=False)

    def finish(self) -> None:
        """End the progress line so the next output starts on its own line."""
        if self._last is not None:
            click.echo("")
            self._last = None


def print_log(message: str) -> None:
    """Log panel sink: one line per engine message."""
    click.echo(f"  {message}")


__all__ = [
    "is_interactive",
    "show_license",
    "confirm",
    "prompt_path",
    "confirm_checksum_override",
    "ProgressPrinter",
    "print_log",
]
