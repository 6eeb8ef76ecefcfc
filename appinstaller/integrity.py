"""SHA-256 verification of a downloaded artifact."""

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

import click

HASH_BLOCK_SIZE = 64 * 1024

_logging = logging.getLogger(__name__)


class VerifyStatus(Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    COMPUTE_ERROR = "compute_error"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class VerifyResult:
    status: VerifyStatus
    expected: str = ""
    actual: str | None = None
    reason: str | None = None

    @property
    def passed(self) -> bool:
        return self.status in (VerifyStatus.MATCH, VerifyStatus.SKIPPED)


ConfirmCallback = Callable[[VerifyResult], bool]


def compute_sha256(path: Path, block_size: int = HASH_BLOCK_SIZE) -> str:
    """Hash a file in fixed-size blocks and return the lowercase hex digest.

    Raises:
        OSError: If the file cannot be read
    """
    hasher = hashlib.sha256()
    with open(path, "rb") as handle:
        for block in iter(lambda: handle.read(block_size), b""):
            hasher.update(block)
    return hasher.hexdigest()


def verify(path: Path, expected_hex: str | None) -> VerifyResult:
    """Compare the SHA-256 of path with expected_hex.

    An empty or missing expected hash means verification is not configured;
    the file is not read and the result is SKIPPED.
    """
    expected = (expected_hex or "").strip().lower()
    if not expected:
        return VerifyResult(VerifyStatus.SKIPPED)

    try:
        actual = compute_sha256(path)
    except OSError as e:
        _logging.error(f"Failed to calculate checksum: {e}")
        return VerifyResult(VerifyStatus.COMPUTE_ERROR, expected=expected, reason=str(e))

    if actual != expected:
        _logging.debug(f"Checksum mismatch: expected {expected}, got {actual}")
        return VerifyResult(VerifyStatus.MISMATCH, expected=expected, actual=actual)
    return VerifyResult(VerifyStatus.MATCH, expected=expected, actual=actual)


def confirm_override(result: VerifyResult) -> bool:
    """Ask on the terminal whether to continue after a failed verification."""
    click.echo("")
    if result.status == VerifyStatus.MISMATCH:
        click.secho("  ⚠️  WARNING: Checksum mismatch", fg="yellow", bold=True)
        click.echo(f"      Expected: {result.expected}")
        click.echo(f"      Actual:   {result.actual}")
    else:
        click.secho("  ❌ ERROR: Checksum could not be calculated", fg="red", bold=True)
        click.echo(f"      {result.reason}")
    return click.confirm("\nContinue with installation anyway?", default=False)


__all__ = [
    "HASH_BLOCK_SIZE",
    "VerifyStatus",
    "VerifyResult",
    "ConfirmCallback",
    "compute_sha256",
    "verify",
    "confirm_override",
]
