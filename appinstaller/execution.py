"""External helper process execution."""

import logging
import subprocess
from dataclasses import dataclass

from .errors import ExternalProcessError

CHMOD_TIMEOUT = 10

_logging = logging.getLogger(__name__)


@dataclass
class CommandResult:
    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    def check(self, name: str) -> "CommandResult":
        """Raise ExternalProcessError unless the process exited 0 in time."""
        if self.timed_out:
            raise ExternalProcessError(f"{name} timed out", returncode=self.returncode, stderr=self.stderr)
        if self.returncode != 0:
            raise ExternalProcessError(
                f"{name} failed with exit code {self.returncode}",
                returncode=self.returncode,
                stderr=self.stderr,
            )
        return self


def run_command(args: list[str], timeout: float | None = None) -> CommandResult:
    """Run a helper process synchronously and capture its output.

    Args:
        args: Program and arguments, executed without a shell
        timeout: Seconds to wait before force-killing the process;
            None waits until the process exits

    Returns:
        CommandResult; a process that cannot be started is reported with
        returncode 1 and the OS error in stderr
    """
    _logging.debug(f"Running command: {args}")
    try:
        process = subprocess.Popen(
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        _logging.error(f"Command execution failed: {type(e).__name__}: {e} | Command: {args}")
        return CommandResult(args=args, returncode=1, stderr=str(e))

    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        process.kill()
        stdout, stderr = process.communicate()
        _logging.error(f"Command timed out after {timeout} seconds: {args}")
        return CommandResult(
            args=args,
            returncode=process.returncode if process.returncode is not None else 1,
            stdout=(stdout or "").strip(),
            stderr=(stderr or "").strip(),
            timed_out=True,
        )

    if stderr:
        _logging.debug(f"stderr: {stderr.strip()}")
    return CommandResult(
        args=args,
        returncode=process.returncode,
        stdout=(stdout or "").strip(),
        stderr=(stderr or "").strip(),
    )


__all__ = ["CHMOD_TIMEOUT", "CommandResult", "run_command"]
