"""Filesystem helpers shared by the platform setup strategies."""

import logging
import os
import shutil
from pathlib import Path

from .execution import CHMOD_TIMEOUT, CommandResult, run_command

LAUNCHER_MODE = 0o755

_logging = logging.getLogger(__name__)


def render_template(template: str, replacements: dict[str, str]) -> str:
    """Substitute ``%token%`` placeholders with literal string replacement.

    Replacement values are inserted verbatim, without escaping, in the
    order the mapping yields them.

    Examples:
        >>> render_template("cd %dirPath%", {"%dirPath%": "/opt/app"})
        'cd /opt/app'
    """
    result = template
    for token, value in replacements.items():
        result = result.replace(token, value)
    return result


def escape_backslashes(path: Path | str) -> str:
    """Double every backslash, as Windows script string literals expect."""
    return str(path).replace("\\", "\\\\")


def copy_directory(source: Path, target: Path) -> None:
    """Recursively copy source into target.

    Directories are created before their contents are copied; files replace
    existing targets and keep their metadata.

    Raises:
        OSError: If any directory or file cannot be copied
    """
    source = Path(source)
    target = Path(target)
    for dirpath, _dirnames, filenames in os.walk(source):
        relative = Path(dirpath).relative_to(source)
        target_dir = target / relative
        target_dir.mkdir(parents=True, exist_ok=True)
        for name in filenames:
            shutil.copy2(Path(dirpath) / name, target_dir / name)


def delete_directory(path: Path) -> None:
    """Recursively delete a directory tree, children before parents.

    Raises:
        OSError: If any entry cannot be removed
    """
    path = Path(path)
    for dirpath, dirnames, filenames in os.walk(path, topdown=False):
        for name in filenames:
            os.unlink(Path(dirpath) / name)
        for name in dirnames:
            child = Path(dirpath) / name
            if child.is_symlink():
                child.unlink()
            else:
                child.rmdir()
    path.rmdir()


def delete_path(path: Path) -> None:
    """Delete a file, or a directory tree such as a macOS .app bundle."""
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        delete_directory(path)
    else:
        path.unlink()


def make_executable(path: Path, timeout: float = CHMOD_TIMEOUT) -> CommandResult:
    """Mark a script executable with ``chmod +x``.

    Failures are logged, not raised: a script that stays non-executable
    can still be run through its interpreter.
    """
    _logging.debug(f"Attempting to make script executable: {path}")
    result = run_command(["chmod", "+x", str(path)], timeout=timeout)
    if result.timed_out:
        _logging.error("chmod process timed out.")
    elif result.returncode != 0:
        _logging.error(f"chmod failed with exit code {result.returncode}: {result.stderr}")
    else:
        _logging.debug(f"Script made executable: {path}")
    return result


def write_script(directory: Path, file_name: str, content: str, executable: bool = False) -> Path:
    """Write a rendered script into directory.

    Raises:
        OSError: If the file cannot be written
    """
    script_path = Path(directory) / file_name
    script_path.write_text(content, encoding="utf-8")
    _logging.debug(f"Created script: {script_path}")
    if executable:
        make_executable(script_path)
    return script_path


def copy_resource(resource: Path, target_dir: Path, target_name: str) -> Path | None:
    """Copy a bundled resource into target_dir.

    Returns:
        The copied file, or None if the resource is missing or the copy fails
    """
    if not resource.is_file():
        _logging.error(f"Resource not found: {resource}")
        return None

    target = Path(target_dir) / target_name
    try:
        shutil.copyfile(resource, target)
    except OSError as e:
        _logging.error(f"Failed to copy {target_name}: {e}")
        return None
    return target


__all__ = [
    "LAUNCHER_MODE",
    "render_template",
    "escape_backslashes",
    "copy_directory",
    "delete_directory",
    "delete_path",
    "make_executable",
    "write_script",
    "copy_resource",
]
