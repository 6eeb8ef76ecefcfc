"""User-facing log lines shown in the progress panel.

Every engine reports progress through a ``translate(key, **params)`` callable
so that a front end can substitute its own catalog. ``localize`` renders the
built-in English catalog.
"""

from typing import Callable

Translator = Callable[..., str]

MESSAGES: dict[str, str] = {
    "Common.DetectedOS": "Detected operating system: {os}",
    "Common.UnsupportedOS": "Unsupported operating system: {os}",
    "Process.Success": "{processName} finished with exit code {exitCode}",
    "Process.Failed": "{processName} failed with exit code {exitCode}: {error}",
    "Process.Timeout": "{processName} did not finish within {timeout} seconds",
    "IO.Checksum.Error": "Failed to calculate the checksum of {path}: {error}",
    "IO.Checksum.Mismatch": "Checksum mismatch. Expected {expected}, got {actual}",
    "IO.Checksum.Verified": "Checksum verified: {checksum}",
    "IO.Checksum.Skipped": "No checksum configured, skipping verification",
    "IO.Checksum.Override": "Continuing despite failed verification",
    "IO.Directory.Created": "Directory created: {path}",
    "IO.Directory.CreateError": "Failed to create directory {path}: {error}",
    "IO.Directory.Deleted": "Directory deleted: {path}",
    "IO.Directory.DeleteError": "Failed to delete directory {path}: {error}",
    "IO.Directory.NotFound": "Directory not found: {path}",
    "IO.Directory.NotWritable": "Directory is shared and will not be deleted: {path}",
    "IO.File.Copied": "Copied {source} to {destination}",
    "IO.File.CopyError": "Failed to copy {source} to {destination}: {error}",
    "IO.File.Created": "File created: {path}",
    "IO.File.CreateError": "Failed to create {path}: {error}",
    "IO.File.Deleted": "Deleted: {path}",
    "IO.File.DeleteError": "Failed to delete {path}: {error}",
    "IO.File.NotFound": "Not found: {path}",
    "Progress.Download.Started": "Downloading to {file}",
    "Progress.Download.Completed": "Download completed: {file}",
    "Progress.Download.Skipped": "Using existing download: {file}",
    "Progress.Download.Failed": "Download failed. HTTP Status: {status}",
    "Progress.Download.Error": "Download error: {error}",
    "Progress.Download.Cancelled": "Download cancelled",
    "Progress.Scripts.Creating": "Creating launch scripts and shortcuts...",
    "Progress.Scripts.SetupFailed": "Setup failed: {error}",
    "Progress.Config.Created": "Uninstaller configuration file created: {path}",
    "Progress.Config.CreateError": "Failed to write uninstaller configuration file: {error}",
    "Progress.Completed": "Installation completed",
    "ProgressUninstall.Deleting": "Removing installed files...",
    "ProgressUninstall.Completed": "Uninstallation completed",
}


def localize(key: str, **params) -> str:
    """Render a catalog entry, falling back to the key itself.

    Examples:
        >>> localize("IO.File.Deleted", path="/tmp/x")
        'Deleted: /tmp/x'
        >>> localize("Unknown.Key")
        'Unknown.Key'
    """
    template = MESSAGES.get(key)
    if template is None:
        return key
    try:
        return template.format(**params)
    except (KeyError, IndexError):
        return template


__all__ = ["MESSAGES", "Translator", "localize"]
