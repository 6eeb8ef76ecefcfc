"""Error types and formatting utilities for consistent error messages.

This module provides the exception hierarchy raised by the installation
engine and helper functions for formatting error messages consistently
across the command line front end.

Error Style Guide:
- User-facing errors use 'Error: ' prefix
- Field errors use structured format: '<entity> field '<field>' <issue>'
- Use present tense: 'must be', 'is required'
- Include actionable hints where helpful
- Be concise but informative
"""


class InstallerError(Exception):
    """Base class for every error raised by the installation engine."""


class NetworkError(InstallerError):
    """Raised when the artifact cannot be fetched (status, connection, body)."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class IntegrityError(InstallerError):
    """Raised when the checksum of a download cannot be computed or differs."""


class FilesystemError(InstallerError):
    """Raised when a file or directory operation fails."""


class ExternalProcessError(InstallerError):
    """Raised when a helper process exits non-zero or times out."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class UnsupportedPlatformError(InstallerError):
    """Raised when the host OS matches none of the supported families."""


class InstallAborted(IntegrityError):
    """Raised when the user rejects a download that failed verification."""


def format_error(message: str) -> str:
    """Format an error message with consistent prefix.

    Args:
        message: The error message to format

    Returns:
        Formatted error message with 'Error: ' prefix

    Examples:
        >>> format_error("file not found")
        'Error: file not found'
    """
    return f"Error: {message}"


def format_field_error(entity: str, field: str, issue: str) -> str:
    """Format a field validation error with structured format.

    Args:
        entity: Name of the entity being validated (e.g., "Section 'download'")
        field: Name of the field that failed validation
        issue: Description of the issue (e.g., "must be a non-empty string")

    Returns:
        Formatted field error message

    Examples:
        >>> format_field_error("Section 'download'", "link", "is required")
        "Section 'download' field 'link' is required"
    """
    return f"{entity} field '{field}' {issue}"


def format_suggestion(message: str, suggestion: str) -> str:
    """Format an error message with a helpful suggestion.

    Args:
        message: The error message
        suggestion: Helpful suggestion or hint for the user

    Returns:
        Formatted error with suggestion

    Examples:
        >>> format_suggestion("no installation found", "run 'appinstaller install' first")
        "Error: no installation found. Hint: run 'appinstaller install' first"
    """
    return f"{format_error(message)}. Hint: {suggestion}"


__all__ = [
    "InstallerError",
    "NetworkError",
    "IntegrityError",
    "FilesystemError",
    "ExternalProcessError",
    "UnsupportedPlatformError",
    "InstallAborted",
    "format_error",
    "format_field_error",
    "format_suggestion",
]
