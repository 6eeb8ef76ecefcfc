"""Streaming HTTP download of the installation artifact."""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator

import requests

from .errors import InstallerError, NetworkError
from .messages import Translator, localize

CHUNK_SIZE = 4096

LogCallback = Callable[[str], None]
ProgressCallback = Callable[[int, int], None]

_logging = logging.getLogger(__name__)


class DownloadCancelled(InstallerError):
    """Raised inside the transfer loop when cancellation was requested."""


class DownloadOutcome(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DownloadProgress:
    bytes_done: int
    bytes_total: int

    @property
    def fraction(self) -> float | None:
        """Completed share in [0, 1], or None when the total is unknown."""
        if self.bytes_total <= 0:
            return None
        return min(self.bytes_done / self.bytes_total, 1.0)


@dataclass
class DownloadResult:
    outcome: DownloadOutcome
    path: Path
    bytes_written: int = 0
    reason: str | None = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.outcome == DownloadOutcome.SUCCEEDED


def _content_length(headers) -> int:
    try:
        return int(headers.get("Content-Length", 0))
    except (TypeError, ValueError):
        return 0


def fetch_content_length(url: str, session: requests.Session | None = None) -> int:
    """Ask the server for the artifact size with a HEAD request.

    Returns:
        The advertised Content-Length, or 0 if it is missing or the request fails
    """
    http = session or requests
    try:
        response = http.head(url, allow_redirects=True)
    except requests.RequestException as e:
        _logging.debug(f"Failed to get file size: {e}")
        return 0

    _logging.debug(f"Received response. Status: {response.status_code}")
    size = _content_length(response.headers)
    if size <= 0:
        _logging.error("Content-Length header not found in response.")
    else:
        _logging.debug(f"Content-Length: {size} bytes")
    return size


def format_size(num_bytes: int) -> str:
    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(num_bytes)
    i = 0
    while size >= 1024 and i < len(units) - 1:
        size /= 1024.0
        i += 1
    if i == 0:
        return f"{int(size)} {units[i]}"
    return f"{size:.1f} {units[i]}"


class Downloader:
    """Fetch a single artifact over HTTP(S) and stream it to disk.

    The transfer itself is a generator of DownloadProgress events
    (``iter_download``); ``download`` drives it, forwards the events to
    plain callbacks and turns errors into a DownloadResult. Callbacks run
    on whichever thread calls ``download``.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        chunk_size: int = CHUNK_SIZE,
        translate: Translator = localize,
    ):
        self._session = session or requests.Session()
        self._chunk_size = chunk_size
        self._translate = translate

    @staticmethod
    def is_already_downloaded(destination: Path, expected_size: int) -> bool:
        """True if destination holds exactly expected_size (> 0) bytes."""
        if expected_size <= 0 or not destination.is_file():
            return False
        return destination.stat().st_size == expected_size

    def iter_download(
        self,
        url: str,
        destination: Path,
        cancel_event: threading.Event | None = None,
    ) -> Iterator[DownloadProgress]:
        """Stream url into destination, yielding progress after every chunk.

        Raises:
            NetworkError: On a non-200 status or a missing response body
            DownloadCancelled: When cancel_event is set between chunks
            requests.RequestException: On connection level failures
            OSError: If the destination cannot be written
        """
        response = self._session.get(url, stream=True)
        try:
            _logging.debug(f"Received response. Status: {response.status_code}")
            if response.status_code != 200:
                raise NetworkError(
                    f"Server returned non-200 status: {response.status_code}",
                    status_code=response.status_code,
                )
            if response.raw is None:
                raise NetworkError("HTTP response body is empty. Cannot download.")

            total = _content_length(response.headers)
            done = 0
            destination.parent.mkdir(parents=True, exist_ok=True)
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=self._chunk_size):
                    if cancel_event is not None and cancel_event.is_set():
                        _logging.debug("Download cancelled.")
                        raise DownloadCancelled("Download cancelled by user")
                    if not chunk:
                        continue
                    f.write(chunk)
                    done += len(chunk)
                    yield DownloadProgress(done, total)
        finally:
            response.close()

    def download(
        self,
        url: str,
        destination: Path,
        on_log: LogCallback | None = None,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
        expected_size: int = 0,
    ) -> DownloadResult:
        """Download url to destination and report the terminal outcome.

        If destination already holds ``expected_size`` bytes the transfer is
        skipped without any network I/O. A cancelled transfer leaves the
        partial file in place.
        """
        log = on_log or (lambda _message: None)
        destination = Path(destination)

        if self.is_already_downloaded(destination, expected_size):
            _logging.debug(f"Skipping download, {destination} already complete")
            log(self._translate("Progress.Download.Skipped", file=str(destination.absolute())))
            if on_progress is not None:
                on_progress(expected_size, expected_size)
            return DownloadResult(
                DownloadOutcome.SUCCEEDED, destination, bytes_written=expected_size, skipped=True
            )

        log(self._translate("Progress.Download.Started", file=str(destination.absolute())))
        done = 0
        try:
            for progress in self.iter_download(url, destination, cancel_event):
                done = progress.bytes_done
                if on_progress is not None:
                    on_progress(progress.bytes_done, progress.bytes_total)
        except DownloadCancelled:
            log(self._translate("Progress.Download.Cancelled"))
            return DownloadResult(DownloadOutcome.CANCELLED, destination, bytes_written=done)
        except NetworkError as e:
            _logging.error(f"Failed to download {destination.name}: {e}")
            if e.status_code is not None:
                log(self._translate("Progress.Download.Failed", status=e.status_code))
            else:
                log(self._translate("Progress.Download.Error", error=str(e)))
            return DownloadResult(DownloadOutcome.FAILED, destination, bytes_written=done, reason=str(e))
        except (requests.RequestException, OSError) as e:
            _logging.error(f"Failed to download {destination.name}: {e}")
            log(self._translate("Progress.Download.Error", error=str(e)))
            return DownloadResult(DownloadOutcome.FAILED, destination, bytes_written=done, reason=str(e))

        _logging.debug(f"Download complete: {format_size(done)}")
        log(self._translate("Progress.Download.Completed", file=str(destination.absolute())))
        return DownloadResult(DownloadOutcome.SUCCEEDED, destination, bytes_written=done)


__all__ = [
    "CHUNK_SIZE",
    "DownloadCancelled",
    "DownloadOutcome",
    "DownloadProgress",
    "DownloadResult",
    "Downloader",
    "fetch_content_length",
    "format_size",
]
