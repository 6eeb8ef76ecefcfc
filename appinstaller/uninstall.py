"""Reverse a previous installation from its recorded paths."""

import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .fileops import delete_directory, delete_path
from .messages import Translator, localize
from .paths import Platform, detect_platform, get_start_menu_root, get_uninstall_config_path
from .state import InstallationState

TOTAL_STEPS = 5
COMPLETION_DELAY = 1.0

LogCallback = Callable[[str], None]
ProgressCallback = Callable[[int, int], None]

_logging = logging.getLogger(__name__)


@dataclass
class StepResult:
    step: str
    path: Path | None
    status: str  # "deleted" | "not_found" | "refused" | "error"
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in ("deleted", "not_found")


class UninstallManager:
    """Run the five uninstall steps, each independently of the others.

    Steps: desktop shortcut, start-menu shortcut, start-menu directory,
    install directory, uninstall-config file. A failing step is logged and
    the next one runs anyway. After the last step and a short delay,
    ``on_complete`` is called.
    """

    def __init__(
        self,
        state: InstallationState,
        app_name: str,
        platform: Platform | None = None,
        on_log: LogCallback | None = None,
        on_progress: ProgressCallback | None = None,
        on_complete: Callable[[], None] | None = None,
        translate: Translator = localize,
        config_path: Path | None = None,
        start_menu_root: Path | None = None,
        completion_delay: float = COMPLETION_DELAY,
    ):
        self.state = state
        self.platform = platform if platform is not None else detect_platform()
        self.on_log = on_log or (lambda _message: None)
        self.on_progress = on_progress
        self.on_complete = on_complete
        self._translate = translate
        self.config_path = config_path or get_uninstall_config_path(app_name, self.platform)
        self.start_menu_root = start_menu_root or get_start_menu_root(self.platform)
        self.completion_delay = completion_delay
        self.results: list[StepResult] = []
        self._thread: threading.Thread | None = None

    def start(self) -> threading.Thread:
        """Run the uninstall on a background thread and return it."""
        if self._thread is not None:
            raise RuntimeError("uninstall has already been started")
        self._thread = threading.Thread(target=self.run, name="uninstall", daemon=True)
        self._thread.start()
        return self._thread

    def run(self) -> list[StepResult]:
        self.on_log(self._translate("ProgressUninstall.Deleting"))
        steps = [
            ("desktop_shortcut", self._delete_desktop_shortcut),
            ("start_menu_shortcut", self._delete_start_menu_shortcut),
            ("start_menu_directory", self._delete_start_menu_directory),
            ("install_directory", self._delete_install_directory),
            ("uninstall_config", self._delete_config_file),
        ]
        self.results = []
        for completed, (name, step) in enumerate(steps, start=1):
            try:
                result = step()
            except Exception as e:
                _logging.error(f"Uninstall step {name} failed: {type(e).__name__}: {e}")
                self.on_log(str(e))
                result = StepResult(name, None, "error", str(e))
            self.results.append(result)
            if self.on_progress is not None:
                self.on_progress(completed, TOTAL_STEPS)

        self.on_log(self._translate("ProgressUninstall.Completed"))
        if self.completion_delay > 0:
            time.sleep(self.completion_delay)
        if self.on_complete is not None:
            self.on_complete()
        return self.results

    def _delete_entry(self, name: str, path: Path | None) -> StepResult:
        """Delete a shortcut file, or a bundle directory recursively."""
        if path is None or not (path.exists() or path.is_symlink()):
            self.on_log(self._translate("IO.File.NotFound", path=str(path) if path else ""))
            return StepResult(name, path, "not_found")
        try:
            delete_path(path)
        except OSError as e:
            _logging.error(f"Failed to delete {path}: {e}")
            self.on_log(self._translate("IO.File.DeleteError", path=str(path), error=str(e)))
            return StepResult(name, path, "error", str(e))
        self.on_log(self._translate("IO.File.Deleted", path=str(path)))
        return StepResult(name, path, "deleted")

    def _delete_desktop_shortcut(self) -> StepResult:
        return self._delete_entry("desktop_shortcut", self.state.shortcut_path)

    def _delete_start_menu_shortcut(self) -> StepResult:
        return self._delete_entry("start_menu_shortcut", self.state.start_menu_shortcut_path)

    def _delete_start_menu_directory(self) -> StepResult:
        name = "start_menu_directory"
        path = self.state.start_menu_path
        if path is None or not path.is_dir():
            self.on_log(self._translate("IO.Directory.NotFound", path=str(path) if path else ""))
            return StepResult(name, path, "not_found")
        if path.resolve() == Path(self.start_menu_root).resolve():
            self.on_log(self._translate("IO.Directory.NotWritable", path=str(path)))
            return StepResult(name, path, "refused")
        # Only an emptied per-application folder is removed
        try:
            path.rmdir()
        except OSError as e:
            _logging.error(f"Failed to delete start menu directory {path}: {e}")
            self.on_log(self._translate("IO.Directory.DeleteError", path=str(path), error=str(e)))
            return StepResult(name, path, "error", str(e))
        self.on_log(self._translate("IO.Directory.Deleted", path=str(path)))
        return StepResult(name, path, "deleted")

    def _delete_install_directory(self) -> StepResult:
        name = "install_directory"
        path = self.state.install_path
        if path is None or not path.is_dir():
            self.on_log(self._translate("IO.Directory.NotFound", path=str(path) if path else ""))
            return StepResult(name, path, "not_found")
        try:
            delete_directory(path)
        except OSError as e:
            _logging.error(f"Failed to delete install directory {path}: {e}")
            self.on_log(self._translate("IO.Directory.DeleteError", path=str(path), error=str(e)))
            return StepResult(name, path, "error", str(e))
        self.on_log(self._translate("IO.Directory.Deleted", path=str(path)))
        return StepResult(name, path, "deleted")

    def _delete_config_file(self) -> StepResult:
        return self._delete_entry("uninstall_config", self.config_path)


__all__ = ["TOTAL_STEPS", "COMPLETION_DELAY", "StepResult", "UninstallManager"]
