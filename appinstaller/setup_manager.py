"""Download, verify and set up the application in one linear pass."""

import logging
import os
import subprocess
import threading
from enum import Enum
from pathlib import Path
from typing import Callable

from .config import InstallerConfig
from .download import DownloadOutcome, Downloader, LogCallback, ProgressCallback
from .errors import FilesystemError, InstallAborted, NetworkError, UnsupportedPlatformError
from .fileops import copy_resource
from .integrity import ConfirmCallback, VerifyStatus, confirm_override, verify
from .messages import Translator, localize
from .paths import Platform, detect_platform, get_uninstall_config_path
from .platforms import PlatformSetup, get_platform_setup
from .state import InstallationState, save_uninstall_config

INFO_FILE_NAME = "info.txt"

_logging = logging.getLogger(__name__)


class SetupStage(Enum):
    IDLE = "idle"
    CHECKING_EXISTING = "checking_existing"
    DOWNLOADING = "downloading"
    VERIFYING = "verifying"
    PLATFORM_SETUP = "platform_setup"
    COMPLETE = "complete"
    FAILED = "failed"
    CANCELLED = "cancelled"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (
            SetupStage.COMPLETE,
            SetupStage.FAILED,
            SetupStage.CANCELLED,
            SetupStage.ABORTED,
        )


CompleteCallback = Callable[[SetupStage], None]


def _noop(*_args) -> None:
    return None


class SetupManager:
    """Drive one installation from download to uninstall-config.

    ``run()`` executes the whole sequence on the calling thread; ``start()``
    runs it on a background thread. Every terminal stage is reported once
    through ``on_complete``. When the user rejects a download that failed
    verification, the file is deleted and InstallAborted is raised from
    ``run()``; the caller decides how to exit.
    """

    def __init__(
        self,
        config: InstallerConfig,
        state: InstallationState,
        platform: Platform | None = None,
        downloader: Downloader | None = None,
        strategy: PlatformSetup | None = None,
        on_log: LogCallback | None = None,
        on_progress: ProgressCallback | None = None,
        on_complete: CompleteCallback | None = None,
        confirm: ConfirmCallback = confirm_override,
        translate: Translator = localize,
        uninstall_config_path: Path | None = None,
    ):
        self.config = config
        self.state = state
        self.platform = platform if platform is not None else detect_platform()
        self.downloader = downloader or Downloader(translate=translate)
        self.strategy = strategy
        self.on_log = on_log or _noop
        self.on_progress = on_progress
        self.on_complete = on_complete or _noop
        self.confirm = confirm
        self._translate = translate
        self.uninstall_config_path = uninstall_config_path or get_uninstall_config_path(
            config.app_name, self.platform
        )
        self.stage = SetupStage.IDLE
        self.error: BaseException | None = None
        self._cancel_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def install_dir(self) -> Path:
        if self.state.install_path is None:
            raise ValueError("install_path must be chosen before setup")
        return Path(self.state.install_path)

    @property
    def artifact_path(self) -> Path:
        return self.install_dir / self.config.download.file_name

    def cancel(self) -> None:
        """Request cancellation; honoured between download chunks only."""
        self._cancel_event.set()

    def start(self) -> threading.Thread:
        """Run the installation on a background thread and return it."""
        if self._thread is not None:
            raise RuntimeError("setup has already been started")
        self._thread = threading.Thread(target=self._run_in_background, name="setup", daemon=True)
        self._thread.start()
        return self._thread

    def _run_in_background(self) -> None:
        try:
            self.run()
        except InstallAborted:
            _logging.debug("Installation aborted by the user")
        except Exception as e:
            _logging.error(f"Setup failed unexpectedly: {type(e).__name__}: {e}")
            self.error = e
            self.on_log(self._translate("Progress.Scripts.SetupFailed", error=str(e)))
            self._finish(SetupStage.FAILED)

    def _finish(self, stage: SetupStage) -> SetupStage:
        self.stage = stage
        _logging.debug(f"Setup finished: {stage.value}")
        self.on_complete(stage)
        return stage

    def _resolve_strategy(self) -> PlatformSetup:
        if self.strategy is None:
            self.strategy = get_platform_setup(
                self.platform, self.config, self.state, uninstall_config_path=self.uninstall_config_path
            )
        return self.strategy

    def _ensure_directory(self, path: Path) -> bool:
        if path.is_dir():
            return True
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            _logging.error(f"Failed to create directory {path}: {e}")
            self.error = FilesystemError(f"Failed to create directory {path}: {e}")
            self.on_log(self._translate("IO.Directory.CreateError", path=str(path), error=str(e)))
            return False
        self.on_log(self._translate("IO.Directory.Created", path=str(path)))
        return True

    def run(self) -> SetupStage:
        """Execute the installation and return its terminal stage.

        Raises:
            InstallAborted: If the user declined to continue after a failed
                checksum verification
        """
        try:
            strategy = self._resolve_strategy()
        except UnsupportedPlatformError as e:
            self.error = e
            self.on_log(self._translate("Common.UnsupportedOS", os=self.platform.value))
            return self._finish(SetupStage.FAILED)
        self.on_log(self._translate("Common.DetectedOS", os=self.platform.value))

        if not self._ensure_directory(self.install_dir):
            return self._finish(SetupStage.FAILED)

        self.stage = SetupStage.CHECKING_EXISTING
        artifact = self.artifact_path
        if not self.downloader.is_already_downloaded(artifact, self.state.required_space_bytes):
            self.stage = SetupStage.DOWNLOADING
        result = self.downloader.download(
            self.config.download.link,
            artifact,
            on_log=self.on_log,
            on_progress=self.on_progress,
            cancel_event=self._cancel_event,
            expected_size=self.state.required_space_bytes,
        )
        if result.outcome == DownloadOutcome.CANCELLED:
            return self._finish(SetupStage.CANCELLED)
        if not result.ok:
            self.error = NetworkError(result.reason or "download failed")
            return self._finish(SetupStage.FAILED)

        self.stage = SetupStage.VERIFYING
        self._verify(artifact)

        self.stage = SetupStage.PLATFORM_SETUP
        start_menu_dir = self.state.start_menu_path
        if start_menu_dir is not None and not self._ensure_directory(Path(start_menu_dir)):
            return self._finish(SetupStage.FAILED)

        self.on_log(self._translate("Progress.Scripts.Creating"))
        self._copy_info_file()
        try:
            strategy.setup(
                self.install_dir,
                Path(start_menu_dir) if start_menu_dir is not None else self.install_dir,
                artifact,
                self.on_log,
            )
        except OSError as e:
            _logging.error(f"Platform setup failed: {e}")
            self.on_log(self._translate("Progress.Scripts.SetupFailed", error=str(e)))

        self._write_uninstall_config()
        self.on_log(self._translate("Progress.Completed"))
        return self._finish(SetupStage.COMPLETE)

    def _verify(self, artifact: Path) -> None:
        result = verify(artifact, self.config.download.hash)
        if result.status == VerifyStatus.SKIPPED:
            self.on_log(self._translate("IO.Checksum.Skipped"))
            return
        if result.status == VerifyStatus.MATCH:
            self.on_log(self._translate("IO.Checksum.Verified", checksum=result.actual))
            return

        if result.status == VerifyStatus.MISMATCH:
            self.on_log(self._translate(
                "IO.Checksum.Mismatch", expected=result.expected, actual=result.actual
            ))
        else:
            self.on_log(self._translate("IO.Checksum.Error", path=str(artifact), error=result.reason))

        if self.confirm(result):
            self.on_log(self._translate("IO.Checksum.Override"))
            return

        try:
            artifact.unlink(missing_ok=True)
        except OSError as e:
            _logging.error(f"Failed to delete {artifact}: {e}")
            self.on_log(self._translate("IO.File.DeleteError", path=str(artifact), error=str(e)))
        else:
            self.on_log(self._translate("IO.File.Deleted", path=str(artifact)))
        self._finish(SetupStage.ABORTED)
        raise InstallAborted(f"Installation aborted after failed verification of {artifact.name}")

    def _copy_info_file(self) -> None:
        source = self.config.resource(INFO_FILE_NAME)
        if not source.is_file():
            return
        copied = copy_resource(source, self.install_dir, INFO_FILE_NAME)
        if copied is not None:
            self.on_log(self._translate("IO.File.Copied", source=str(source), destination=str(copied)))

    def _write_uninstall_config(self) -> None:
        try:
            path = save_uninstall_config(self.state, self.uninstall_config_path)
        except OSError as e:
            _logging.error(f"Failed to write uninstall config: {e}")
            self.on_log(self._translate("Progress.Config.CreateError", error=str(e)))
            return
        self.on_log(self._translate("Progress.Config.Created", path=str(path)))


def launch_application(state: InstallationState, platform: Platform | None = None) -> bool:
    """Open the installed launcher recorded in state.

    Returns:
        True if a launch was attempted, False if there is nothing to launch
    """
    target = state.application_to_launch
    if target is None or not Path(target).exists():
        _logging.warning(f"Nothing to launch: {target}")
        return False

    platform = platform if platform is not None else detect_platform()
    _logging.debug(f"Launching {target}")
    try:
        if platform == Platform.WINDOWS:
            os.startfile(str(target))
        elif platform == Platform.MACOS:
            subprocess.Popen(["open", str(target)])
        else:
            subprocess.Popen([str(target)], cwd=str(Path(target).parent))
    except OSError as e:
        _logging.error(f"Failed to launch {target}: {e}")
        return False
    return True


__all__ = ["SetupStage", "SetupManager", "launch_application"]
