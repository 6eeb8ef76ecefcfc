"""Tests for the SetupManager state machine."""

import dataclasses
import hashlib
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from appinstaller.download import Downloader
from appinstaller.errors import InstallAborted, NetworkError
from appinstaller.paths import Platform
from appinstaller.platforms import LinuxSetup
from appinstaller.setup_manager import SetupManager, SetupStage, launch_application
from appinstaller.state import InstallationState

PAYLOAD = b"jar-bytes" * 100


@pytest.fixture
def session(fake_session, make_response):
    fake_session.get.return_value = make_response(
        chunks=[PAYLOAD], headers={"Content-Length": str(len(PAYLOAD))}
    )
    return fake_session


@pytest.fixture
def make_manager(installer_config, state, session, desktop_dir, temp_dir, chmod_ok):
    def _make(config=None, **kwargs):
        config = config or installer_config
        kwargs.setdefault("platform", Platform.LINUX)
        kwargs.setdefault("downloader", Downloader(session=session))
        kwargs.setdefault("strategy", LinuxSetup(config, state, desktop_dir=desktop_dir))
        kwargs.setdefault("uninstall_config_path", temp_dir / "config" / ".test_app_config.yaml")
        return SetupManager(config, state, **kwargs)

    return _make


def _with_hash(config, digest: str):
    return dataclasses.replace(config, download=dataclasses.replace(config.download, hash=digest))


class TestSetupManagerRun:
    def test_full_install(self, make_manager, state, temp_dir, desktop_dir):
        logs = []
        completed = []
        manager = make_manager(on_log=logs.append, on_complete=completed.append)

        stage = manager.run()

        assert stage == SetupStage.COMPLETE
        assert completed == [SetupStage.COMPLETE]
        assert state.install_path.is_dir()
        assert (state.install_path / "client.jar").read_bytes() == PAYLOAD
        assert (state.install_path / "start.sh").exists()
        assert (state.install_path / "info.txt").read_text(encoding="utf-8") == "info"
        assert (desktop_dir / "testapp.desktop").exists()

        persisted = yaml.safe_load((temp_dir / "config" / ".test_app_config.yaml").read_text(encoding="utf-8"))
        assert persisted["installDir"] == str(state.install_path)
        assert persisted["desktopShortcut"] == str(desktop_dir / "testapp.desktop")
        assert any("Installation completed" in line for line in logs)

    def test_creates_missing_start_menu_dir(self, make_manager, state):
        assert not state.start_menu_path.exists()
        make_manager().run()
        assert state.start_menu_path.is_dir()

    def test_download_failure_stops_before_setup(self, make_manager, session, make_response, state):
        session.get.return_value = make_response(status_code=503)
        strategy = MagicMock()
        completed = []

        manager = make_manager(strategy=strategy, on_complete=completed.append)

        assert manager.run() == SetupStage.FAILED
        assert completed == [SetupStage.FAILED]
        assert isinstance(manager.error, NetworkError)
        strategy.setup.assert_not_called()

    def test_cancel_before_start(self, make_manager, session, make_response):
        session.get.return_value = make_response(chunks=[b"a", b"b"])
        strategy = MagicMock()
        manager = make_manager(strategy=strategy)
        manager.cancel()

        assert manager.run() == SetupStage.CANCELLED
        strategy.setup.assert_not_called()

    def test_existing_download_is_reused(self, make_manager, session, state):
        state.install_path.mkdir(parents=True)
        (state.install_path / "client.jar").write_bytes(PAYLOAD)
        state.required_space_bytes = len(PAYLOAD)

        assert make_manager().run() == SetupStage.COMPLETE
        session.get.assert_not_called()

    def test_matching_checksum(self, make_manager, installer_config):
        config = _with_hash(installer_config, hashlib.sha256(PAYLOAD).hexdigest())
        confirm = MagicMock()

        assert make_manager(config=config, confirm=confirm).run() == SetupStage.COMPLETE
        confirm.assert_not_called()

    def test_mismatch_override_continues(self, make_manager, installer_config):
        config = _with_hash(installer_config, "0" * 64)
        confirm = MagicMock(return_value=True)
        logs = []

        stage = make_manager(config=config, confirm=confirm, on_log=logs.append).run()

        assert stage == SetupStage.COMPLETE
        confirm.assert_called_once()
        assert any("Checksum mismatch" in line for line in logs)

    def test_mismatch_abort_deletes_file(self, make_manager, installer_config, state):
        config = _with_hash(installer_config, "0" * 64)
        strategy = MagicMock()
        completed = []
        manager = make_manager(
            config=config, strategy=strategy, confirm=lambda _r: False, on_complete=completed.append
        )

        with pytest.raises(InstallAborted):
            manager.run()

        assert manager.stage == SetupStage.ABORTED
        assert completed == [SetupStage.ABORTED]
        assert not (state.install_path / "client.jar").exists()
        strategy.setup.assert_not_called()

    def test_unsupported_platform_writes_nothing(self, installer_config, state, session, temp_dir):
        manager = SetupManager(
            installer_config,
            state,
            platform=Platform.UNSUPPORTED,
            downloader=Downloader(session=session),
            uninstall_config_path=temp_dir / "cfg.yaml",
        )

        assert manager.run() == SetupStage.FAILED
        assert not state.install_path.exists()
        session.get.assert_not_called()

    def test_resolved_strategy_targets_the_written_uninstall_config(
        self, installer_config, state, session, temp_dir
    ):
        path = temp_dir / "config" / ".test_app_config.yaml"
        manager = SetupManager(
            installer_config,
            state,
            platform=Platform.LINUX,
            downloader=Downloader(session=session),
            uninstall_config_path=path,
        )

        assert manager._resolve_strategy().uninstall_config_path == path

    def test_uninstall_config_write_failure_is_not_fatal(self, make_manager, temp_dir):
        blocked = temp_dir / "blocked"
        blocked.write_text("", encoding="utf-8")
        logs = []

        stage = make_manager(uninstall_config_path=blocked / "cfg.yaml", on_log=logs.append).run()

        assert stage == SetupStage.COMPLETE
        assert any("Failed to write uninstaller configuration" in line for line in logs)


class TestSetupManagerThread:
    def test_start_runs_in_background(self, make_manager):
        completed = []
        manager = make_manager(on_complete=completed.append)

        worker = manager.start()
        worker.join(timeout=10)

        assert not worker.is_alive()
        assert manager.stage == SetupStage.COMPLETE
        assert completed == [SetupStage.COMPLETE]

    def test_abort_in_background_reports_stage(self, make_manager, installer_config):
        config = _with_hash(installer_config, "0" * 64)
        completed = []
        manager = make_manager(config=config, confirm=lambda _r: False, on_complete=completed.append)

        manager.start().join(timeout=10)

        assert manager.stage == SetupStage.ABORTED
        assert completed == [SetupStage.ABORTED]

    def test_start_twice_rejected(self, make_manager):
        manager = make_manager()
        manager.start().join(timeout=10)
        with pytest.raises(RuntimeError):
            manager.start()


class TestLaunchApplication:
    def test_nothing_to_launch(self):
        assert launch_application(InstallationState(), Platform.LINUX) is False

    def test_linux_runs_script(self, temp_dir: Path):
        script = temp_dir / "start.sh"
        script.write_text("", encoding="utf-8")
        with patch("appinstaller.setup_manager.subprocess.Popen") as mock_popen:
            assert launch_application(InstallationState(application_to_launch=script), Platform.LINUX)
        mock_popen.assert_called_once_with([str(script)], cwd=str(temp_dir))

    def test_macos_uses_open(self, temp_dir: Path):
        bundle = temp_dir / "App.app"
        bundle.mkdir()
        with patch("appinstaller.setup_manager.subprocess.Popen") as mock_popen:
            launch_application(InstallationState(application_to_launch=bundle), Platform.MACOS)
        mock_popen.assert_called_once_with(["open", str(bundle)])
