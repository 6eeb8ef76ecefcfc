"""Pytest fixtures and utilities for appinstaller tests."""

import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest

from appinstaller.config import validate_config
from appinstaller.execution import CommandResult
from appinstaller.state import InstallationState


def make_config_data(**overrides) -> dict:
    """Minimal but complete raw config, with every template token in use."""
    data = {
        "app_name": "Test App",
        "download": {
            "link": "https://example.com/client.jar",
            "file_name": "client.jar",
            "sha256": "",
        },
        "install": {
            "batch": {"file_name": "start.bat", "content": "cd %dirPath%\njava -jar %jarPath%"},
            "bash": {"file_name": "start.sh", "content": "cd %dirPath%\njava -jar %jarPath%"},
            "exe": {
                "file_name": "start.exe",
                "resource_path": "exe/start.exe",
                "powershell": "$s='%shortcutPath%'; $t='%exePath%'; $i='%iconPath%'",
            },
            "linux_desktop": {
                "file_name": "testapp.desktop",
                "content": "[Desktop Entry]\nExec=java -jar %jarPath%\nPath=%dirPath%",
            },
            "macos_app": {
                "file_name": "TestApp.app",
                "info_plist": "<string>%iconPath%</string>",
                "script": "cd %dirPath% && java -jar %jarPath%",
            },
        },
        "uninstall": {
            "batch": {
                "file_name": "uninstall.bat",
                "content": "del %desktopShortcut%\ndel %startmenuShortcut%\ndel %configPath%\nrmdir %installDir%",
            },
            "bash": {
                "file_name": "uninstall.sh",
                "content": "rm %desktopShortcut%\nrm %startmenuShortcut%\nrm -r %installDir%\nrm %configPath%",
            },
            "zsh": {
                "file_name": "Uninstall.app",
                "content": "rm -r %desktopShortcut% %startmenuShortcut% %installDir% %configPath%",
            },
        },
    }
    data.update(overrides)
    return data


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def resources_dir(temp_dir: Path) -> Path:
    """Bundled resources: icons, the Windows launcher exe and info.txt."""
    resources = temp_dir / "resources"
    (resources / "assets").mkdir(parents=True)
    (resources / "exe").mkdir()
    (resources / "assets" / "icon.ico").write_bytes(b"ico")
    (resources / "assets" / "icon.png").write_bytes(b"png")
    (resources / "assets" / "icon.icns").write_bytes(b"icns")
    (resources / "exe" / "start.exe").write_bytes(b"MZ")
    (resources / "info.txt").write_text("info", encoding="utf-8")
    return resources


@pytest.fixture
def installer_config(resources_dir: Path):
    """Validated InstallerConfig reading resources from resources_dir."""
    return validate_config(make_config_data(resources_dir=str(resources_dir)))


@pytest.fixture
def state(temp_dir: Path) -> InstallationState:
    """Installation choices pointing into the temp directory."""
    return InstallationState(
        install_path=temp_dir / "install",
        start_menu_path=temp_dir / "start_menu",
    )


@pytest.fixture
def desktop_dir(temp_dir: Path) -> Path:
    desktop = temp_dir / "Desktop"
    desktop.mkdir()
    return desktop


@pytest.fixture
def make_response():
    """Factory for fake streaming requests responses."""

    def _make(status_code: int = 200, chunks: list[bytes] | None = None, headers: dict | None = None):
        response = MagicMock()
        response.status_code = status_code
        response.headers = headers if headers is not None else {}
        response.raw = MagicMock()
        response.iter_content.return_value = iter(chunks or [])
        return response

    return _make


@pytest.fixture
def fake_session(make_response):
    """A requests.Session stand-in whose get() returns a 200 with no body."""
    session = MagicMock()
    session.get.return_value = make_response()
    return session


@pytest.fixture
def chmod_ok() -> Generator[MagicMock, None, None]:
    """Patch out the chmod helper process."""
    with patch("appinstaller.fileops.run_command") as mock_run:
        mock_run.side_effect = lambda args, timeout=None: CommandResult(args=args, returncode=0)
        yield mock_run
