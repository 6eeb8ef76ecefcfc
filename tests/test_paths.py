"""Tests for platform detection and OS-specific directories."""

from pathlib import Path

import pytest

from appinstaller.paths import (
    Platform,
    detect_platform,
    get_default_install_path,
    get_desktop_directory,
    get_start_menu_directory,
    get_start_menu_root,
    get_uninstall_config_path,
    get_xdg_user_dir,
)


@pytest.fixture
def fake_home(temp_dir: Path, monkeypatch) -> Path:
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: temp_dir))
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    return temp_dir


class TestDetectPlatform:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Windows", Platform.WINDOWS),
            ("Linux", Platform.LINUX),
            ("Darwin", Platform.MACOS),
            ("Mac OS X", Platform.MACOS),
            ("FreeBSD", Platform.UNSUPPORTED),
        ],
    )
    def test_names(self, name, expected):
        assert detect_platform(name) == expected

    def test_darwin_is_not_windows(self):
        """'darwin' contains 'win' but must map to macOS."""
        assert detect_platform("darwin") == Platform.MACOS


class TestUninstallConfigPath:
    def test_windows(self, fake_home, monkeypatch):
        monkeypatch.setenv("APPDATA", str(fake_home / "AppData"))
        path = get_uninstall_config_path("My App", Platform.WINDOWS)
        assert path == fake_home / "AppData" / "my_app_config.yaml"

    def test_linux(self, fake_home):
        path = get_uninstall_config_path("My App", Platform.LINUX)
        assert path == fake_home / ".config" / ".my_app_config.yaml"

    def test_macos(self, fake_home):
        path = get_uninstall_config_path("My App", Platform.MACOS)
        assert path == fake_home / "Library" / "Application Support" / ".my_app_config.yaml"


class TestDirectories:
    def test_default_install_path_linux(self, fake_home):
        assert get_default_install_path("App", Platform.LINUX) == fake_home / ".local" / "share" / "App"

    def test_default_install_path_linux_xdg(self, fake_home, monkeypatch):
        monkeypatch.setenv("XDG_DATA_HOME", str(fake_home / "data"))
        assert get_default_install_path("App", Platform.LINUX) == fake_home / "data" / "App"

    def test_default_install_path_windows(self, fake_home, monkeypatch):
        monkeypatch.setenv("APPDATA", str(fake_home / "AppData"))
        assert get_default_install_path("App", Platform.WINDOWS) == fake_home / "AppData" / "App"

    def test_start_menu_windows_has_app_folder(self, fake_home, monkeypatch):
        monkeypatch.setenv("APPDATA", str(fake_home / "AppData"))
        root = get_start_menu_root(Platform.WINDOWS)
        assert root == fake_home / "AppData" / "Microsoft" / "Windows" / "Start Menu" / "Programs"
        assert get_start_menu_directory("App", Platform.WINDOWS) == root / "App"

    def test_start_menu_linux_is_shared_root(self, fake_home):
        root = get_start_menu_root(Platform.LINUX)
        assert root == fake_home / ".local" / "share" / "applications"
        assert get_start_menu_directory("App", Platform.LINUX) == root

    def test_start_menu_macos(self):
        assert get_start_menu_directory("App", Platform.MACOS) == Path("/Applications")

    def test_desktop_from_xdg_user_dirs(self, fake_home):
        config_dir = fake_home / ".config"
        config_dir.mkdir()
        (config_dir / "user-dirs.dirs").write_text(
            '# comment\nXDG_DESKTOP_DIR="$HOME/Schreibtisch"\n', encoding="utf-8"
        )
        assert get_xdg_user_dir("XDG_DESKTOP_DIR", fake_home) == fake_home / "Schreibtisch"
        assert get_desktop_directory(Platform.LINUX) == fake_home / "Schreibtisch"

    def test_desktop_fallback(self, fake_home):
        assert get_desktop_directory(Platform.LINUX) == fake_home / "Desktop"
        assert get_desktop_directory(Platform.MACOS) == fake_home / "Desktop"
