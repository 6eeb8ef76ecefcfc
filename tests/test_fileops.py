"""Tests for filesystem helpers and the external process runner."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from appinstaller.errors import ExternalProcessError
from appinstaller.execution import CommandResult, run_command
from appinstaller.fileops import (
    copy_directory,
    copy_resource,
    delete_directory,
    delete_path,
    escape_backslashes,
    make_executable,
    render_template,
    write_script,
)


def _make_tree(root: Path) -> None:
    (root / "Contents" / "MacOS").mkdir(parents=True)
    (root / "Contents" / "Resources").mkdir()
    (root / "Contents" / "Info.plist").write_text("plist", encoding="utf-8")
    (root / "Contents" / "MacOS" / "execute.sh").write_text("#!/bin/sh", encoding="utf-8")


class TestRenderTemplate:
    def test_replaces_every_occurrence(self):
        result = render_template("%dirPath% and %dirPath%/%jarPath%", {
            "%dirPath%": "/opt/app",
            "%jarPath%": "/opt/app/client.jar",
        })
        assert result == "/opt/app and /opt/app//opt/app/client.jar"

    def test_values_are_not_regex_interpreted(self):
        result = render_template("X=%installDir%", {"%installDir%": r"C:\$1\(app)"})
        assert result == r"X=C:\$1\(app)"

    def test_unknown_tokens_left_alone(self):
        assert render_template("%other%", {"%dirPath%": "x"}) == "%other%"

    def test_escape_backslashes(self):
        assert escape_backslashes(r"C:\Users\me") == r"C:\\Users\\me"


class TestCopyAndDelete:
    def test_copy_leaves_source_unchanged(self, temp_dir: Path):
        source = temp_dir / "App.app"
        _make_tree(source)
        target = temp_dir / "copy" / "App.app"

        copy_directory(source, target)

        assert (target / "Contents" / "Info.plist").read_text(encoding="utf-8") == "plist"
        assert (target / "Contents" / "Resources").is_dir()
        assert (source / "Contents" / "MacOS" / "execute.sh").exists()

    def test_copy_then_delete_target(self, temp_dir: Path):
        source = temp_dir / "src"
        _make_tree(source)
        target = temp_dir / "dst"
        copy_directory(source, target)

        delete_directory(target)

        assert not target.exists()
        assert sorted(p.relative_to(source) for p in source.rglob("*")) == [
            Path("Contents"),
            Path("Contents/Info.plist"),
            Path("Contents/MacOS"),
            Path("Contents/MacOS/execute.sh"),
            Path("Contents/Resources"),
        ]

    def test_copy_overwrites_existing_files(self, temp_dir: Path):
        source = temp_dir / "src"
        _make_tree(source)
        target = temp_dir / "dst"
        (target / "Contents").mkdir(parents=True)
        (target / "Contents" / "Info.plist").write_text("old", encoding="utf-8")

        copy_directory(source, target)

        assert (target / "Contents" / "Info.plist").read_text(encoding="utf-8") == "plist"

    def test_delete_path_file_and_directory(self, temp_dir: Path):
        file_path = temp_dir / "a.desktop"
        file_path.write_text("x", encoding="utf-8")
        bundle = temp_dir / "A.app"
        _make_tree(bundle)

        delete_path(file_path)
        delete_path(bundle)

        assert not file_path.exists()
        assert not bundle.exists()


class TestScripts:
    def test_write_script(self, temp_dir: Path):
        path = write_script(temp_dir, "start.sh", "echo hi")
        assert path == temp_dir / "start.sh"
        assert path.read_text(encoding="utf-8") == "echo hi"

    def test_write_script_executable_runs_chmod(self, temp_dir: Path, chmod_ok):
        write_script(temp_dir, "start.sh", "echo hi", executable=True)
        chmod_ok.assert_called_once_with(["chmod", "+x", str(temp_dir / "start.sh")], timeout=10)

    def test_make_executable_reports_failure(self, temp_dir: Path):
        failed = CommandResult(args=["chmod"], returncode=1, stderr="denied")
        with patch("appinstaller.fileops.run_command", return_value=failed):
            result = make_executable(temp_dir / "x.sh")
        assert result.returncode == 1
        assert result.stderr == "denied"

    def test_copy_resource_missing(self, temp_dir: Path):
        assert copy_resource(temp_dir / "nope.png", temp_dir, "icon.png") is None

    def test_copy_resource(self, temp_dir: Path, resources_dir: Path):
        target_dir = temp_dir / "out"
        target_dir.mkdir()
        copied = copy_resource(resources_dir / "assets" / "icon.png", target_dir, "icon.png")
        assert copied == target_dir / "icon.png"
        assert copied.read_bytes() == b"png"


class TestRunCommand:
    def test_success(self):
        process = MagicMock()
        process.communicate.return_value = ("out\n", "")
        process.returncode = 0
        with patch("appinstaller.execution.subprocess.Popen", return_value=process):
            result = run_command(["chmod", "+x", "f"], timeout=10)
        assert result.ok
        assert result.stdout == "out"

    def test_timeout_kills_process(self):
        process = MagicMock()
        process.communicate.side_effect = [
            subprocess.TimeoutExpired(cmd="chmod", timeout=10),
            ("", ""),
        ]
        process.returncode = -9
        with patch("appinstaller.execution.subprocess.Popen", return_value=process):
            result = run_command(["chmod", "+x", "f"], timeout=10)
        process.kill.assert_called_once()
        assert result.timed_out
        assert not result.ok

    def test_missing_program(self):
        with patch("appinstaller.execution.subprocess.Popen", side_effect=FileNotFoundError("nope")):
            result = run_command(["powershell.exe"])
        assert result.returncode == 1
        assert "nope" in result.stderr

    def test_check_raises_with_stderr(self):
        result = CommandResult(args=["powershell.exe"], returncode=2, stderr="denied")
        with pytest.raises(ExternalProcessError, match="exit code 2") as exc_info:
            result.check("PowerShell")
        assert exc_info.value.stderr == "denied"

    def test_check_passes_through_success(self):
        result = CommandResult(args=["chmod"], returncode=0)
        assert result.check("chmod") is result
