"""Tests for CLI interface."""

import os
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from bigfiles.cli import app

runner = CliRunner()

MB = 1024**2


def make_file(path: Path, size: int) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.truncate(size)


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "list-big-files version" in result.stdout

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "list-big-files version" in result.stdout


class TestHelp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "DIRECTORY" in result.stdout
        assert "SIZE" in result.stdout

    def test_short_help_flag(self):
        result = runner.invoke(app, ["-h"])
        assert result.exit_code == 0
        assert "Usage" in result.stdout

    def test_help_word(self):
        result = runner.invoke(app, ["help"])
        assert result.exit_code == 0
        assert "Usage" in result.stdout
        assert "Scanning" not in result.stdout


class TestScanCommand:
    def test_lists_large_files(self, tmp_path):
        make_file(tmp_path / "big.bin", 3 * MB)
        make_file(tmp_path / "small.bin", 10)

        result = runner.invoke(app, [str(tmp_path), "1MB"])
        assert result.exit_code == 0
        assert "Size (MB)" in result.stdout
        assert "3.00" in result.stdout
        assert "Total: 1 files (scanned 2 files)" in result.stdout

    def test_gigabyte_threshold_shows_gb_column(self, tmp_path):
        make_file(tmp_path / "huge.bin", 1024**3)

        result = runner.invoke(app, [str(tmp_path), "1G"])
        assert result.exit_code == 0
        assert "Size (GB)" in result.stdout
        assert "1.00" in result.stdout

    def test_no_matches_still_succeeds(self, tmp_path):
        make_file(tmp_path / "small.bin", 10)

        result = runner.invoke(app, [str(tmp_path)])
        assert result.exit_code == 0
        assert "Total: 0 files (scanned 1 files)" in result.stdout

    def test_scan_header_and_timing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, [".", "50"])
        assert result.exit_code == 0
        assert "Scanning" in result.stdout
        assert "50 MB" in result.stdout
        assert "Scanned in:" in result.stdout

    def test_workers_option(self, tmp_path):
        make_file(tmp_path / "big.bin", 2 * MB)

        result = runner.invoke(app, [str(tmp_path), "1", "--workers", "1"])
        assert result.exit_code == 0
        assert "Total: 1 files" in result.stdout

    def test_workers_from_environment(self, tmp_path):
        make_file(tmp_path / "big.bin", 2 * MB)

        result = runner.invoke(app, [str(tmp_path), "1"], env={"BIGFILES_WORKERS": "2"})
        assert result.exit_code == 0
        assert "Total: 1 files" in result.stdout

    def test_rejects_zero_workers(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path), "--workers", "0"])
        assert result.exit_code != 0

    def test_verbose_logs_skipped_entries(self, tmp_path):
        make_file(tmp_path / "locked" / "hidden.bin", 10)
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.path.basename(os.fspath(path)) == "locked":
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return real_scandir(path)

        with patch("os.scandir", side_effect=fake_scandir):
            quiet = runner.invoke(app, [str(tmp_path), "0"])
            verbose = runner.invoke(app, [str(tmp_path), "0", "--verbose"])

        assert quiet.exit_code == 0
        assert verbose.exit_code == 0
        assert "Skipped 1 unreadable entries" in quiet.stdout
        assert "Skipping" not in quiet.output
        assert "Skipping" in verbose.output


class TestErrors:
    def test_invalid_size(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path), "5XB"])
        assert result.exit_code == 1
        assert "Invalid size" in result.output
        assert "Scanning" not in result.stdout

    def test_negative_size(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path), "-5MB"])
        assert result.exit_code != 0

    def test_missing_directory(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Cannot scan" in result.output
        assert "Total:" not in result.stdout

    def test_negative_size_after_double_dash(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path), "--", "-5MB"])
        assert result.exit_code == 1
        assert "Invalid size" in result.output

    def test_size_past_float_range(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path), "9" * 400])
        assert result.exit_code == 1
        assert "Invalid size" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
