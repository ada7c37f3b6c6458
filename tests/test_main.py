"""Tests for the command-line entry point."""

import logging
from unittest.mock import patch

import pytest

from halsey import main as cli
from halsey.exceptions import FetchError, InvalidURLError
from halsey.models import MirrorSummary


class TestValidateUrl:
    @pytest.mark.parametrize("url", ["https://x/live/index.m3u8", "http://127.0.0.1:8080/a.m3u8"])
    def test_accepts_absolute_http_urls(self, url):
        assert cli.validate_url(url) == url

    @pytest.mark.parametrize("url", ["index.m3u8", "/live/index.m3u8", "ftp://x/index.m3u8", "https://", "http://[::1"])
    def test_rejects_everything_else(self, url):
        with pytest.raises(InvalidURLError):
            cli.validate_url(url)


class TestParseArgs:
    def test_defaults(self):
        args = cli.parse_args(["download", "https://x/index.m3u8"])
        assert args.command == "download"
        assert args.url == "https://x/index.m3u8"
        assert args.directory == "downloads"
        assert args.playlist_name == "index.m3u8"
        assert args.workers == 1
        assert args.timeout == 10.0

    def test_directory_flag(self):
        args = cli.parse_args(["download", "-d", "mirror", "--workers", "4", "https://x/index.m3u8"])
        assert args.directory == "mirror"
        assert args.workers == 4

    def test_url_is_required(self):
        with pytest.raises(SystemExit) as excinfo:
            cli.parse_args(["download"])
        assert excinfo.value.code == 2

    def test_workers_must_be_positive(self):
        with pytest.raises(SystemExit) as excinfo:
            cli.parse_args(["download", "--workers", "0", "https://x/index.m3u8"])
        assert excinfo.value.code == 2

    @pytest.mark.parametrize("timeout", ["0", "-1", "nan", "soon"])
    def test_timeout_must_be_positive(self, timeout):
        with pytest.raises(SystemExit) as excinfo:
            cli.parse_args(["download", "--timeout", timeout, "https://x/index.m3u8"])
        assert excinfo.value.code == 2

    def test_timeout_flag(self):
        args = cli.parse_args(["download", "--timeout", "2.5", "https://x/index.m3u8"])
        assert args.timeout == 2.5


class TestMain:
    def test_success_returns_zero(self, tmp_path):
        summary = MirrorSummary(playlists=["a"], media_files=["b", "c"])
        with patch.object(cli, "PlaylistDownloader") as downloader_class:
            downloader_class.return_value.download.return_value = summary
            code = cli.main(["download", "-d", str(tmp_path), "https://x/live/index.m3u8"])

        assert code == 0
        downloader_class.return_value.download.assert_called_once_with(
            "https://x/live/index.m3u8", str(tmp_path / "index.m3u8")
        )

    def test_failure_returns_non_zero(self, tmp_path, caplog):
        with patch.object(cli, "PlaylistDownloader") as downloader_class:
            downloader_class.return_value.download.side_effect = FetchError("https://x/a.ts", "timed out")
            with caplog.at_level(logging.ERROR):
                code = cli.main(["download", "-d", str(tmp_path), "https://x/live/index.m3u8"])

        assert code == 1
        assert "timed out" in caplog.text

    def test_invalid_url_writes_nothing(self, tmp_path):
        with patch.object(cli, "PlaylistDownloader") as downloader_class:
            code = cli.main(["download", "-d", str(tmp_path / "out"), "not-a-url"])

        assert code == 1
        downloader_class.assert_not_called()
        assert not (tmp_path / "out").exists()

    def test_environment_supplies_defaults(self, monkeypatch):
        monkeypatch.setenv("OUTPUT_DIR", "from-env")
        monkeypatch.setenv("WORKERS", "3")
        monkeypatch.delenv("TIMEOUT", raising=False)
        args = cli.parse_args(["download", "https://x/index.m3u8"])
        assert args.directory == "from-env"
        assert args.workers == 3
        assert args.timeout == 10.0

    def test_environment_timeout_is_parsed(self, monkeypatch):
        monkeypatch.setenv("TIMEOUT", "30")
        args = cli.parse_args(["download", "https://x/index.m3u8"])
        assert args.timeout == 30.0

    @pytest.mark.parametrize("name, value", [("WORKERS", "-2"), ("WORKERS", "many"), ("TIMEOUT", "0")])
    def test_invalid_environment_values_are_usage_errors(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(SystemExit) as excinfo:
            cli.parse_args(["download", "https://x/index.m3u8"])
        assert excinfo.value.code == 2
