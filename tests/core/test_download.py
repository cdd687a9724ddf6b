"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import pytest
import requests
import responses

from katalonkit.core.download import (
    DownloadProgress,
    download_file,
    fetch_json,
    format_progress,
)
from katalonkit.core.exceptions import DownloadError


class TestFormatProgress:
    """Test format_progress function."""

    def test_format_with_known_size(self):
        """Test formatting progress with known total size."""
        progress = DownloadProgress(
            bytes_downloaded=10485760,  # 10 MB
            total_bytes=104857600,  # 100 MB
            percentage=10.0,
            speed_bps=2097152,  # 2 MB/s
        )

        result = format_progress(progress)

        assert "10.0/100.0 MB" in result
        assert "(10.0%)" in result
        assert "2.0 MB/s" in result

    def test_format_with_unknown_size(self):
        """Test formatting progress with unknown total size."""
        progress = DownloadProgress(
            bytes_downloaded=10485760,
            total_bytes=10485760,
            percentage=0.0,
            speed_bps=1048576,
        )

        result = format_progress(progress)

        assert result == "10.0 MB at 1.0 MB/s"

    def test_str_uses_format(self):
        """Test str() delegates to format_progress."""
        progress = DownloadProgress(1048576, 2097152, 50.0, 1048576)
        assert str(progress) == format_progress(progress)


class TestFetchJson:
    """Test fetch_json function."""

    @responses.activate
    def test_fetch_list(self):
        """Test decoding a JSON array."""
        url = "https://example.com/releases.json"
        responses.add(responses.GET, url, json=[{"version": "7.0.0"}], status=200)

        assert fetch_json(url) == [{"version": "7.0.0"}]

    @responses.activate
    def test_http_error_raises_download_error(self):
        """Test 4xx/5xx responses surface as DownloadError."""
        url = "https://example.com/releases.json"
        responses.add(responses.GET, url, status=404)

        with pytest.raises(DownloadError, match="Failed to fetch"):
            fetch_json(url)

    @responses.activate
    def test_invalid_json_raises_download_error(self):
        """Test a non-JSON body surfaces as DownloadError."""
        url = "https://example.com/releases.json"
        responses.add(responses.GET, url, body="<html>", status=200)

        with pytest.raises(DownloadError, match="Invalid JSON"):
            fetch_json(url)

    @responses.activate
    def test_connection_error_is_not_retried(self):
        """Test transport failures surface immediately without retry."""
        url = "https://example.com/releases.json"
        responses.add(
            responses.GET, url, body=requests.exceptions.ConnectionError("refused")
        )

        with pytest.raises(DownloadError):
            fetch_json(url)

        assert len(responses.calls) == 1

    def test_empty_url(self):
        """Test empty URL raises ValueError."""
        with pytest.raises(ValueError, match="URL cannot be empty"):
            fetch_json("")


class TestDownloadFile:
    """Test download_file function."""

    @responses.activate
    def test_simple_download(self, tmp_path):
        """Test simple download."""
        url = "https://example.com/file.tar.gz"
        content = b"test content"
        destination = tmp_path / "file.tar.gz"

        responses.add(
            responses.GET,
            url,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        result = download_file(url, destination)

        assert result == destination
        assert destination.read_bytes() == content

    @responses.activate
    def test_overwrites_existing_file(self, tmp_path):
        """Test an existing destination is replaced."""
        url = "https://example.com/file.zip"
        destination = tmp_path / "file.zip"
        destination.write_bytes(b"old content that is longer")

        responses.add(responses.GET, url, body=b"new", status=200)

        download_file(url, destination)

        assert destination.read_bytes() == b"new"

    @responses.activate
    def test_creates_parent_directory(self, tmp_path):
        """Test missing parent directories are created."""
        url = "https://example.com/file.zip"
        destination = tmp_path / "nested" / "dir" / "file.zip"

        responses.add(responses.GET, url, body=b"data", status=200)

        download_file(url, destination)

        assert destination.exists()

    @responses.activate
    def test_download_with_progress_callback(self, tmp_path):
        """Test download reports progress."""
        url = "https://example.com/file.bin"
        content = b"x" * 100000
        destination = tmp_path / "file.bin"

        responses.add(
            responses.GET,
            url,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        progress_updates = []
        download_file(url, destination, progress_callback=progress_updates.append)

        assert len(progress_updates) > 0
        assert progress_updates[-1].bytes_downloaded == len(content)

    @responses.activate
    def test_server_error_raises_download_error(self, tmp_path):
        """Test 5xx raises DownloadError."""
        url = "https://example.com/file.zip"
        responses.add(responses.GET, url, status=503)

        with pytest.raises(DownloadError, match="Failed to download"):
            download_file(url, tmp_path / "file.zip")

        assert len(responses.calls) == 1

    def test_empty_url(self, tmp_path):
        """Test empty URL raises ValueError."""
        with pytest.raises(ValueError, match="URL cannot be empty"):
            download_file("", tmp_path / "file")

    def test_empty_destination(self):
        """Test empty destination raises ValueError."""
        with pytest.raises(ValueError, match="Destination path cannot be empty"):
            download_file("https://example.com/file", None)
