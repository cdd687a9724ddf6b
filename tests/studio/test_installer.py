"""
Tests for the Katalon Studio archive installer.
"""

import tempfile

import pytest
import responses

from katalonkit.core.exceptions import (
    ArchiveExtractionError,
    DownloadError,
    ReleaseNotFoundError,
    UnsupportedArchiveFormat,
)
from katalonkit.core.filesystem import extract_tar_gz, extract_zip
from katalonkit.studio.installer import ArchiveInstaller, select_extractor

LINUX_URL = "https://example.com/Katalon_Studio_Linux_64-7.0.0.tar.gz"
WINDOWS_URL = "https://example.com/Katalon_Studio_Windows_64-7.0.0.zip"


def fixed_os(label):
    """Build an OS detector that always reports ``label``."""

    def detect(log=None):
        return label

    return detect


@pytest.fixture
def temp_root(tmp_path, monkeypatch):
    """Redirect temporary files so leftovers can be inspected."""
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


class TestSelectExtractor:
    """Tests for select_extractor()."""

    def test_zip(self):
        assert select_extractor(WINDOWS_URL) is extract_zip

    def test_tar_gz(self):
        assert select_extractor(LINUX_URL) is extract_tar_gz

    def test_substring_match(self):
        """Test the marker may appear anywhere in the URL."""
        assert select_extractor("https://cdn.example.com/k.zip?token=abc") is extract_zip

    def test_unsupported(self):
        """Test other formats are rejected."""
        with pytest.raises(UnsupportedArchiveFormat, match="Unsupported archive format"):
            select_extractor("https://example.com/Katalon.dmg")


class TestArchiveInstaller:
    """Tests for ArchiveInstaller.install_archive()."""

    @responses.activate
    def test_install_tar_gz(
        self, tmp_path, releases_url, manifest, package_archive, build_log, temp_root
    ):
        """Test a Linux package is downloaded and extracted."""
        responses.add(responses.GET, releases_url, body=manifest(), status=200)
        responses.add(responses.GET, LINUX_URL, body=package_archive("tar.gz"), status=200)
        target = tmp_path / "7.0.0"
        target.mkdir()

        installer = ArchiveInstaller(log=build_log, os_detector=fixed_os("linux"))
        installer.install_archive("7.0.0", target)

        assert (target / "Katalon_Studio_Linux_64-7.0.0" / "katalon").is_file()
        assert build_log.contains(
            f"Downloading Katalon Studio from {LINUX_URL}. It may take a few minutes."
        )
        assert list(temp_root.iterdir()) == []

    @responses.activate
    def test_install_zip(self, tmp_path, releases_url, manifest, package_archive, temp_root):
        """Test a Windows package is extracted with the zip strategy."""
        responses.add(responses.GET, releases_url, body=manifest(), status=200)
        responses.add(
            responses.GET,
            WINDOWS_URL,
            body=package_archive("zip", folder="Katalon_Studio_Windows_64-7.0.0"),
            status=200,
        )
        target = tmp_path / "7.0.0"
        target.mkdir()

        installer = ArchiveInstaller(os_detector=fixed_os("Windows 64"))
        installer.install_archive("7.0.0", target)

        assert (
            target / "Katalon_Studio_Windows_64-7.0.0" / "configuration" / "config.ini"
        ).is_file()

    @responses.activate
    def test_version_not_found(self, tmp_path, releases_url, manifest):
        """Test a missing version fails before any download."""
        responses.add(responses.GET, releases_url, body=manifest(), status=200)

        installer = ArchiveInstaller(os_detector=fixed_os("linux"))

        with pytest.raises(ReleaseNotFoundError) as exc_info:
            installer.install_archive("7.0.1", tmp_path)

        assert exc_info.value.version == "7.0.1"
        assert exc_info.value.os_name == "linux"
        assert len(responses.calls) == 1

    @responses.activate
    def test_unsupported_format_not_downloaded(self, tmp_path, releases_url, manifest):
        """Test an unsupported package is rejected before downloading."""
        responses.add(
            responses.GET,
            releases_url,
            body=manifest(
                {
                    "version": "7.0.0",
                    "os": "macos (app)",
                    "url": "https://example.com/Katalon_Studio.dmg",
                    "filename": "Katalon_Studio.dmg",
                }
            ),
            status=200,
        )

        installer = ArchiveInstaller(os_detector=fixed_os("macos (app)"))

        with pytest.raises(UnsupportedArchiveFormat):
            installer.install_archive("7.0.0", tmp_path)

        assert len(responses.calls) == 1

    @responses.activate
    def test_download_failure_removes_temp_file(
        self, tmp_path, releases_url, manifest, temp_root
    ):
        """Test a failed download leaves no temporary archive behind."""
        responses.add(responses.GET, releases_url, body=manifest(), status=200)
        responses.add(responses.GET, LINUX_URL, status=404)

        installer = ArchiveInstaller(os_detector=fixed_os("linux"))

        with pytest.raises(DownloadError):
            installer.install_archive("7.0.0", tmp_path)

        assert list(temp_root.iterdir()) == []

    @responses.activate
    def test_corrupt_archive(self, tmp_path, releases_url, manifest, temp_root):
        """Test a corrupt archive raises ArchiveExtractionError and is removed."""
        responses.add(responses.GET, releases_url, body=manifest(), status=200)
        responses.add(responses.GET, LINUX_URL, body=b"not an archive", status=200)

        installer = ArchiveInstaller(os_detector=fixed_os("linux"))

        with pytest.raises(ArchiveExtractionError):
            installer.install_archive("7.0.0", tmp_path)

        assert list(temp_root.iterdir()) == []

    @responses.activate
    def test_os_detector_receives_log(self, tmp_path, releases_url, manifest, build_log):
        """Test OS detection reports through the build log."""
        responses.add(responses.GET, releases_url, body=manifest(), status=200)
        seen = []

        def detect(log=None):
            seen.append(log)
            return "linux"

        installer = ArchiveInstaller(log=build_log, os_detector=detect)

        with pytest.raises(ReleaseNotFoundError):
            installer.install_archive("6.9.9", tmp_path)

        assert seen == [build_log]
