"""
Pytest configuration and shared fixtures for KatalonKit tests.
"""

import io
import json
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Dict, List

import pytest


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Shared Test Fixtures
# ============================================================================

RELEASES_URL = "https://example.com/releases.json"
PACKAGE_FOLDER = "Katalon_Studio_Linux_64-7.0.0"
LAUNCH_SCRIPT = "#!/bin/sh\necho katalon started\n"


class RecordingLog:
    """Log sink that keeps every line it receives."""

    def __init__(self):
        self.lines: List[str] = []

    def __call__(self, line: str) -> None:
        self.lines.append(line)

    def contains(self, text: str) -> bool:
        return any(text in line for line in self.lines)


@pytest.fixture
def build_log() -> RecordingLog:
    """Recording line sink standing in for the build host's log."""
    return RecordingLog()


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Point the package cache at a temporary home directory."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("KATALONKIT_HOME", str(fake_home))
    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture
def releases_url(monkeypatch) -> str:
    """Route manifest lookups to a fixed test URL."""
    monkeypatch.setenv("KATALONKIT_RELEASES_URL", RELEASES_URL)
    return RELEASES_URL


def _zip_bytes(files: Dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            info = zipfile.ZipInfo(name)
            info.external_attr = 0o755 << 16
            zf.writestr(info, content)
    return buffer.getvalue()


def _tar_gz_bytes(files: Dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


@pytest.fixture
def package_archive() -> Callable[..., bytes]:
    """
    Factory building an in-memory Katalon Studio package.

    Usage: package_archive("zip") or package_archive("tar.gz", folder="X")
    """

    def build(fmt: str = "tar.gz", folder: str = PACKAGE_FOLDER) -> bytes:
        files = {
            f"{folder}/katalon": LAUNCH_SCRIPT,
            f"{folder}/configuration/config.ini": "osgi.instance.area=@none\n",
        }
        if fmt == "zip":
            return _zip_bytes(files)
        return _tar_gz_bytes(files)

    return build


@pytest.fixture
def manifest() -> Callable[..., str]:
    """Factory for a JSON release manifest body."""

    def build(*entries: dict) -> str:
        if not entries:
            entries = (
                {
                    "version": "7.0.0",
                    "os": "linux",
                    "url": f"https://example.com/{PACKAGE_FOLDER}.tar.gz",
                    "filename": f"{PACKAGE_FOLDER}.tar.gz",
                },
                {
                    "version": "7.0.0",
                    "os": "windows 64",
                    "url": "https://example.com/Katalon_Studio_Windows_64-7.0.0.zip",
                    "filename": "Katalon_Studio_Windows_64-7.0.0.zip",
                },
            )
        return json.dumps(list(entries))

    return build
