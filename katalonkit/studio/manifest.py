"""
Katalon Studio release manifest.

The manifest is a JSON array published alongside Katalon Studio. Each entry
describes one downloadable package::

    {
        "version": "7.0.0",
        "os": "linux",
        "url": "https://.../Katalon_Studio_Linux_64-7.0.0.tar.gz",
        "filename": "Katalon_Studio_Linux_64-7.0.0.tar.gz",
        "containingFolder": "Katalon_Studio_Linux_64-7.0.0"
    }

``containingFolder`` is optional; when absent it is derived from the file
name. The manifest is fetched fresh on every resolution.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from katalonkit.core.download import DEFAULT_TIMEOUT, fetch_json
from katalonkit.core.exceptions import ManifestError

logger = logging.getLogger(__name__)

DEFAULT_RELEASES_URL = (
    "https://raw.githubusercontent.com/katalon-studio/katalon-studio/master/releases.json"
)
RELEASES_URL_ENV_VAR = "KATALONKIT_RELEASES_URL"

# Checked in order, first match wins
ARCHIVE_SUFFIXES = (".zip", ".tar.gz")

REQUIRED_FIELDS = ("version", "os", "url", "filename")


def derive_folder_name(filename: str) -> str:
    """
    Derive the folder an archive expands into from its file name.

    Example:
        >>> derive_folder_name("Katalon_Studio_Linux_64-7.0.0.tar.gz")
        'Katalon_Studio_Linux_64-7.0.0'
        >>> derive_folder_name("katalon.dmg")
        'katalon.dmg'
    """
    for suffix in ARCHIVE_SUFFIXES:
        if filename.endswith(suffix):
            return filename[: -len(suffix)]
    return filename


@dataclass(frozen=True)
class ReleaseEntry:
    """One package listed in the release manifest."""

    version: str
    os: str
    url: str
    filename: str
    containing_folder: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReleaseEntry":
        """
        Create an entry from a decoded manifest object.

        Unknown fields are ignored. A missing ``containingFolder`` is derived
        from ``filename``.

        Raises:
            ManifestError: If a required field is missing
        """
        if not isinstance(data, dict):
            raise ManifestError(f"Manifest entry is not an object: {data!r}")

        missing = [name for name in REQUIRED_FIELDS if data.get(name) is None]
        if missing:
            raise ManifestError(
                f"Manifest entry is missing required fields {', '.join(missing)}: {data!r}"
            )

        filename = str(data["filename"])
        containing_folder = data.get("containingFolder")
        return cls(
            version=str(data["version"]),
            os=str(data["os"]),
            url=str(data["url"]),
            filename=filename,
            containing_folder=str(containing_folder)
            if containing_folder is not None
            else derive_folder_name(filename),
        )

    def matches(self, version: str, os_name: str) -> bool:
        """Exact version match and case-insensitive OS match."""
        return self.version == version and self.os.lower() == os_name.lower()


def get_releases_url() -> str:
    """Get the manifest URL, honoring the ``KATALONKIT_RELEASES_URL`` override."""
    return os.environ.get(RELEASES_URL_ENV_VAR) or DEFAULT_RELEASES_URL


def parse_manifest(data: Any) -> List[ReleaseEntry]:
    """
    Decode a manifest document into entries, keeping manifest order.

    Raises:
        ManifestError: If the document is not a list or an entry is invalid
    """
    if not isinstance(data, list):
        raise ManifestError(
            f"Release manifest must be a JSON array, got {type(data).__name__}"
        )
    return [ReleaseEntry.from_dict(item) for item in data]


def find_release(
    entries: List[ReleaseEntry], version: str, os_name: str
) -> Optional[ReleaseEntry]:
    """
    Return the first entry for (version, OS), or None.

    Later duplicates of the same pair are ignored.
    """
    for entry in entries:
        if entry.matches(version, os_name):
            return entry
    return None


class ManifestResolver:
    """
    Resolves a Katalon Studio version to a downloadable package.

    Example:
        >>> resolver = ManifestResolver(log=print)
        >>> entry = resolver.resolve_release("7.0.0", "linux")
        >>> entry.url if entry else None
    """

    def __init__(
        self,
        releases_url: Optional[str] = None,
        log: Optional[Callable[[str], None]] = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """
        Initialize resolver.

        Args:
            releases_url: Manifest URL (default: get_releases_url())
            log: Line sink for build log messages
            timeout: Request timeout in seconds
        """
        self.releases_url = releases_url or get_releases_url()
        self.log = log or (lambda line: None)
        self.timeout = timeout

    def fetch_releases(self) -> List[ReleaseEntry]:
        """
        Download and decode the manifest.

        Raises:
            DownloadError: If the manifest cannot be fetched
            ManifestError: If the manifest cannot be decoded
        """
        data = fetch_json(self.releases_url, timeout=self.timeout)
        releases = parse_manifest(data)
        self.log(f"Number of releases: {len(releases)}")
        return releases

    def resolve_release(self, version: str, os_name: str) -> Optional[ReleaseEntry]:
        """
        Find the package for a version on an OS.

        Args:
            version: Exact version string
            os_name: Manifest OS label (compared case-insensitively)

        Returns:
            Matching ReleaseEntry, or None if the manifest has none

        Raises:
            DownloadError: If the manifest cannot be fetched
            ManifestError: If the manifest cannot be decoded
        """
        self.log(f"Retrieve Katalon Studio version: {version}, OS: {os_name}")

        entry = find_release(self.fetch_releases(), version, os_name)
        if entry is None:
            logger.debug(f"No release for version {version!r} on {os_name!r}")
            return None

        self.log(f"Katalon Studio is hosted at {entry.url}.")
        return entry


__all__ = [
    "DEFAULT_RELEASES_URL",
    "RELEASES_URL_ENV_VAR",
    "ReleaseEntry",
    "ManifestResolver",
    "derive_folder_name",
    "find_release",
    "get_releases_url",
    "parse_manifest",
]
