"""
Katalon Studio archive installer.

Downloads the package for a version and extracts it into a target directory.
The archive is kept in a temporary file that is removed whether or not
extraction succeeds.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from katalonkit.core.download import DownloadProgress, download_file
from katalonkit.core.exceptions import ReleaseNotFoundError, UnsupportedArchiveFormat
from katalonkit.core.filesystem import extract_tar_gz, extract_zip, temporary_file
from katalonkit.core.platform import detect_os
from katalonkit.studio.manifest import ManifestResolver

logger = logging.getLogger(__name__)

Extractor = Callable[[Path, Path], None]

# Matched as substrings of the download URL, in order
EXTRACTORS = (
    (".zip", extract_zip),
    (".tar.gz", extract_tar_gz),
)


def select_extractor(url: str) -> Extractor:
    """
    Choose the extraction strategy for an artifact URL.

    Raises:
        UnsupportedArchiveFormat: If the URL names neither a zip nor a tar.gz
    """
    for marker, extractor in EXTRACTORS:
        if marker in url:
            return extractor
    raise UnsupportedArchiveFormat(
        f"Unsupported archive format for {url}. Supported: .zip, .tar.gz"
    )


class ArchiveInstaller:
    """Downloads and extracts Katalon Studio packages."""

    def __init__(
        self,
        resolver: Optional[ManifestResolver] = None,
        log: Optional[Callable[[str], None]] = None,
        os_detector: Callable[..., str] = detect_os,
    ):
        """
        Initialize installer.

        Args:
            resolver: Manifest resolver (default: one sharing this log sink)
            log: Line sink for build log messages
            os_detector: Callable returning the manifest OS label
        """
        self.log = log or (lambda line: None)
        self.resolver = resolver or ManifestResolver(log=self.log)
        self.os_detector = os_detector

    def install_archive(self, version: str, target_dir: Path) -> None:
        """
        Download the package for ``version`` and extract it into ``target_dir``.

        Args:
            version: Exact Katalon Studio version
            target_dir: Existing directory to extract into

        Raises:
            ReleaseNotFoundError: If the manifest has no package for this OS
            UnsupportedArchiveFormat: If the package is not a zip or tar.gz
            DownloadError: If the manifest or the package cannot be fetched
            ArchiveExtractionError: If extraction fails
        """
        os_name = self.os_detector(log=self.log)
        release = self.resolver.resolve_release(version, os_name)
        if release is None:
            raise ReleaseNotFoundError(version, os_name)

        extractor = select_extractor(release.url)

        self.log(
            f"Downloading Katalon Studio from {release.url}. It may take a few minutes."
        )

        with temporary_file(prefix=f"Katalon-{version}") as archive_path:
            download_file(
                release.url, archive_path, progress_callback=self._report_progress
            )
            logger.info(f"Extracting to: {target_dir}")
            extractor(archive_path, Path(target_dir))

    @staticmethod
    def _report_progress(progress: DownloadProgress) -> None:
        logger.debug(f"Download progress: {progress}")


__all__ = [
    "ArchiveInstaller",
    "select_extractor",
]
