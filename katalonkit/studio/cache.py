"""
Per-version cache of installed Katalon Studio packages.

Each version lives in ``<cache_root>/<version>/``. An empty ``.katalon.done``
marker inside that directory means the installation finished; such a version
is never downloaded again. A version directory without the marker is treated
as debris from an interrupted install and is wiped before installing afresh.
Sibling versions are never touched.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from katalonkit.core.directory import (
    create_directory,
    get_cache_root,
    get_lock_file,
    get_marker_file,
    get_version_dir,
)
from katalonkit.core.exceptions import PackageLayoutError
from katalonkit.core.filesystem import safe_rmtree
from katalonkit.core.locking import WAIT_FOREVER, install_lock
from katalonkit.studio.installer import ArchiveInstaller

logger = logging.getLogger(__name__)

# Extracted package roots are named like "Katalon_Studio_Linux_64-7.0.0"
PACKAGE_ROOT_MARKER = "Katalon"


def find_package_root(version_dir: Path, name_marker: str = PACKAGE_ROOT_MARKER) -> Path:
    """
    Locate the extracted package root inside a version directory.

    The root is the child directory whose name contains ``name_marker``.
    Exactly one is expected; if several exist the first by name is used.

    Raises:
        PackageLayoutError: If no such child directory exists
    """
    candidates = sorted(
        child
        for child in version_dir.iterdir()
        if child.is_dir() and name_marker in child.name
    )
    if not candidates:
        raise PackageLayoutError(version_dir, name_marker)
    if len(candidates) > 1:
        logger.warning(
            f"Several package roots in {version_dir}, using {candidates[0].name}"
        )
    return candidates[0]


class PackageCache:
    """
    Ensures a Katalon Studio version is installed at most once per machine.

    Example:
        >>> cache = PackageCache(log=print)
        >>> root = cache.get_package("7.0.0")
    """

    def __init__(
        self,
        installer: Optional[ArchiveInstaller] = None,
        cache_root: Optional[Path] = None,
        log: Optional[Callable[[str], None]] = None,
        lock_timeout: float = WAIT_FOREVER,
    ):
        """
        Initialize cache.

        Args:
            installer: Archive installer (default: one sharing this log sink)
            cache_root: Cache root (default: ``~/.katalon``)
            log: Line sink for build log messages
            lock_timeout: Seconds to wait for another process's install;
                negative waits forever
        """
        self.log = log or (lambda line: None)
        self.installer = installer or ArchiveInstaller(log=self.log)
        self.cache_root = Path(cache_root) if cache_root else get_cache_root()
        self.lock_timeout = lock_timeout

    def is_installed(self, version: str) -> bool:
        """Check whether a version has a completion marker."""
        return get_marker_file(get_version_dir(version, self.cache_root)).exists()

    def ensure_installed(self, version: str) -> Path:
        """
        Make sure ``version`` is fully installed.

        Args:
            version: Exact Katalon Studio version

        Returns:
            The version directory

        Raises:
            DirectoryCreationError: If the version directory cannot be created
            FilesystemError: If stale content cannot be removed
            InstallLockTimeout: If another install holds the lock too long
            KatalonKitError: Any failure of the archive installer; the
                partially populated directory is left in place
        """
        version_dir = get_version_dir(version, self.cache_root)
        marker = get_marker_file(version_dir)

        if marker.exists():
            self._report_cached(version_dir)
            return version_dir

        with install_lock(get_lock_file(version_dir), timeout=self.lock_timeout):
            # Another process may have finished while we waited
            if marker.exists():
                self._report_cached(version_dir)
                return version_dir

            logger.debug(f"No completed installation in {version_dir}, reinstalling")
            safe_rmtree(version_dir, require_prefix=self.cache_root)
            create_directory(version_dir)

            self.installer.install_archive(version, version_dir)

            marker.touch()
            self.log("Katalon Studio has been installed successfully.")

        return version_dir

    def get_package(self, version: str) -> Path:
        """
        Install ``version`` if needed and return its package root.

        Raises:
            PackageLayoutError: If the installed version has no package root
        """
        return find_package_root(self.ensure_installed(version))

    def _report_cached(self, version_dir: Path) -> None:
        logger.debug(f"Found completion marker in {version_dir}")
        self.log("Katalon Studio package has been downloaded already.")


__all__ = [
    "PACKAGE_ROOT_MARKER",
    "PackageCache",
    "find_package_root",
]
