"""
Concurrent access control for the package cache.

Two build executors that install the same Katalon Studio version at the same
time would both delete and re-extract the version directory. A file lock per
version serializes the Unknown -> Installing -> Installed transition across
processes.

Usage:
    from katalonkit.core.locking import install_lock

    with install_lock(Path("~/.katalon/7.0.0.lock")):
        # Check the marker, install if needed
        pass
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout as LockTimeout

from katalonkit.core.exceptions import InstallLockTimeout

logger = logging.getLogger(__name__)

# filelock convention: a negative timeout waits forever
WAIT_FOREVER = -1


@contextmanager
def install_lock(lock_path: Path, timeout: float = WAIT_FOREVER) -> Iterator[None]:
    """
    Acquire the advisory lock guarding one version's installation.

    Args:
        lock_path: Lock file path (created if missing, parents included)
        timeout: Maximum wait time in seconds; negative waits forever

    Yields:
        None

    Raises:
        InstallLockTimeout: If lock can't be acquired within timeout

    Example:
        >>> with install_lock(Path('/home/ci/.katalon/7.0.0.lock'), timeout=600):
        ...     install_package()
    """
    lock_path = Path(lock_path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock = FileLock(lock_path, timeout=timeout)

    try:
        with lock:
            logger.debug(f"Acquired install lock: {lock_path}")
            yield
            logger.debug(f"Released install lock: {lock_path}")
    except LockTimeout as e:
        logger.error(f"Could not acquire install lock {lock_path} after {timeout}s.")
        raise InstallLockTimeout(
            f"Could not acquire install lock after {timeout}s. "
            "Another process may be installing this Katalon Studio version."
        ) from e


__all__ = [
    "install_lock",
    "WAIT_FOREVER",
]
