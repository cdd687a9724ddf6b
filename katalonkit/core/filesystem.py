"""
Cross-platform file system utilities for KatalonKit.

This module provides:
- Archive extraction (zip, tar.gz) with directory traversal protection
- Safe recursive deletion
- Scoped temporary files and directories
- Executable permission handling
"""

import logging
import os
import shutil
import stat
import sys
import tarfile
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from katalonkit.core.exceptions import (
    ArchiveExtractionError,
    FilesystemError,
    InsecureArchiveError,
)

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Args:
        path: Path to check
        parent: Potential parent path

    Returns:
        True if path is under parent

    Example:
        >>> is_relative_to(Path('/home/user/.katalon/7.0.0'), Path('/home/user'))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def make_executable(path: Union[str, Path]) -> bool:
    """
    Add execute permission for everyone who can read the file.

    Args:
        path: File to mark executable

    Returns:
        True if the mode was changed, False if that failed
    """
    path = Path(path)
    try:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return True
    except OSError as e:
        logger.debug(f"Could not mark {path} executable: {e}")
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_zip(archive_path: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Extract a ZIP archive, keeping Unix permission bits stored in it.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths
    """
    archive_path = Path(archive_path)
    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.infolist()

            # Validate all paths first
            for member in members:
                _validate_archive_path(member.filename, destination)

            for member in members:
                extracted = Path(zf.extract(member, destination))
                mode = (member.external_attr >> 16) & 0o777
                if mode and not member.is_dir():
                    extracted.chmod(mode)
    except InsecureArchiveError:
        raise
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def extract_tar_gz(
    archive_path: Union[str, Path], destination: Union[str, Path]
) -> None:
    """
    Extract a gzip-compressed tar archive.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths
    """
    archive_path = Path(archive_path)
    destination = Path(destination)
    destination.mkdir(parents=True, exist_ok=True)

    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            members = tar.getmembers()

            # Validate all paths first
            for member in members:
                _validate_archive_path(member.name, destination)
                if member.issym():
                    # Symlink targets are relative to the link itself
                    link_target = os.path.join(
                        os.path.dirname(member.name), member.linkname
                    )
                    _validate_archive_path(link_target, destination)
                elif member.islnk():
                    _validate_archive_path(member.linkname, destination)

            # Extract with filter for security (Python 3.12+)
            # For older Python, we've already validated paths above
            if sys.version_info >= (3, 12):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)
    except InsecureArchiveError:
        raise
    except (OSError, tarfile.TarError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Removing a directory that does not exist is a no-op.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('~/.katalon/7.0.0', require_prefix='~/.katalon')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, path, exc):
                """Error handler for Windows read-only files."""
                if not os.access(path, os.W_OK):
                    os.chmod(path, stat.S_IWRITE)
                    func(path)
                else:
                    raise

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)

    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


# ============================================================================
# Temporary File/Directory Management
# ============================================================================


@contextmanager
def temporary_file(prefix: str = "katalonkit_", suffix: str = "") -> Iterator[Path]:
    """
    Context manager for a temporary file that is removed on exit.

    The file is created empty and closed before it is yielded, so callers
    can reopen it on any platform.

    Yields:
        Path to the temporary file

    Example:
        >>> with temporary_file(prefix="Katalon-7.0.0") as tmp:
        ...     tmp.write_bytes(b"data")
    """
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix)
    os.close(fd)
    temp_path = Path(name)

    try:
        yield temp_path
    finally:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove temporary file {temp_path}: {e}")


def create_temporary_directory(prefix: str = "katalonkit_") -> Path:
    """
    Create a uniquely named temporary directory that the caller owns.

    Returns:
        Path to the new directory
    """
    return Path(tempfile.mkdtemp(prefix=prefix))


__all__ = [
    "is_relative_to",
    "make_executable",
    "extract_zip",
    "extract_tar_gz",
    "safe_rmtree",
    "temporary_file",
    "create_temporary_directory",
]
