"""
Directory structure management for KatalonKit.

Cache layout (``~/.katalon/`` or ``%USERPROFILE%\\.katalon\\``):
    - <version>/                 : Extracted Katalon Studio package
      - Katalon_Studio_.../      : Package root produced by the archive
      - .katalon.done            : Marker for a completed installation
    - <version>.lock             : Advisory lock guarding the install of <version>

The cache root can be moved with the ``KATALONKIT_HOME`` environment variable,
which replaces the user home directory.
"""

import os
from pathlib import Path
from typing import Optional

from katalonkit.core.exceptions import DirectoryCreationError, InvalidVersionError

PRODUCT_NAME = "katalon"
HOME_ENV_VAR = "KATALONKIT_HOME"


def get_user_home() -> Path:
    """
    Get the home directory the cache lives in.

    Returns:
        Path from ``KATALONKIT_HOME`` if set, otherwise the user home
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home()


def get_cache_root(home: Optional[Path] = None) -> Path:
    """
    Get the per-user cache root.

    Args:
        home: Home directory to use (default: get_user_home())

    Returns:
        Path: ``<home>/.katalon``

    Example:
        >>> get_cache_root(Path('/home/ci'))
        PosixPath('/home/ci/.katalon')
    """
    return (home or get_user_home()) / f".{PRODUCT_NAME}"


def get_version_dir(version: str, cache_root: Optional[Path] = None) -> Path:
    """
    Get the directory holding one installed version.

    Raises:
        InvalidVersionError: If version is blank or would escape the cache root
    """
    if not version or not version.strip():
        raise InvalidVersionError("Version cannot be empty")
    if "/" in version or "\\" in version or version in (".", ".."):
        raise InvalidVersionError(f"Invalid version string: {version!r}")
    return (cache_root or get_cache_root()) / version


def get_marker_file(version_dir: Path) -> Path:
    """Get the completion marker path for a version directory."""
    return version_dir / f".{PRODUCT_NAME}.done"


def get_lock_file(version_dir: Path) -> Path:
    """Get the advisory lock path for a version directory (a sibling of it)."""
    return version_dir.parent / f"{version_dir.name}.lock"


def create_directory(path: Path) -> Path:
    """
    Create a directory and its parents.

    Raises:
        DirectoryCreationError: If the directory cannot be created
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(
            f"Cannot create directory to store Katalon Studio package at {path}: {e}"
        ) from e
    return path


__all__ = [
    "PRODUCT_NAME",
    "HOME_ENV_VAR",
    "get_user_home",
    "get_cache_root",
    "get_version_dir",
    "get_marker_file",
    "get_lock_file",
    "create_directory",
]
