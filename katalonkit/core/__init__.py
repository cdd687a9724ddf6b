"""
Core functionality for KatalonKit.

This package contains the foundational modules that the studio pipeline
depends on.
"""

from .exceptions import (
    KatalonKitError,
    ReleaseNotFoundError,
    DownloadError,
    ManifestError,
    FilesystemError,
    DirectoryCreationError,
    ArchiveExtractionError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    InvalidVersionError,
    PackageLayoutError,
    InstallLockTimeout,
)

from .platform import (
    OS_WINDOWS_64,
    OS_WINDOWS_32,
    OS_MACOS,
    OS_LINUX,
    OS_UNKNOWN,
    detect_os,
    is_windows,
)

from .directory import (
    get_cache_root,
    get_version_dir,
    get_marker_file,
)

__all__ = [
    "KatalonKitError",
    "ReleaseNotFoundError",
    "DownloadError",
    "ManifestError",
    "FilesystemError",
    "DirectoryCreationError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "InvalidVersionError",
    "PackageLayoutError",
    "InstallLockTimeout",
    "OS_WINDOWS_64",
    "OS_WINDOWS_32",
    "OS_MACOS",
    "OS_LINUX",
    "OS_UNKNOWN",
    "detect_os",
    "is_windows",
    "get_cache_root",
    "get_version_dir",
    "get_marker_file",
]
