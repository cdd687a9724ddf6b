"""
Centralized exception hierarchy for KatalonKit.

Every fatal condition in the resolve/install/launch pipeline raises one of
these so the build host can fail the step with a readable message.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class KatalonKitError(Exception):
    """Base exception for all KatalonKit errors."""

    pass


# ============================================================================
# Release Resolution Exceptions
# ============================================================================


class ReleaseNotFoundError(KatalonKitError):
    """Raised when the manifest has no entry for a (version, OS) pair."""

    def __init__(self, version: str, os_name: str):
        self.version = version
        self.os_name = os_name
        super().__init__(
            f"Katalon Studio {version} is not available for OS '{os_name}'"
        )


# ============================================================================
# Transport Exceptions
# ============================================================================


class DownloadError(KatalonKitError):
    """Raised when fetching the manifest or the package archive fails."""

    pass


class ManifestError(DownloadError):
    """Raised when the release manifest cannot be decoded."""

    pass


# ============================================================================
# Filesystem Exceptions
# ============================================================================


class FilesystemError(KatalonKitError):
    """Base exception for filesystem operations."""

    pass


class DirectoryCreationError(FilesystemError):
    """Raised when a cache directory cannot be created."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Package Cache Exceptions
# ============================================================================


class InvalidVersionError(KatalonKitError, ValueError):
    """Raised when a version string cannot name a cache directory."""

    pass


class PackageLayoutError(KatalonKitError):
    """Raised when an installed package has no recognizable root folder."""

    def __init__(self, version_dir, product_name: str):
        self.version_dir = version_dir
        self.product_name = product_name
        super().__init__(
            f"No directory containing '{product_name}' found in {version_dir}"
        )


class InstallLockTimeout(KatalonKitError):
    """Raised when the per-version install lock cannot be acquired in time."""

    pass


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
]
