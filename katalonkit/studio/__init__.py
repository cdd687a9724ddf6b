"""
Katalon Studio acquisition and execution.

Resolves a version in the release manifest, installs it into the per-user
cache and runs it in console mode.
"""

from .manifest import ReleaseEntry, ManifestResolver, derive_folder_name
from .installer import ArchiveInstaller
from .cache import PackageCache, find_package_root
from .launcher import ProcessLauncher, spawn_command, wrap_command
from .runner import KatalonRunner, build_katalon_command, execute_katalon

__all__ = [
    "ReleaseEntry",
    "ManifestResolver",
    "derive_folder_name",
    "ArchiveInstaller",
    "PackageCache",
    "find_package_root",
    "ProcessLauncher",
    "spawn_command",
    "wrap_command",
    "KatalonRunner",
    "build_katalon_command",
    "execute_katalon",
]
