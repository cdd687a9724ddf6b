"""
Install command implementation.

Downloads and extracts a Katalon Studio version into the package cache.
"""

import logging

from katalonkit.core.interfaces import BUILD_LOGGER_NAME
from katalonkit.studio.cache import PackageCache

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    build_log = logging.getLogger(BUILD_LOGGER_NAME)
    cache = PackageCache(log=build_log.info)

    package_root = cache.get_package(args.version)
    print(package_root)
    return 0
