"""
Platform command implementation.

Prints the OS label used to select packages from the release manifest.
"""

import logging

from katalonkit.cli.utils import print_warning
from katalonkit.core.interfaces import BUILD_LOGGER_NAME
from katalonkit.core.platform import detect_os

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the platform command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for a supported platform, 1 otherwise)
    """
    os_name = detect_os(log=logging.getLogger(BUILD_LOGGER_NAME).info)
    if not os_name:
        print_warning("This operating system is not supported by Katalon Studio")
        return 1

    print(os_name)
    return 0
