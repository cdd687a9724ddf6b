"""
Resolve command implementation.

Looks up a version in the release manifest.
"""

import logging

from katalonkit.cli.utils import print_error
from katalonkit.core.interfaces import BUILD_LOGGER_NAME
from katalonkit.core.platform import detect_os
from katalonkit.studio.manifest import ManifestResolver

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if found, 1 if the manifest has no matching entry)
    """
    build_log = logging.getLogger(BUILD_LOGGER_NAME)
    os_name = args.os_name if args.os_name is not None else detect_os(log=build_log.info)

    entry = ManifestResolver(log=build_log.info).resolve_release(args.version, os_name)
    if entry is None:
        print_error(f"Katalon Studio {args.version} is not available for OS '{os_name}'")
        return 1

    print(f"version: {entry.version}")
    print(f"os: {entry.os}")
    print(f"url: {entry.url}")
    print(f"filename: {entry.filename}")
    print(f"containing folder: {entry.containing_folder}")
    return 0
