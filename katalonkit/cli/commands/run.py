"""
Run command implementation.

Installs Katalon Studio if needed and runs a project in console mode.
"""

import logging

from katalonkit.cli.utils import build_step_config
from katalonkit.core.interfaces import LoggingBuildHost
from katalonkit.studio.runner import execute_katalon

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the run command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if Katalon Studio succeeded, 1 otherwise)
    """
    config = build_step_config(args)
    logger.debug(f"Step configuration: {config}")

    host = LoggingBuildHost(config)
    if execute_katalon(host):
        return 0

    logger.error("Katalon Studio execution failed")
    return 1
