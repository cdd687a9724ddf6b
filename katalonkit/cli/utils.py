"""
Shared utilities for CLI commands.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from katalonkit.config.step import StepConfig, load_step_config

logger = logging.getLogger(__name__)

STEP_OPTIONS = (
    "version",
    "location",
    "project_path",
    "execute_args",
    "x11_display",
    "xvfb_configuration",
)


# ============================================================================
# Configuration Management
# ============================================================================


def build_step_config(args) -> StepConfig:
    """
    Build the step configuration for a command.

    Values from ``--config`` are loaded first; explicit flags override them.
    The project path defaults to the current directory.

    Args:
        args: Parsed arguments of the ``run`` command

    Returns:
        Validated StepConfig

    Raises:
        ConfigError: If the file is invalid or neither version nor
            location is given
    """
    config_file: Optional[Path] = getattr(args, "config", None)
    base = StepConfig()
    if config_file:
        logger.debug(f"Loading step configuration from {config_file}")
        base = StepConfig.from_dict(load_step_config(config_file), validate=False)

    overrides = {name: getattr(args, name, None) for name in STEP_OPTIONS}
    if not overrides["project_path"] and not base.project_path:
        overrides["project_path"] = str(Path.cwd())

    return base.merged(overrides)


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)
