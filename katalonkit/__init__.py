"""
KatalonKit - fetch, cache and run Katalon Studio from a build step.
"""

__version__ = "0.1.0"

from katalonkit.config.step import StepConfig
from katalonkit.core.interfaces import BuildHost, LoggingBuildHost
from katalonkit.studio.runner import KatalonRunner, execute_katalon

__all__ = [
    "StepConfig",
    "BuildHost",
    "LoggingBuildHost",
    "KatalonRunner",
    "execute_katalon",
]
