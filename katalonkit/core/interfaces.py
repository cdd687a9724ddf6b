"""
Core interfaces for KatalonKit.

The pipeline runs inside a build host (a CI job, a build-step plugin, the
bundled CLI). The host is injected into the core as a ``BuildHost``: it
receives progress lines and supplies the step configuration.
"""

import logging
from abc import ABC, abstractmethod

from katalonkit.config.step import StepConfig

BUILD_LOGGER_NAME = "katalonkit.build"


class BuildHost(ABC):
    """
    Abstract interface for the environment a build step runs in.

    The core never writes to the console itself; every line meant for the
    person reading the build log goes through ``log``.
    """

    @abstractmethod
    def log(self, line: str) -> None:
        """
        Append one line to the build log.

        Args:
            line: Text without trailing newline
        """
        pass

    @abstractmethod
    def get_config(self) -> StepConfig:
        """
        Get the configuration of the step being executed.

        Returns:
            StepConfig bundle
        """
        pass


class LoggingBuildHost(BuildHost):
    """Build host that forwards log lines to the ``katalonkit.build`` logger."""

    def __init__(self, config: StepConfig, logger: logging.Logger = None):
        self.config = config
        self.logger = logger or logging.getLogger(BUILD_LOGGER_NAME)

    def log(self, line: str) -> None:
        self.logger.info(line)

    def get_config(self) -> StepConfig:
        return self.config


__all__ = [
    "BuildHost",
    "LoggingBuildHost",
    "BUILD_LOGGER_NAME",
]
