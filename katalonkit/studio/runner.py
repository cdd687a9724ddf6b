"""
Katalon Studio build step runner.

This is the public entry point of the pipeline. Given a step configuration it
finds (or installs) Katalon Studio, builds the console-mode command line and
runs it:

1. Use the pre-installed location, or install the version into the cache
2. Locate the executable by platform convention
3. Build ``katalon -noSplash -runMode=console -projectPath=... <args>``
4. Run it through the process launcher and report success

Example:
    >>> from katalonkit import KatalonRunner, LoggingBuildHost, StepConfig
    >>> host = LoggingBuildHost(StepConfig(version="7.0.0", project_path="/work/proj"))
    >>> KatalonRunner(log=host.log).run_step(host)
    True
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from katalonkit.config.step import StepConfig
from katalonkit.core.filesystem import make_executable
from katalonkit.core.interfaces import BuildHost
from katalonkit.core.platform import detect_os
from katalonkit.studio.cache import PackageCache
from katalonkit.studio.launcher import ProcessLauncher

logger = logging.getLogger(__name__)

EXECUTABLE_NAME = "katalon"
CONSOLE_FLAGS = ("-noSplash", "-runMode=console")
PROJECT_PATH_FLAG = "-projectPath"


def get_executable_path(package_root: str, os_name: str) -> Path:
    """
    Get the executable location inside a package root.

    macOS packages are application bundles; every other package keeps the
    executable at the top level.

    Example:
        >>> get_executable_path("/opt/Katalon", "linux")
        PosixPath('/opt/Katalon/katalon')
    """
    root = Path(package_root)
    if "macos" in os_name:
        return (root / "Contents" / "MacOS" / EXECUTABLE_NAME).absolute()
    return (root / EXECUTABLE_NAME).absolute()


def resolve_executable(executable: Path) -> Path:
    """
    Prefer an existing ``.exe`` sibling when the bare path does not exist.

    A path that exists is marked executable. Missing files are returned as
    given so that the shell reports the failure.
    """
    if not executable.exists():
        windows_executable = executable.with_name(executable.name + ".exe")
        if windows_executable.exists():
            executable = windows_executable

    if executable.exists():
        make_executable(executable)
    return executable


def quote_if_needed(value: str) -> str:
    """Wrap a value in double quotes if it contains whitespace."""
    if any(ch.isspace() for ch in value):
        return f'"{value}"'
    return value


def build_katalon_command(executable: str, project_path: str, execute_args: str) -> str:
    """
    Build the console-mode command line.

    ``-projectPath`` is added only when ``execute_args`` does not already
    carry one. ``execute_args`` is appended verbatim.

    Example:
        >>> build_katalon_command("/opt/k/katalon", "/work/proj", "-retry=0")
        '/opt/k/katalon -noSplash -runMode=console -projectPath="/work/proj" -retry=0'
    """
    parts = [quote_if_needed(executable), *CONSOLE_FLAGS]
    execute_args = execute_args or ""
    if PROJECT_PATH_FLAG not in execute_args:
        parts.append(f'{PROJECT_PATH_FLAG}="{project_path}"')
    if execute_args:
        parts.append(execute_args)
    return " ".join(parts)


class KatalonRunner:
    """Runs Katalon Studio in console mode as a build step."""

    def __init__(
        self,
        log: Optional[Callable[[str], None]] = None,
        cache: Optional[PackageCache] = None,
        launcher: Optional[ProcessLauncher] = None,
        os_detector: Callable[..., str] = detect_os,
    ):
        """
        Initialize runner.

        Args:
            log: Line sink for build log messages
            cache: Package cache (default: ``~/.katalon`` with this log sink)
            launcher: Process launcher (default: native shell with this log sink)
            os_detector: Callable returning the manifest OS label
        """
        self.log = log or (lambda line: None)
        self.cache = cache or PackageCache(log=self.log)
        self.launcher = launcher or ProcessLauncher(log=self.log)
        self.os_detector = os_detector

    def execute(
        self,
        version: str,
        location: str,
        project_path: str,
        execute_args: str = "",
        x11_display: str = "",
        xvfb_configuration: str = "",
    ) -> bool:
        """
        Run Katalon Studio for a project.

        Args:
            version: Katalon Studio version to install when location is blank
            location: Pre-installed package root, used verbatim when not blank
            project_path: Katalon project to run
            execute_args: Extra command-line arguments, appended verbatim
            x11_display: X display for Unix (blank to skip)
            xvfb_configuration: ``xvfb-run`` options for Unix (blank to skip)

        Returns:
            True if Katalon Studio exited with code 0

        Raises:
            KatalonKitError: If the package cannot be resolved or installed
        """
        if not location or not location.strip():
            package_root = str(self.cache.get_package(version).absolute())
        else:
            package_root = location

        self.log(f"Using Katalon Studio at {package_root}")

        os_name = self.os_detector(log=self.log)
        executable = resolve_executable(get_executable_path(package_root, os_name))
        command = build_katalon_command(str(executable), project_path, execute_args)
        logger.debug(f"Katalon command: {command}")

        return self.launcher.run(command, x11_display, xvfb_configuration)

    def execute_config(self, config: StepConfig) -> bool:
        """Run Katalon Studio with the settings of a step configuration."""
        return self.execute(
            version=config.version,
            location=config.location,
            project_path=config.project_path,
            execute_args=config.execute_args,
            x11_display=config.x11_display,
            xvfb_configuration=config.xvfb_configuration,
        )

    def run_step(self, host: BuildHost) -> bool:
        """Run the step configured by a build host."""
        return self.execute_config(host.get_config())


def execute_katalon(host: BuildHost) -> bool:
    """
    Convenience function to run a build step with default collaborators.

    Example:
        >>> from katalonkit.studio.runner import execute_katalon
        >>> execute_katalon(LoggingBuildHost(StepConfig(version="7.0.0")))
    """
    return KatalonRunner(log=host.log).run_step(host)


__all__ = [
    "KatalonRunner",
    "build_katalon_command",
    "execute_katalon",
    "get_executable_path",
    "quote_if_needed",
    "resolve_executable",
]
