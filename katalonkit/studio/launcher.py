"""
Cross-platform process launcher.

Runs a Katalon Studio command line through the native shell and streams its
output to the build log:
- Windows: ``cmd /c <command>``
- Unix: ``sh -c <command>``, optionally prefixed with a ``DISPLAY`` assignment
  and wrapped in ``xvfb-run`` for headless machines

Each run gets a fresh temporary working directory, which is left in place
afterwards so that reports written relative to it can still be collected.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Callable, List, Optional, Union

from katalonkit.core.filesystem import create_temporary_directory
from katalonkit.core.platform import is_windows

logger = logging.getLogger(__name__)

XVFB_RUNNER = "xvfb-run"
WORKDIR_PREFIX = "katalon-"


def wrap_command(
    command: str,
    x11_display: str = "",
    xvfb_configuration: str = "",
    windows: Optional[bool] = None,
) -> List[str]:
    """
    Build the argv that hands ``command`` to the native shell.

    Display settings only apply to Unix; on Windows they are ignored.

    Args:
        command: Shell command line
        x11_display: X display to export as ``DISPLAY`` (blank to skip)
        xvfb_configuration: ``xvfb-run`` options (blank to skip xvfb-run)
        windows: Force the Windows or Unix form (default: current platform)

    Returns:
        Argument vector for subprocess

    Example:
        >>> wrap_command("katalon -noSplash", x11_display=":99", windows=False)
        ['sh', '-c', 'DISPLAY=:99 katalon -noSplash']
    """
    if windows is None:
        windows = is_windows()

    if windows:
        return ["cmd", "/c", command]

    if x11_display and x11_display.strip():
        command = f"DISPLAY={shlex.quote(x11_display.strip())} {command}"
    if xvfb_configuration and xvfb_configuration.strip():
        command = f"{XVFB_RUNNER} {xvfb_configuration} {command}"
    return ["sh", "-c", command]


def spawn_command(
    argv: List[str], windows: Optional[bool] = None
) -> Union[str, List[str]]:
    """
    Convert a wrapped argv into what ``subprocess.Popen`` should receive.

    On Windows the argv is joined into one command line so that cmd.exe gets
    the command exactly as built, quotes included. A list would go through
    ``subprocess.list2cmdline``, which escapes every ``"`` as ``\\"``.

    Example:
        >>> spawn_command(["cmd", "/c", '"C:/Katalon Studio/katalon.exe" -noSplash'], True)
        'cmd /c "C:/Katalon Studio/katalon.exe" -noSplash'
    """
    if windows is None:
        windows = is_windows()

    if windows:
        return " ".join(argv)
    return argv


class ProcessLauncher:
    """
    Runs shell commands and forwards their output line by line.

    Example:
        >>> launcher = ProcessLauncher(log=print)
        >>> launcher.run("echo hello")
        hello
        True
    """

    def __init__(
        self,
        log: Optional[Callable[[str], None]] = None,
        windows: Optional[bool] = None,
    ):
        """
        Initialize launcher.

        Args:
            log: Line sink for command output
            windows: Force the Windows or Unix shell (default: current platform)
        """
        self.log = log or (lambda line: None)
        self.windows = windows

    def run(
        self, command: str, x11_display: str = "", xvfb_configuration: str = ""
    ) -> bool:
        """
        Run a command to completion.

        Standard error is merged into standard output, so lines reach the log
        in the order the process wrote them.

        Args:
            command: Shell command line
            x11_display: X display for Unix (blank to skip)
            xvfb_configuration: ``xvfb-run`` options for Unix (blank to skip)

        Returns:
            True if the process exited with code 0, False otherwise

        Raises:
            OSError: If the shell itself cannot be started
        """
        argv = wrap_command(command, x11_display, xvfb_configuration, self.windows)
        workdir = create_temporary_directory(prefix=WORKDIR_PREFIX)

        self.log(f"Execute {argv} in {workdir}")
        returncode = self._stream(spawn_command(argv, self.windows), workdir)

        logger.debug(f"Process exited with code {returncode}")
        return returncode == 0

    def _stream(self, command: Union[str, List[str]], workdir: Path) -> int:
        process = subprocess.Popen(
            command,
            cwd=workdir,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        try:
            for line in process.stdout:
                self.log(line.rstrip("\r\n"))
            process.stdout.close()
            return process.wait()
        except BaseException:
            # Interrupted while waiting: do not leave the child running
            process.kill()
            process.wait()
            raise


__all__ = [
    "ProcessLauncher",
    "spawn_command",
    "wrap_command",
    "XVFB_RUNNER",
]
