"""
Platform detection for KatalonKit.

This module maps the running operating system to the label the Katalon
Studio release manifest uses in its ``os`` field. The same label decides how
the executable is laid out inside the package and which shell wraps the
command line.

Labels:
    - ``windows 64`` / ``windows 32``: Windows, architecture from WMI
    - ``macos (app)``: macOS application bundle
    - ``linux``: Linux
    - ``""``: anything else (matches no manifest entry)

Usage:
    from katalonkit.core.platform import detect_os

    os_label = detect_os(log=print)
"""

import logging
import platform
import subprocess
from typing import Callable, Optional

logger = logging.getLogger(__name__)

OS_WINDOWS_64 = "windows 64"
OS_WINDOWS_32 = "windows 32"
OS_MACOS = "macos (app)"
OS_LINUX = "linux"
OS_UNKNOWN = ""

ARCHITECTURE_QUERY = ["wmic", "os", "get", "osarchitecture"]


def _system() -> str:
    """Return the lower-cased ``platform.system()`` name."""
    return platform.system().lower()


def is_windows() -> bool:
    """Check whether the current process runs on Windows."""
    return _system() == "windows"


def is_macos() -> bool:
    """Check whether the current process runs on macOS."""
    return _system() == "darwin"


def is_linux() -> bool:
    """Check whether the current process runs on Linux."""
    return _system() == "linux"


def detect_os(log: Optional[Callable[[str], None]] = None) -> str:
    """
    Detect the manifest OS label for the current machine.

    On Windows the architecture is read from WMI. Any failure of that query
    falls back to the 64-bit label; the reason is reported to ``log``.

    Args:
        log: Optional line sink for the fallback message

    Returns:
        One of the ``OS_*`` labels, or an empty string for unsupported systems

    Example:
        >>> detect_os()
        'linux'
    """
    if is_windows():
        return _detect_windows_architecture(log)
    elif is_macos():
        return OS_MACOS
    elif is_linux():
        return OS_LINUX

    logger.debug(f"Unsupported operating system: {platform.system()}")
    return OS_UNKNOWN


def _detect_windows_architecture(log: Optional[Callable[[str], None]]) -> str:
    """
    Query WMI for the OS architecture.

    Returns:
        ``windows 64`` or ``windows 32``
    """
    try:
        result = subprocess.run(
            ARCHITECTURE_QUERY, capture_output=True, text=True, timeout=30
        )
        output = result.stdout
    except (OSError, subprocess.SubprocessError) as e:
        return _assume_64_bit(log, str(e))

    if "64" in output:
        return OS_WINDOWS_64
    elif "32" in output:
        return OS_WINDOWS_32

    return _assume_64_bit(log, f"unrecognized output {output.strip()!r}")


def _assume_64_bit(log: Optional[Callable[[str], None]], reason: str) -> str:
    logger.warning(f"OS architecture detection failed: {reason}")
    if log:
        log("Cannot detect the OS architecture. Assume it is x64.")
        log(f"Reason: {reason}.")
    return OS_WINDOWS_64


__all__ = [
    "OS_WINDOWS_64",
    "OS_WINDOWS_32",
    "OS_MACOS",
    "OS_LINUX",
    "OS_UNKNOWN",
    "detect_os",
    "is_windows",
    "is_macos",
    "is_linux",
]
