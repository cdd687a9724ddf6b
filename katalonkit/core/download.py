"""
Network access for KatalonKit.

This module provides the two transport capabilities the pipeline needs:
- Fetching a JSON document (the release manifest)
- Streaming a binary artifact to a local file with progress reporting

Failures are raised immediately as DownloadError. There is no retry or
backoff: a build step that cannot reach the network should fail loudly.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import requests
from requests.exceptions import RequestException

from katalonkit.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


def fetch_json(url: str, timeout: int = DEFAULT_TIMEOUT) -> Any:
    """
    Fetch and decode a JSON document.

    Args:
        url: URL to fetch
        timeout: Request timeout in seconds

    Returns:
        Decoded JSON value

    Raises:
        DownloadError: If the request fails, returns an error status,
            or the body is not valid JSON
    """
    if not url:
        raise ValueError("URL cannot be empty")

    logger.debug(f"Fetching {url}")
    try:
        response = requests.get(url, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
        return response.json()
    except ValueError as e:
        raise DownloadError(f"Invalid JSON received from {url}: {e}") from e
    except RequestException as e:
        raise DownloadError(f"Failed to fetch {url}: {e}") from e


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> Path:
    """
    Download a URL to a local file, overwriting it.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the download fails
        ValueError: If URL or destination is invalid

    Example:
        >>> download_file("https://example.com/katalon.tar.gz", Path("/tmp/k.tar.gz"))
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Downloading from {url}")

    try:
        with requests.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        ) as response:
            response.raise_for_status()
            _stream_to_file(response, destination, progress_callback)
    except RequestException as e:
        raise DownloadError(f"Failed to download {url}: {e}") from e

    logger.info(f"Download complete: {destination}")
    return destination


def _stream_to_file(
    response: requests.Response,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]],
) -> None:
    content_length = response.headers.get("content-length")
    total_size = int(content_length) if content_length else 0

    downloaded = 0
    start_time = time.time()
    last_progress_time = start_time

    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue
            f.write(chunk)
            downloaded += len(chunk)

            # Report progress at most twice per second
            current_time = time.time()
            if progress_callback and (
                current_time - last_progress_time >= 0.5 or downloaded == total_size
            ):
                elapsed = current_time - start_time
                progress_callback(
                    DownloadProgress(
                        bytes_downloaded=downloaded,
                        total_bytes=total_size if total_size > 0 else downloaded,
                        percentage=(downloaded / total_size * 100)
                        if total_size > 0
                        else 0,
                        speed_bps=downloaded / elapsed if elapsed > 0 else 0,
                    )
                )
                last_progress_time = current_time


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"


__all__ = [
    "DownloadProgress",
    "fetch_json",
    "download_file",
    "format_progress",
]
