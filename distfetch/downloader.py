"""Single-artifact downloader.

Each call makes at most one HTTP request.  Three checks run first and can skip
the file without touching the network:

1. the file name's final extension must be in the run's allowlist;
2. the name must not point outside the output directory;
3. the target must not already exist locally (re-runs never overwrite).
"""

from __future__ import annotations

import contextlib
import enum
import logging
import os
from pathlib import Path
from typing import AbstractSet

import httpx

from distfetch.config import RunConfig
from distfetch.errors import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class DownloadOutcome(str, enum.Enum):
    DOWNLOADED = "downloaded"
    SKIPPED_EXTENSION = "skipped_extension"
    SKIPPED_EXISTS = "skipped_exists"
    SKIPPED_UNSAFE_NAME = "skipped_unsafe_name"


def file_extension(file_name: str) -> str:
    """Return the lowercase final dotted suffix of *file_name* (``""`` if none)."""
    return os.path.splitext(file_name)[1].lower()


def has_allowed_extension(file_name: str, allowed: AbstractSet[str]) -> bool:
    return file_extension(file_name) in allowed


def is_plain_file_name(file_name: str) -> bool:
    """True if *file_name* names a file directly inside the output directory."""
    return file_name not in ("", ".", "..") and Path(file_name).name == file_name


def _stream_to_file(client: httpx.Client, url: str, out_dir: Path, out_path: Path) -> None:
    with client.stream("GET", url) as response:
        response.raise_for_status()
        out_dir.mkdir(parents=True, exist_ok=True)
        with out_path.open("wb") as fh:
            for chunk in response.iter_bytes(chunk_size=CHUNK_SIZE):
                fh.write(chunk)


def download_file(client: httpx.Client, config: RunConfig, file_name: str) -> DownloadOutcome:
    """Download *file_name* from ``config.base_url`` into ``config.output_dir``.

    Returns:
        What happened to the file.  Skips are not errors.

    Raises:
        DownloadError: The URL was rejected, or the request, directory
            creation, file creation or the streamed copy failed.  Any
            partially written file is removed first so the next run
            retries it instead of skipping it.
    """
    if not has_allowed_extension(file_name, config.allowed_extensions):
        logger.info(
            "Skipping %s (disallowed extension %s)", file_name, file_extension(file_name)
        )
        return DownloadOutcome.SKIPPED_EXTENSION

    if not is_plain_file_name(file_name):
        logger.info("Skipping %s (not a plain file name)", file_name)
        return DownloadOutcome.SKIPPED_UNSAFE_NAME

    out_path = config.output_dir / file_name
    if out_path.is_file():
        logger.info("File %s already exists, skipping download.", out_path)
        return DownloadOutcome.SKIPPED_EXISTS

    url = config.base_url + file_name
    try:
        _stream_to_file(client, url, config.output_dir, out_path)
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
        with contextlib.suppress(OSError):
            out_path.unlink(missing_ok=True)
        raise DownloadError(file_name, exc) from exc

    logger.info("Downloaded %s", file_name)
    return DownloadOutcome.DOWNLOADED
