"""Orchestrator: fetch → extract → filter → download, for one version."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import httpx

from distfetch.config import RunConfig
from distfetch.downloader import DownloadOutcome, download_file
from distfetch.errors import DownloadError
from distfetch.listing import extract_links, fetch_listing, filter_files

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """What one run did, file by file."""

    version: str
    output_dir: str
    listing_found: bool = False
    downloaded: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def build_client(config: RunConfig) -> httpx.Client:
    """Return an ``httpx.Client`` configured for *config*."""
    return httpx.Client(
        headers={"User-Agent": config.user_agent},
        timeout=config.request_timeout,
        follow_redirects=True,
    )


def format_summary(report: SyncReport) -> str:
    return (
        f"All files for version {report.version} have been downloaded "
        f"into {report.output_dir}/"
    )


def sync_version(
    config: RunConfig,
    client: Optional[httpx.Client] = None,
    on_error: Optional[Callable[[DownloadError], None]] = None,
) -> SyncReport:
    """Mirror every allowed artifact of ``config.version`` into its output directory.

    Never raises for network or per-file problems: a failed listing fetch
    yields an empty run, and each :class:`DownloadError` is recorded and
    reported before moving on to the next file.  Reporting goes to
    *on_error* when given, otherwise to the log at ERROR level.

    If *client* is ``None`` a client is built from *config* and closed
    before returning.
    """
    owns_client = client is None
    if client is None:
        client = build_client(config)

    report = SyncReport(version=config.version, output_dir=str(config.output_dir))
    try:
        page = fetch_listing(config.base_url, client)
        report.listing_found = page is not None

        links = extract_links(page.tree if page is not None else None)
        files = filter_files(links)
        logger.debug("Found %d candidate files at %s", len(files), config.base_url)

        for file_name in files:
            try:
                outcome = download_file(client, config, file_name)
            except DownloadError as exc:
                if on_error is not None:
                    on_error(exc)
                else:
                    logger.error("%s", exc)
                report.failed.append(file_name)
                continue
            if outcome is DownloadOutcome.DOWNLOADED:
                report.downloaded.append(file_name)
            else:
                report.skipped.append(file_name)
    finally:
        if owns_client:
            client.close()

    return report
