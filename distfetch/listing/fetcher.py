"""HTTP fetcher for a version's directory listing page."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from bs4 import BeautifulSoup, ParserRejectedMarkup

from distfetch.listing.models import ListingPage

logger = logging.getLogger(__name__)


def parse_listing(html: str) -> BeautifulSoup:
    """Parse *html* into a document tree using the stdlib parser backend.

    Raises:
        bs4.ParserRejectedMarkup: If the markup cannot be parsed at all.
    """
    return BeautifulSoup(html, "html.parser")


def fetch_listing(url: str, client: httpx.Client) -> Optional[ListingPage]:
    """Fetch *url* and return its parsed :class:`ListingPage`.

    Every failure degrades to ``None`` with a log line: network errors,
    any status other than 200, and markup the parser rejects.  Nothing is
    retried.
    """
    try:
        response = client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        return None

    if response.status_code != httpx.codes.OK:
        logger.warning(
            "Failed to fetch %s: %s %s",
            url,
            response.status_code,
            response.reason_phrase,
        )
        return None

    try:
        tree = parse_listing(response.text)
    except ParserRejectedMarkup as exc:
        logger.warning("Failed to parse HTML from %s: %s", url, exc)
        return None

    return ListingPage(url=url, status_code=response.status_code, tree=tree)
