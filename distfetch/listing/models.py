"""Data models for the listing stage."""

from __future__ import annotations

from dataclasses import dataclass

from bs4 import BeautifulSoup


@dataclass
class ListingPage:
    """A successfully fetched and parsed directory listing."""

    url: str
    status_code: int
    tree: BeautifulSoup
