"""Link extraction and directory filtering for a parsed listing."""

from __future__ import annotations

from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag


def extract_links(tree: Optional[BeautifulSoup]) -> List[str]:
    """Return every ``<a href>`` value in *tree*, in document order.

    The walk is depth-first and pre-order over all descendants.  Duplicates
    are kept.  A missing tree (the fetch failed) yields an empty list.
    """
    if tree is None:
        return []

    links: List[str] = []
    for node in tree.descendants:
        if isinstance(node, Tag) and node.name == "a":
            href = node.get("href")
            if href is not None:
                links.append(href)
    return links


def filter_files(links: Iterable[str]) -> List[str]:
    """Drop directory-like references, keeping the rest in order.

    A reference starting with ``/`` is an absolute path (usually the parent
    directory) and one ending with ``/`` is a sub-directory listing; neither
    is a downloadable file.  The extension allowlist is not applied here.
    """
    return [link for link in links if not (link.startswith("/") or link.endswith("/"))]
