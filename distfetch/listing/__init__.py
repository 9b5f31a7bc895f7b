"""Listing package — fetch a version's index page and pick out its files."""

from distfetch.listing.extractor import extract_links, filter_files
from distfetch.listing.fetcher import fetch_listing, parse_listing
from distfetch.listing.models import ListingPage

__all__ = ["fetch_listing", "parse_listing", "extract_links", "filter_files", "ListingPage"]
