"""Fetching and loading raw codebook pages."""

from .fetch_pages import (
    FetchedPage,
    fetch_page,
    fetch_pages,
    load_page,
    load_pages,
    page_url,
    raw_page_path,
)

__all__ = [
    "FetchedPage",
    "fetch_page",
    "fetch_pages",
    "load_page",
    "load_pages",
    "page_url",
    "raw_page_path",
]
