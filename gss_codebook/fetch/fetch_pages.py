"""Download codebook pages to disk, or load previously downloaded ones.

Requests are sequential with a fixed delay between them. There is no retry:
a page that cannot be fetched, stored or read becomes a failed FetchedPage and the
rest of the batch carries on.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import requests

from gss_codebook.config_loader import source_delay
from gss_codebook.errors import FetchError

USER_AGENT = "Mozilla/5.0 (compatible; gss-codebook-pipeline/0.1)"
REQUEST_TIMEOUT = 30


@dataclass(frozen=True)
class FetchedPage:
    """One page handle: HTML on success, an error message otherwise."""
    page: int
    html: Optional[str] = None
    error: Optional[str] = None
    path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.html is not None and self.error is None

    @classmethod
    def failed(cls, err: FetchError) -> "FetchedPage":
        return cls(page=err.page, error=err.reason)


def page_url(source: Dict[str, Any], page: int) -> str:
    """URL of one page of a source (url_pattern takes a {page} placeholder)."""
    return source["url_pattern"].format(page=page)


def raw_page_path(raw_dir: Path, source: Dict[str, Any], page: int) -> Path:
    """Where the raw HTML of a page is kept: raw_dir/<source>/hcbk0001.htm."""
    return raw_dir / source["name"] / f"hcbk{page:04d}.htm"


def new_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def fetch_page(session: requests.Session, source: Dict[str, Any], page: int) -> str:
    """GET one page and return its HTML.

    Raises:
        FetchError: On connection problems or a non-200 response.
    """
    url = page_url(source, page)
    try:
        response = session.get(url, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise FetchError(page, f"request failed: {e}") from e
    if response.status_code != 200:
        raise FetchError(page, f"HTTP {response.status_code} for {url}")
    if not response.encoding:
        response.encoding = "utf-8"
    return response.text


def fetch_pages(
    source: Dict[str, Any],
    pages: Iterable[int],
    raw_dir: Path,
    session: Optional[requests.Session] = None,
) -> List[FetchedPage]:
    """Fetch pages in order, saving each to raw_dir, with a fixed delay between requests.

    Args:
        source: Source config dict (see config/sources.yaml).
        pages: Page numbers to fetch.
        raw_dir: Base directory for raw HTML.
        session: Optional requests session (a new one is created otherwise).

    Returns:
        One FetchedPage per requested page, in request order.

    Raises:
        ConfigError: If the source has an invalid delay_seconds.
    """
    session = session or new_session()
    delay = source_delay(source)
    results: List[FetchedPage] = []
    for i, page in enumerate(pages):
        if i and delay > 0:
            time.sleep(delay)
        print(f"Fetching page {page}: {page_url(source, page)}")
        try:
            html = fetch_page(session, source, page)
        except FetchError as e:
            print(f"  ERROR: {e}")
            results.append(FetchedPage.failed(e))
            continue
        path = raw_page_path(raw_dir, source, page)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(html, encoding="utf-8")
        except OSError as e:
            err = FetchError(page, f"cannot write {path}: {e}")
            print(f"  ERROR: {err}")
            results.append(FetchedPage.failed(err))
            continue
        results.append(FetchedPage(page=page, html=html, path=path))
    return results


def load_page(raw_dir: Path, source: Dict[str, Any], page: int) -> str:
    """Read a previously fetched page.

    Raises:
        FetchError: If the file is missing or unreadable.
    """
    path = raw_page_path(raw_dir, source, page)
    if not path.exists():
        raise FetchError(page, f"raw page not found: {path}")
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        raise FetchError(page, f"cannot read {path}: {e}") from e


def load_pages(
    source: Dict[str, Any],
    pages: Iterable[int],
    raw_dir: Path,
) -> List[FetchedPage]:
    """Load saved pages from raw_dir; missing files become failed handles."""
    results: List[FetchedPage] = []
    for page in pages:
        try:
            html = load_page(raw_dir, source, page)
        except FetchError as e:
            results.append(FetchedPage.failed(e))
            continue
        results.append(FetchedPage(page=page, html=html, path=raw_page_path(raw_dir, source, page)))
    return results
