"""Replay fetcher: serve listing pages from saved HTML files.

Files are looked up as ``page-<n>.html`` then ``page-<n>.html.gz`` in the
replay directory, which is the layout DEV storage writes with --store-html.
"""
import gzip
import logging
from pathlib import Path
from typing import Optional

from soldscraper.fetch.base import CardRegionTimeout, FetchError, PageFetcher
from soldscraper.fetch.endpoints import page_number_from_url
from soldscraper.parse.html_cards import has_cards

logger = logging.getLogger(__name__)


def saved_page_path(pages_dir: Path, page: int) -> Optional[Path]:
    for name in (f"page-{page}.html", f"page-{page}.html.gz"):
        path = pages_dir / name
        if path.exists():
            return path
    return None


class ReplayFetcher(PageFetcher):
    """Offline PageFetcher over a directory of saved pages."""

    def __init__(self, pages_dir: Path):
        self.pages_dir = Path(pages_dir)
        self._html: Optional[str] = None
        self._url: Optional[str] = None

    async def __aenter__(self):
        if not self.pages_dir.is_dir():
            raise FetchError(f"Replay directory not found: {self.pages_dir}")
        return self

    async def open_page(self, url: str) -> None:
        self._html = None
        page = page_number_from_url(url)
        path = saved_page_path(self.pages_dir, page) if page else None
        if path is None:
            raise FetchError(f"No saved page for {url} in {self.pages_dir}")
        if path.suffix == ".gz":
            with gzip.open(path, "rt", encoding="utf-8") as f:
                self._html = f.read()
        else:
            self._html = path.read_text(encoding="utf-8")
        self._url = url
        logger.debug(f"Replaying {url} from {path}")

    async def wait_for_cards(self) -> None:
        if not has_cards(self._html or ""):
            raise CardRegionTimeout(f"No listing cards in saved page for {self._url}")

    async def page_html(self) -> str:
        if self._html is None:
            raise FetchError("No page loaded")
        return self._html
