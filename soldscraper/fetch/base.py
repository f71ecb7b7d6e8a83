"""Page fetcher interface: a rendered listing page in, listing cards out."""
from abc import ABC, abstractmethod
from typing import Optional

from soldscraper.parse.html_cards import CardContent, extract_cards


class FetchError(RuntimeError):
    """Navigation to a listing page failed or timed out."""


class CardRegionTimeout(FetchError):
    """The listing cards never appeared on the page."""


class PageFetcher(ABC):
    """Interface for loading listing pages.

    Used as an async context manager; one instance serves one worker and is
    driven strictly sequentially.
    """

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    @abstractmethod
    async def open_page(self, url: str) -> None:
        """Navigate to ``url``. Raises FetchError."""

    async def accept_consent(self) -> Optional[str]:
        """Dismiss a cookie/consent banner. May raise; callers treat it as advisory."""
        return None

    @abstractmethod
    async def wait_for_cards(self) -> None:
        """Block until the card region exists. Raises CardRegionTimeout."""

    @abstractmethod
    async def page_html(self) -> str:
        """Rendered HTML of the current page."""

    async def cards(self) -> list[CardContent]:
        """Every listing card on the current page, in order."""
        return extract_cards(await self.page_html())
