"""Playwright-backed page fetcher."""
import logging
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from soldscraper.config import config
from soldscraper.fetch.base import CardRegionTimeout, FetchError, PageFetcher
from soldscraper.parse.html_cards import CARD_SELECTOR

logger = logging.getLogger(__name__)

CONSENT_SELECTORS = [
    "#didomi-notice-agree-button",
    'button:has-text("Accept All")',
    'button:has-text("Accept all")',
    'button:has-text("Accept")',
    '[data-testid="accept-all-cookies"]',
    'button[data-testid*="accept"]',
]


def browser_context_options() -> dict:
    return {
        "user_agent": config.USER_AGENT,
        "viewport": {"width": 1920, "height": 1080},
        "locale": "en-GB",
        "timezone_id": "Europe/Dublin",
    }


class PlaywrightFetcher(PageFetcher):
    """Chromium via Playwright. Each worker process owns one browser."""

    def __init__(
        self,
        headless: Optional[bool] = None,
        nav_timeout: Optional[int] = None,
        card_timeout: Optional[int] = None,
    ):
        self.headless = config.HEADLESS if headless is None else headless
        self.nav_timeout_ms = (nav_timeout or config.NAV_TIMEOUT) * 1000
        self.card_timeout_ms = (card_timeout or config.CARD_TIMEOUT) * 1000
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self):
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=self.headless)
            self._context = await self._browser.new_context(**browser_context_options())
            self._page = await self._context.new_page()
        except Exception:
            # __aexit__ does not run when __aenter__ raises
            await self.__aexit__(None, None, None)
            raise
        logger.debug(f"Browser started (headless={self.headless})")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            if self._browser:
                await self._browser.close()
        except PlaywrightError as e:
            logger.warning(f"Error closing browser: {e}")
        finally:
            if self._playwright:
                await self._playwright.stop()
            self._page = self._context = self._browser = self._playwright = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("PlaywrightFetcher used outside 'async with'")
        return self._page

    async def open_page(self, url: str) -> None:
        try:
            await self.page.goto(url, wait_until="domcontentloaded", timeout=self.nav_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise FetchError(f"Timed out loading {url}") from e
        except PlaywrightError as e:
            raise FetchError(f"Navigation to {url} failed: {e}") from e

    async def accept_consent(self) -> Optional[str]:
        await self.page.wait_for_timeout(500)
        for selector in CONSENT_SELECTORS:
            button = self.page.locator(selector).first
            if await button.is_visible():
                await button.click(timeout=3000)
                await self.page.wait_for_timeout(500)
                return selector
        return None

    async def wait_for_cards(self) -> None:
        try:
            await self.page.wait_for_selector(CARD_SELECTOR, timeout=self.card_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise CardRegionTimeout(f"No listing cards on {self.page.url} after {self.card_timeout_ms}ms") from e

    async def page_html(self) -> str:
        return await self.page.content()
