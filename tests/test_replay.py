"""Tests for the replay fetcher."""
import asyncio
import gzip

import pytest

from conftest import good_card_parts, make_page_html
from soldscraper.fetch.base import CardRegionTimeout, FetchError
from soldscraper.fetch.endpoints import get_page_url
from soldscraper.fetch.replay import ReplayFetcher, saved_page_path


def test_plain_and_gzipped_pages(tmp_path):
    """Test both saved page formats are served."""
    (tmp_path / "page-1.html").write_text(
        make_page_html([good_card_parts("01/11/2025", "1 Oak Road, Rathmines, Dublin 6")]),
        encoding="utf-8",
    )
    with gzip.open(tmp_path / "page-2.html.gz", "wt", encoding="utf-8") as f:
        f.write(make_page_html([good_card_parts("02/11/2025", "2 Oak Road, Rathmines, Dublin 6")]))

    async def go():
        texts = []
        async with ReplayFetcher(tmp_path) as fetcher:
            for page in (1, 2):
                await fetcher.open_page(get_page_url(page, "dublin"))
                await fetcher.wait_for_cards()
                texts.extend(card.text for card in await fetcher.cards())
        return texts

    texts = asyncio.run(go())
    assert len(texts) == 2
    assert texts[0].startswith("SOLD 01/11/2025 1 Oak Road")
    assert texts[1].startswith("SOLD 02/11/2025 2 Oak Road")


def test_missing_page(tmp_path):
    """Test a page with no saved file is a fetch error."""
    async def go():
        async with ReplayFetcher(tmp_path) as fetcher:
            await fetcher.open_page(get_page_url(3, "dublin"))

    with pytest.raises(FetchError):
        asyncio.run(go())


def test_page_without_cards(tmp_path):
    """Test a saved page without cards times out the card wait."""
    (tmp_path / "page-1.html").write_text("<html><body>Access denied</body></html>", encoding="utf-8")

    async def go():
        async with ReplayFetcher(tmp_path) as fetcher:
            await fetcher.open_page(get_page_url(1, "dublin"))
            await fetcher.wait_for_cards()

    with pytest.raises(CardRegionTimeout):
        asyncio.run(go())


def test_missing_directory(tmp_path):
    """Test entering a fetcher over a missing directory fails."""
    async def go():
        async with ReplayFetcher(tmp_path / "nope"):
            pass

    with pytest.raises(FetchError):
        asyncio.run(go())


def test_saved_page_path_prefers_plain(tmp_path):
    (tmp_path / "page-4.html").write_text("x", encoding="utf-8")
    (tmp_path / "page-4.html.gz").write_bytes(gzip.compress(b"y"))
    assert saved_page_path(tmp_path, 4).name == "page-4.html"
    assert saved_page_path(tmp_path, 5) is None
