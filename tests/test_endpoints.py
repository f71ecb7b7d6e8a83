"""Tests for listing URL building."""
import pytest

from soldscraper.fetch.endpoints import get_page_url, page_number_from_url

BASE = "https://www.daft.ie/sold-properties"


def test_first_page_has_no_query():
    """Test page 1 uses the bare location URL."""
    assert get_page_url(1, "dublin", BASE) == f"{BASE}/dublin"


def test_later_pages_have_page_param():
    """Test page >= 2 carries ?page=N."""
    assert get_page_url(2, "dublin", BASE) == f"{BASE}/dublin?page=2"
    assert get_page_url(10277, "dublin", BASE) == f"{BASE}/dublin?page=10277"


def test_trailing_slash_in_base():
    """Test base URL normalization."""
    assert get_page_url(3, "cork", BASE + "/") == f"{BASE}/cork?page=3"


def test_invalid_page():
    """Test page numbers start at 1."""
    with pytest.raises(ValueError):
        get_page_url(0, "dublin", BASE)


@pytest.mark.parametrize("page", [1, 2, 57, 10277])
def test_page_number_roundtrip(page):
    """Test the resume key decodes back to the page number."""
    assert page_number_from_url(get_page_url(page, "dublin", BASE)) == page


@pytest.mark.parametrize("url", ["", "not a url", f"{BASE}/dublin?page=abc", f"{BASE}/dublin?page=0"])
def test_page_number_invalid(url):
    """Test unusable URLs give None."""
    assert page_number_from_url(url) is None
