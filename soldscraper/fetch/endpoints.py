"""URL builders for the sold-properties listing pages."""
from typing import Optional
from urllib.parse import parse_qs, urlparse

from soldscraper.config import config


def get_page_url(page: int, location: Optional[str] = None, base_url: Optional[str] = None) -> str:
    """Get the listing URL for a page number.

    Page 1 has no query string; later pages carry ``?page=N``.
    """
    if page < 1:
        raise ValueError(f"Page numbers start at 1, got {page}")
    base = (base_url or config.BASE_URL).rstrip("/")
    url = f"{base}/{location or config.LOCATION}"
    if page == 1:
        return url
    return f"{url}?page={page}"


def page_number_from_url(url: str) -> Optional[int]:
    """Inverse of get_page_url. Returns None if the URL is not a listing page URL."""
    if not url:
        return None
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return None
    values = parse_qs(parsed.query).get("page")
    if not values:
        return 1
    try:
        page = int(values[0])
    except ValueError:
        return None
    return page if page >= 1 else None
