"""Shared fixtures: listing card text and saved page HTML."""
import pytest


def make_card(
    sold_date: str = "02/12/2025",
    address: str = "12 Main Street, Ranelagh, Dublin 6",
    sold: str = "590,000",
    asking: str = "595,000",
    extras: str = "4 Bed 2 Bath 127.6 m² Semi-D",
) -> str:
    return f"SOLD {sold_date} {address} Sold: €{sold} Asking: €{asking} {extras}".strip()


def make_card_html(card_text_parts: list[str]) -> str:
    spans = "".join(f"<span>{part}</span>\n" for part in card_text_parts)
    return f'<li data-testid="card-container">\n{spans}</li>\n'


def make_page_html(cards: list[list[str]]) -> str:
    body = "".join(make_card_html(parts) for parts in cards)
    return (
        '<html><head><meta charset="utf-8"></head><body>\n'
        f'<ul class="results">\n{body}</ul>\n</body></html>'
    )


GOOD_CARD_PARTS = [
    "SOLD {date}",
    "{address}",
    "Sold: €{sold}",
    "Asking: €{asking}",
    "3 Bed",
    "1 Bath",
    "85 m²",
    "Terrace",
]

MALFORMED_CARD_PARTS = ["SOLD 01/01/2025", "Flat 1", "Price on application"]


def good_card_parts(date: str, address: str, sold: str = "450,000", asking: str = "425,000") -> list[str]:
    return [p.format(date=date, address=address, sold=sold, asking=asking) for p in GOOD_CARD_PARTS]


@pytest.fixture
def card():
    """Factory for card text."""
    return make_card


@pytest.fixture
def write_pages(tmp_path):
    """Write page-N.html files, one good and one malformed card each.

    Takes {page: (sold_date, address)} and returns the pages directory.
    """
    def _write(pages: dict[int, tuple[str, str]]):
        pages_dir = tmp_path / "pages"
        pages_dir.mkdir(exist_ok=True)
        for page, (date, address) in pages.items():
            html = make_page_html([good_card_parts(date, address), MALFORMED_CARD_PARTS])
            (pages_dir / f"page-{page}.html").write_text(html, encoding="utf-8")
        return pages_dir

    return _write
