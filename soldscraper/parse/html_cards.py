"""Extract listing cards from rendered page HTML."""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from selectolax.parser import HTMLParser

from soldscraper.parse.card_parser import parse_ber_rating

logger = logging.getLogger(__name__)

CARD_SELECTOR = '[data-testid="card-container"]'
# Energy rating badge, e.g. <img class="ber_B2_large">
BER_SELECTOR = '[class*="ber_"]'

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class CardContent:
    """Text of one card plus what only its markup carries."""

    text: str
    ber_rating: Optional[str] = None


def normalize_text(text: str) -> str:
    """Collapse runs of whitespace to single spaces."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_cards(html_content: str, selector: str = CARD_SELECTOR) -> list[CardContent]:
    """Return every non-empty card, in page order."""
    if not html_content:
        return []
    parser = HTMLParser(html_content)
    cards = []
    for node in parser.css(selector):
        text = normalize_text(node.text(deep=True, separator=" "))
        if not text:
            continue
        ber_node = node.css_first(BER_SELECTOR)
        ber_rating = parse_ber_rating(ber_node.attributes.get("class") or "") if ber_node else None
        cards.append(CardContent(text=text, ber_rating=ber_rating))
    return cards


def extract_card_texts(html_content: str, selector: str = CARD_SELECTOR) -> list[str]:
    """Return the text content of every card, in page order."""
    return [card.text for card in extract_cards(html_content, selector)]


def has_cards(html_content: str, selector: str = CARD_SELECTOR) -> bool:
    if not html_content:
        return False
    return HTMLParser(html_content).css_first(selector) is not None
