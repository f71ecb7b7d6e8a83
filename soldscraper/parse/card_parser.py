"""Parse the rendered text of one listing card into a record.

Card text looks like::

    SOLD 02/12/2025 12 Main Street, Ranelagh, Dublin 6 Sold: €590,000
    Asking: €595,000 4 Bed 2 Bath 127.6 m² Semi-D

Rejections are returned as values, never raised.
"""
import logging
import re
from datetime import date, datetime
from typing import Optional

from pydantic import ValidationError

from soldscraper.parse.models import ParseResult, PropertyType, Rejected, ScrapedListingRecord

logger = logging.getLogger(__name__)

MIN_ADDRESS_LENGTH = 10

SOLD_DATE_RE = re.compile(r"SOLD (\d{2}/\d{2}/\d{4})")
# Amounts are thousands-grouped: 590,000 or 1,250,000
SOLD_PRICE_RE = re.compile(r"Sold:\s*€\s*(\d{1,3}(?:,\d{3})+)(?![\d,])")
ASKING_PRICE_RE = re.compile(r"Asking:\s*€\s*(\d{1,3}(?:,\d{3})+)(?![\d,])")

BEDS_RE = re.compile(r"(\d+)\s*Bed(?:s|rooms?)?\b", re.IGNORECASE)
BATHS_RE = re.compile(r"(\d+)\s*Bath(?:s|rooms?)?\b", re.IGNORECASE)
AREA_RE = re.compile(r"(\d+(?:\.\d+)?)\s*m(?:²|2)(?!\w)")
PROPERTY_TYPE_RE = re.compile(
    r"\b(Semi-D(?:etached)?|End of Terrace|Detached|Terrace|Townhouse|Apartment|Duplex|Bungalow|Site)\b",
    re.IGNORECASE,
)

PROPERTY_TYPE_LABELS = {
    "semi-d": PropertyType.SEMI_DETACHED,
    "semi-detached": PropertyType.SEMI_DETACHED,
    "end of terrace": PropertyType.END_OF_TERRACE,
    "detached": PropertyType.DETACHED,
    "terrace": PropertyType.TERRACE,
    "townhouse": PropertyType.TOWNHOUSE,
    "apartment": PropertyType.APARTMENT,
    "duplex": PropertyType.DUPLEX,
    "bungalow": PropertyType.BUNGALOW,
    "site": PropertyType.SITE,
}

# Badge class like "ber_B2_large", or the rating itself
BER_CLASS_RE = re.compile(r"ber_([A-G][1-3]?)_", re.IGNORECASE)
BER_VALUE_RE = re.compile(r"^([A-G][1-3]?)$", re.IGNORECASE)
BER_TEXT_RE = re.compile(r"\bBER[:\s]*([A-G][1-3]?)\b")

COUNTY_PREFIX_RE = re.compile(r"^(?:Co\.?|County)\s+", re.IGNORECASE)
POSTAL_DISTRICT_RE = re.compile(r"\s+\d+\w?$")


def parse_price(amount: str) -> Optional[int]:
    """Parse a grouped amount like "590,000" to an int."""
    try:
        value = int(amount.replace(",", ""))
    except ValueError:
        return None
    return value if value > 0 else None


def parse_sold_date(date_str: str) -> Optional[date]:
    """Parse DD/MM/YYYY. Returns None for impossible dates."""
    try:
        return datetime.strptime(date_str, "%d/%m/%Y").date()
    except ValueError:
        return None


def parse_area(text: str) -> Optional[float]:
    match = AREA_RE.search(text)
    if not match:
        return None
    value = float(match.group(1))
    return value if value > 0 else None


def parse_count(pattern: re.Pattern, text: str) -> Optional[int]:
    match = pattern.search(text)
    return int(match.group(1)) if match else None


def parse_property_type(text: str) -> Optional[PropertyType]:
    match = PROPERTY_TYPE_RE.search(text)
    if not match:
        return None
    return PROPERTY_TYPE_LABELS.get(match.group(1).lower())


def parse_ber_rating(value: str) -> Optional[str]:
    """Parse "ber_B2_large" or "b2" to "B2"."""
    if not value:
        return None
    match = BER_CLASS_RE.search(value) or BER_VALUE_RE.match(value.strip())
    return match.group(1).upper() if match else None


def extract_locality(address: str) -> Optional[str]:
    """Second-to-last comma part of the address, e.g. "Ranelagh"."""
    parts = [p.strip() for p in address.split(",") if p.strip()]
    if len(parts) < 2:
        return None
    return parts[-2]


def extract_county(address: str) -> Optional[str]:
    """Last comma part without "Co." prefix or postal district ("Dublin 6" -> "Dublin")."""
    parts = [p.strip() for p in address.split(",") if p.strip()]
    if len(parts) < 2:
        return None
    county = COUNTY_PREFIX_RE.sub("", parts[-1])
    county = POSTAL_DISTRICT_RE.sub("", county).strip()
    return county or None


def parse_card(card_text: str, source_page_url: str, ber_rating: Optional[str] = None) -> ParseResult:
    """Parse one card's text into a ScrapedListingRecord, or Rejected.

    ``ber_rating`` comes from the card markup; without it the text is searched
    for a "BER B2" label.
    """
    if not card_text:
        return Rejected("empty card")

    date_match = SOLD_DATE_RE.search(card_text)
    if not date_match:
        return Rejected("missing sold date")
    sold_date = parse_sold_date(date_match.group(1))
    if sold_date is None:
        return Rejected(f"invalid sold date {date_match.group(1)}")

    sold_match = SOLD_PRICE_RE.search(card_text)
    asking_match = ASKING_PRICE_RE.search(card_text)
    if not sold_match:
        return Rejected("missing sold price")
    if not asking_match:
        return Rejected("missing asking price")

    sold_price = parse_price(sold_match.group(1))
    asking_price = parse_price(asking_match.group(1))
    if sold_price is None or asking_price is None:
        return Rejected("non-positive price")

    address = card_text[date_match.end():sold_match.start()].strip()
    if len(address) < MIN_ADDRESS_LENGTH:
        return Rejected("address too short")

    # Optional fields are read outside the address so street names never leak in
    rest = f"{card_text[:date_match.start()]} {card_text[sold_match.start():]}"
    if ber_rating is None:
        ber_match = BER_TEXT_RE.search(rest)
        ber_rating = ber_match.group(1) if ber_match else None

    try:
        return ScrapedListingRecord(
            sold_date=sold_date,
            address=address,
            sold_price=sold_price,
            asking_price=asking_price,
            beds=parse_count(BEDS_RE, rest),
            baths=parse_count(BATHS_RE, rest),
            area_sqm=parse_area(rest),
            property_type=parse_property_type(rest),
            ber_rating=ber_rating,
            locality=extract_locality(address),
            county=extract_county(address),
            source_page_url=source_page_url,
        )
    except ValidationError as e:
        logger.debug(f"Card failed validation: {e}")
        return Rejected("validation failed")


def parse_cards(
    card_texts: list[str],
    source_page_url: str,
    ber_ratings: Optional[list[Optional[str]]] = None,
) -> tuple[list[ScrapedListingRecord], list[tuple[str, Rejected]]]:
    """Parse all cards of a page. Returns (accepted, [(card_text, rejection)]).

    ``ber_ratings`` lines up with ``card_texts`` when given.
    """
    accepted = []
    rejected = []
    ratings = ber_ratings if ber_ratings is not None else [None] * len(card_texts)
    for text, ber_rating in zip(card_texts, ratings):
        result = parse_card(text, source_page_url, ber_rating)
        if isinstance(result, Rejected):
            rejected.append((text, result))
        else:
            accepted.append(result)
    return accepted, rejected
