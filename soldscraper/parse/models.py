"""Data models for scraped records."""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field


class PropertyType(str, Enum):
    """Closed set of property categories shown on listing cards."""

    DETACHED = "detached"
    SEMI_DETACHED = "semi-detached"
    TERRACE = "terrace"
    END_OF_TERRACE = "end-of-terrace"
    TOWNHOUSE = "townhouse"
    APARTMENT = "apartment"
    DUPLEX = "duplex"
    BUNGALOW = "bungalow"
    SITE = "site"


class ScrapedListingRecord(BaseModel):
    """One sold listing extracted from a listing card."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    sold_date: date = Field(..., description="Sale date from the SOLD token")
    address: str = Field(..., min_length=10)
    sold_price: int = Field(..., gt=0)
    asking_price: int = Field(..., gt=0)
    beds: Optional[int] = Field(default=None, ge=0)
    baths: Optional[int] = Field(default=None, ge=0)
    area_sqm: Optional[float] = Field(default=None, gt=0)
    property_type: Optional[PropertyType] = None
    ber_rating: Optional[str] = Field(default=None, pattern=r"^[A-G][1-3]?$")
    locality: Optional[str] = None
    county: Optional[str] = None
    source_page_url: str = Field(..., description="Page the card was read from (resume key)")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def over_under_percent(self) -> float:
        """Percentage the sale closed over (+) or under (-) asking."""
        return round((self.sold_price - self.asking_price) / self.asking_price * 100, 1)

    @property
    def dedupe_key(self) -> tuple[str, date, int]:
        return (self.address.lower(), self.sold_date, self.sold_price)


@dataclass(frozen=True)
class Rejected:
    """A card that did not yield a record."""

    reason: str


ParseResult = Union[ScrapedListingRecord, Rejected]
