"""Tests for the record model."""
from datetime import date

import pytest
from pydantic import ValidationError

from soldscraper.parse.models import PropertyType, ScrapedListingRecord


def make_record(**overrides) -> ScrapedListingRecord:
    fields = {
        "sold_date": date(2025, 12, 2),
        "address": "12 Main Street, Dublin 6",
        "sold_price": 590000,
        "asking_price": 595000,
        "source_page_url": "https://www.daft.ie/sold-properties/dublin?page=2",
    }
    fields.update(overrides)
    return ScrapedListingRecord(**fields)


def test_dump_includes_derived_percent():
    """Test JSON output carries the computed percentage."""
    data = make_record(property_type=PropertyType.TERRACE).model_dump(mode="json")
    assert data["sold_date"] == "2025-12-02"
    assert data["over_under_percent"] == -0.8
    assert data["property_type"] == "terrace"


def test_stored_percent_is_not_trusted():
    """Test a stored percentage is ignored on load and recomputed."""
    data = make_record().model_dump(mode="json")
    data["over_under_percent"] = 99.9
    record = ScrapedListingRecord.model_validate(data)
    assert record.over_under_percent == -0.8


def test_invariants_enforced():
    """Test required-field invariants."""
    with pytest.raises(ValidationError):
        make_record(address="short")
    with pytest.raises(ValidationError):
        make_record(sold_price=0)
    with pytest.raises(ValidationError):
        make_record(asking_price=-1)
    with pytest.raises(ValidationError):
        make_record(area_sqm=0)


def test_records_are_immutable():
    """Test records cannot be updated in place."""
    record = make_record()
    with pytest.raises(ValidationError):
        record.sold_price = 1


def test_dedupe_key_ignores_case():
    """Test dedupe key normalizes address case."""
    a = make_record(address="12 Main Street, Dublin 6")
    b = make_record(address="12 MAIN STREET, DUBLIN 6")
    assert a.dedupe_key == b.dedupe_key
