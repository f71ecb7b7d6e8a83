"""Tests for card text extraction from rendered HTML."""
from soldscraper.parse.html_cards import extract_card_texts, extract_cards, has_cards


def test_extract_card_texts_in_order():
    """Test one normalized text per card, in page order."""
    html = """
    <html><body>
      <div data-testid="card-container">
        <div><span>SOLD 02/12/2025</span></div>
        <p>12 Main Street,
           Dublin 6</p>
        <span>Sold: €590,000</span>
      </div>
      <div data-testid="card-container"><span>second</span></div>
      <div data-testid="other">not a card</div>
    </body></html>
    """
    texts = extract_card_texts(html)

    assert texts == [
        "SOLD 02/12/2025 12 Main Street, Dublin 6 Sold: €590,000",
        "second",
    ]


def test_adjacent_inline_text_is_separated():
    """Test neighbouring elements never glue their words together."""
    html = '<div data-testid="card-container"><b>4 Bed</b><b>2 Bath</b></div>'
    assert extract_card_texts(html) == ["4 Bed 2 Bath"]


def test_empty_cards_skipped():
    """Test cards with no text are dropped."""
    html = '<div data-testid="card-container">   </div>'
    assert extract_card_texts(html) == []


def test_no_cards():
    """Test pages without the card region."""
    html = "<html><body><p>No results</p></body></html>"
    assert extract_card_texts(html) == []
    assert has_cards(html) is False
    assert has_cards("") is False
    assert extract_card_texts("") == []


def test_has_cards():
    """Test card region detection."""
    assert has_cards('<ul><li data-testid="card-container">x</li></ul>') is True


def test_extract_cards_reads_ber_badge():
    """Test the energy rating comes from the badge class, when present."""
    html = """
    <ul>
      <li data-testid="card-container"><span>first</span><img class="ber_B2_large" alt=""></li>
      <li data-testid="card-container"><span>second</span></li>
      <li data-testid="card-container"><span>third</span><div class="ber_exempt_large"></div></li>
    </ul>
    """
    cards = extract_cards(html)
    assert [c.text for c in cards] == ["first", "second", "third"]
    assert [c.ber_rating for c in cards] == ["B2", None, None]
