"""Tests for parsing functions."""
import pytest

from booktracker.parse import LoadError, parse_book, parse_catalog, parse_catalog_text
from conftest import make_record


def test_parse_book_complete():
    """Test parsing a record with all fields present."""
    record = make_record(
        id=7,
        title="Orlando",
        author="Virginia Woolf",
        publishYear=1928,
        averageRating=3.8,
        lgbtqRepresentation=["Transgender", "Lesbian"],
        triggerWarnings=["Death"],
        coverColor="#AA00FF",
    )

    book = parse_book(record)

    assert book.id == 7
    assert book.title == "Orlando"
    assert book.publish_year == 1928
    assert book.average_rating == 3.8
    assert book.lgbtq_representation == ("Transgender", "Lesbian")
    assert book.trigger_warnings == ("Death",)
    assert book.representation_str == "Transgender, Lesbian"


def test_parse_book_integer_rating_becomes_float():
    """Test that a whole-number averageRating is accepted."""
    book = parse_book(make_record(averageRating=5))
    assert book.average_rating == 5.0
    assert isinstance(book.average_rating, float)


def test_parse_book_empty_trigger_warnings():
    """Test that trigger warnings may be empty."""
    book = parse_book(make_record(triggerWarnings=[]))
    assert book.trigger_warnings == ()
    assert book.trigger_warnings_str == "None"


@pytest.mark.parametrize("field", [
    "id", "title", "author", "authorDescription", "description", "genre",
    "publishYear", "averageRating", "lgbtqRepresentation", "triggerWarnings", "coverColor",
])
def test_parse_book_missing_field(field):
    """Test that every field is required."""
    record = make_record()
    del record[field]

    with pytest.raises(LoadError, match=field):
        parse_book(record)


@pytest.mark.parametrize("overrides", [
    {"id": "1"},
    {"id": True},
    {"publishYear": "2001"},
    {"averageRating": "4.5"},
    {"averageRating": 5.5},
    {"averageRating": -1},
    {"lgbtqRepresentation": []},
    {"lgbtqRepresentation": "Gay"},
    {"triggerWarnings": [1, 2]},
    {"coverColor": "blue"},
    {"coverColor": "#12345"},
])
def test_parse_book_invalid_values(overrides):
    """Test that malformed fields are rejected."""
    with pytest.raises(LoadError):
        parse_book(make_record(**overrides))


def test_parse_book_not_an_object():
    with pytest.raises(LoadError, match="expected an object"):
        parse_book(["not", "a", "record"])


def test_parse_catalog_keeps_order():
    """Test parsing a complete catalog document."""
    raw = [make_record(id=2, title="Book 2"), make_record(id=1, title="Book 1")]

    books = parse_catalog(raw)

    assert [b.title for b in books] == ["Book 2", "Book 1"]


def test_parse_catalog_duplicate_ids():
    """Test that repeated ids fail the whole load."""
    raw = [make_record(id=1), make_record(id=2), make_record(id=1)]

    with pytest.raises(LoadError, match="duplicate book id 1"):
        parse_catalog(raw)


def test_parse_catalog_requires_list():
    with pytest.raises(LoadError):
        parse_catalog({"books": []})


def test_parse_catalog_text_invalid_json():
    with pytest.raises(LoadError, match="not valid JSON"):
        parse_catalog_text("[{]")


def test_parse_catalog_one_bad_record_fails_all():
    """Test that there is no partial catalog."""
    raw = [make_record(id=1), make_record(id=2, title=None)]

    with pytest.raises(LoadError, match="Record 1"):
        parse_catalog(raw)
