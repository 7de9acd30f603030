"""Parse and validate catalog records."""
import json
import re
from typing import Any, Dict, List

from booktracker.models import Book

COVER_COLOR_RE = re.compile(r"^#?[0-9a-fA-F]{6}$")


class LoadError(Exception):
    """The catalog could not be loaded. Fatal for the session."""


def _require(record: Dict[str, Any], key: str, kind, index: int):
    if key not in record:
        raise LoadError(f"Record {index}: missing required field '{key}'")
    value = record[key]
    # bool is an int subclass; a flag is never a valid id or year
    if isinstance(value, bool) or not isinstance(value, kind):
        raise LoadError(f"Record {index}: field '{key}' has invalid type {type(value).__name__}")
    return value


def _string_list(record: Dict[str, Any], key: str, index: int) -> tuple:
    values = _require(record, key, list, index)
    if not all(isinstance(v, str) for v in values):
        raise LoadError(f"Record {index}: field '{key}' must contain only strings")
    return tuple(values)


def parse_book(record: Any, index: int = 0) -> Book:
    """
    Parse a single catalog record.

    Args:
        record: One decoded JSON object from the catalog document
        index: Position of the record, used in error messages

    Returns:
        Book object

    Raises:
        LoadError: If a required field is missing or malformed
    """
    if not isinstance(record, dict):
        raise LoadError(f"Record {index}: expected an object, got {type(record).__name__}")

    average_rating = float(_require(record, "averageRating", (int, float), index))
    if not 0 <= average_rating <= 5:
        raise LoadError(f"Record {index}: averageRating {average_rating} outside 0-5")

    representation = _string_list(record, "lgbtqRepresentation", index)
    if not representation:
        raise LoadError(f"Record {index}: lgbtqRepresentation must not be empty")

    cover_color = _require(record, "coverColor", str, index)
    if not COVER_COLOR_RE.match(cover_color):
        raise LoadError(f"Record {index}: coverColor '{cover_color}' is not a hex color")

    return Book(
        id=_require(record, "id", int, index),
        title=_require(record, "title", str, index),
        author=_require(record, "author", str, index),
        author_description=_require(record, "authorDescription", str, index),
        description=_require(record, "description", str, index),
        genre=_require(record, "genre", str, index),
        publish_year=_require(record, "publishYear", int, index),
        average_rating=average_rating,
        lgbtq_representation=representation,
        trigger_warnings=_string_list(record, "triggerWarnings", index),
        cover_color=cover_color,
    )


def parse_catalog(raw: Any) -> List[Book]:
    """
    Parse a decoded catalog document into books.

    Args:
        raw: Decoded JSON (must be a list of records)

    Returns:
        List of Book objects in document order

    Raises:
        LoadError: If the document or any record is malformed, or ids repeat
    """
    if not isinstance(raw, list):
        raise LoadError(f"Catalog must be a list of records, got {type(raw).__name__}")

    books = []
    seen_ids = set()

    for index, record in enumerate(raw):
        book = parse_book(record, index)
        if book.id in seen_ids:
            raise LoadError(f"Record {index}: duplicate book id {book.id}")
        seen_ids.add(book.id)
        books.append(book)

    return books


def parse_catalog_text(text: str) -> List[Book]:
    """Decode catalog JSON text and parse it."""
    try:
        raw = json.loads(text)
    except ValueError as e:
        raise LoadError(f"Catalog is not valid JSON: {e}") from e
    return parse_catalog(raw)
