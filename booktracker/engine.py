"""Filter and sort the catalog for display.

Everything here is a pure function of (catalog, overlay, query): nothing
is cached and nothing is mutated, so callers simply re-run ``visible``
after any change.
"""
import math
import unicodedata
from typing import Callable, Dict, List, Optional, Tuple

from booktracker.catalog import Catalog
from booktracker.models import (
    ALL,
    SORT_AUTHOR,
    SORT_RATING_HIGH,
    SORT_RATING_LOW,
    SORT_TITLE,
    SORT_YEAR_NEW,
    SORT_YEAR_OLD,
    STATUS_READ,
    STATUS_UNREAD,
    Book,
    Overlay,
    Query,
)

FULL_STAR = "★"
HALF_STAR = "⯨"
EMPTY_STAR = "☆"
STAR_POSITIONS = 5


def _fold(text: str) -> str:
    return text.casefold()


def collation_key(text: str) -> str:
    """Accent- and case-insensitive key for alphabetical ordering."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


def matches_search(book: Book, search_text: str) -> bool:
    """Substring match against title, author, description or any representation."""
    term = _fold(search_text.strip())
    if not term:
        return True
    return (
        term in _fold(book.title)
        or term in _fold(book.author)
        or term in _fold(book.description)
        or any(term in _fold(rep) for rep in book.lgbtq_representation)
    )


def matches_status(book: Book, overlay: Overlay, status: str) -> bool:
    if status == STATUS_READ:
        return overlay.is_read(book.id)
    if status == STATUS_UNREAD:
        return not overlay.is_read(book.id)
    return True


def matches_representation(book: Book, representation: str, known: frozenset) -> bool:
    # unknown categories fail open
    if representation == ALL or representation not in known:
        return True
    return representation in book.lgbtq_representation


def matches_genre(book: Book, genre: str, known: frozenset) -> bool:
    if genre == ALL or genre not in known:
        return True
    return book.genre == genre


SORTS: Dict[str, Tuple[Callable[[Book], object], bool]] = {
    SORT_TITLE: (lambda b: (collation_key(b.title), b.title.swapcase()), False),
    SORT_AUTHOR: (lambda b: (collation_key(b.author), b.author.swapcase()), False),
    SORT_RATING_HIGH: (lambda b: b.average_rating, True),
    SORT_RATING_LOW: (lambda b: b.average_rating, False),
    SORT_YEAR_NEW: (lambda b: b.publish_year, True),
    SORT_YEAR_OLD: (lambda b: b.publish_year, False),
}


def sort_books(books: List[Book], sort_key: str) -> List[Book]:
    """
    Return a sorted copy of ``books``.

    ``sorted`` is stable, including with ``reverse=True``, so equal keys
    keep their incoming order. Unknown sort keys return the input order.
    """
    if sort_key not in SORTS:
        return list(books)
    key, descending = SORTS[sort_key]
    return sorted(books, key=key, reverse=descending)


def visible(catalog: Catalog, overlay: Overlay, query: Query) -> List[Book]:
    """
    Books passing every active filter, in ``query.sort_key`` order.

    Args:
        catalog: Session catalog
        overlay: User read flags and ratings
        query: Search text, filters and sort key

    Returns:
        New list; the catalog itself is never reordered
    """
    genres = frozenset(catalog.genres())
    representations = frozenset(catalog.representations())

    matching = [
        book for book in catalog
        if matches_search(book, query.search_text)
        and matches_status(book, overlay, query.status_filter)
        and matches_representation(book, query.representation_filter, representations)
        and matches_genre(book, query.genre_filter, genres)
    ]
    return sort_books(matching, query.sort_key)


def display_rating(book: Book, overlay: Overlay) -> float:
    """Personal rating if the user gave one, else the catalog average."""
    personal: Optional[int] = overlay.rating_of(book.id)
    return float(personal) if personal is not None else book.average_rating


def star_glyphs(rating: float) -> str:
    """Five star positions: full stars, an optional half star, then empty ones."""
    rating = min(max(rating, 0.0), float(STAR_POSITIONS))
    full = math.floor(rating)
    half = 1 if rating - full >= 0.5 else 0
    empty = STAR_POSITIONS - full - half
    return FULL_STAR * full + HALF_STAR * half + EMPTY_STAR * empty


def format_rating(rating: float) -> str:
    return f"{rating:.1f}"


def truncate(text: str, length: int = 50) -> str:
    """Cut ``text`` to ``length`` characters, marking the cut with '...'."""
    return text[:length] + "..." if len(text) > length else text
