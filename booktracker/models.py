"""Data models for the catalog, the user overlay and the query."""
from dataclasses import dataclass, field, fields
from typing import Dict, List, Set, Tuple


ALL = "all"

STATUS_READ = "read"
STATUS_UNREAD = "unread"
STATUS_FILTERS = (ALL, STATUS_READ, STATUS_UNREAD)

SORT_TITLE = "title"
SORT_AUTHOR = "author"
SORT_RATING_HIGH = "rating-high"
SORT_RATING_LOW = "rating-low"
SORT_YEAR_NEW = "year-new"
SORT_YEAR_OLD = "year-old"
SORT_KEYS = (
    SORT_TITLE,
    SORT_AUTHOR,
    SORT_RATING_HIGH,
    SORT_RATING_LOW,
    SORT_YEAR_NEW,
    SORT_YEAR_OLD,
)


@dataclass(frozen=True)
class Book:
    """Catalog record. Never mutated after load."""
    id: int
    title: str
    author: str
    author_description: str
    description: str
    genre: str
    publish_year: int
    average_rating: float
    lgbtq_representation: Tuple[str, ...]
    trigger_warnings: Tuple[str, ...]
    cover_color: str

    @property
    def representation_str(self) -> str:
        """Format representation categories as comma-separated string."""
        return ", ".join(self.lgbtq_representation)

    @property
    def trigger_warnings_str(self) -> str:
        """Format trigger warnings as comma-separated string."""
        return ", ".join(self.trigger_warnings) if self.trigger_warnings else "None"


@dataclass
class Overlay:
    """Per-user read flags and personal ratings."""
    read_ids: Set[int] = field(default_factory=set)
    ratings: Dict[int, int] = field(default_factory=dict)

    def is_read(self, book_id: int) -> bool:
        return book_id in self.read_ids

    def rating_of(self, book_id: int):
        """Personal rating for ``book_id`` or None when unrated."""
        return self.ratings.get(book_id)


@dataclass
class Query:
    """Current search text, filter selections and sort key."""
    search_text: str = ""
    status_filter: str = ALL
    representation_filter: str = ALL
    genre_filter: str = ALL
    sort_key: str = SORT_TITLE

    def set(self, name: str, value: str) -> None:
        """Set one query field by name.

        Values are not validated; the engine treats anything outside a
        field's domain as "all" (or as a no-op sort).
        """
        if name not in {f.name for f in fields(self)}:
            raise AttributeError(f"Unknown query field: {name}")
        setattr(self, name, value)

    def reset(self) -> None:
        """Restore every field to its default."""
        for f in fields(self):
            setattr(self, f.name, f.default)

    @property
    def is_default(self) -> bool:
        return self == Query()


@dataclass(frozen=True)
class Stats:
    """Summary counters shown above the book grid."""
    total: int
    read: int
    avg_user_rating: float


@dataclass(frozen=True)
class View:
    """What a renderer needs after every command: visible books and stats."""
    books: List[Book]
    stats: Stats

    @property
    def showing(self) -> int:
        return len(self.books)
