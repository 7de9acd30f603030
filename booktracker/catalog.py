"""Session-wide catalog of books."""
from typing import Dict, Iterator, List, Optional, Sequence

from booktracker.models import Book


class Catalog:
    """Immutable, ordered collection of books with id lookup."""

    def __init__(self, books: Sequence[Book]):
        self._books = tuple(books)
        self._by_id: Dict[int, Book] = {book.id: book for book in self._books}
        if len(self._by_id) != len(self._books):
            raise ValueError("Book ids must be unique")

    def __iter__(self) -> Iterator[Book]:
        return iter(self._books)

    def __len__(self) -> int:
        return len(self._books)

    def __contains__(self, book_id) -> bool:
        return book_id in self._by_id

    def find(self, book_id: int) -> Optional[Book]:
        """Get a book by ID, or None if the catalog has no such book."""
        return self._by_id.get(book_id)

    def genres(self) -> List[str]:
        """Distinct genres, sorted, for the genre filter options."""
        return sorted({book.genre for book in self._books})

    def representations(self) -> List[str]:
        """Distinct representation categories, sorted."""
        return sorted({rep for book in self._books for rep in book.lgbtq_representation})
