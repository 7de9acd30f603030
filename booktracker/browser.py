"""Browsing session: owns catalog, overlay and query, and handles user commands.

Each handler updates state, re-runs the engine and returns the new
``View``. A renderer callback, if given, receives the same ``View``; it
is the only way to observe the debounced search handler, which fires on
the running event loop (or on ``flush()`` when there is none).
"""
from typing import Callable, Optional
import logging

from booktracker import engine
from booktracker.catalog import Catalog
from booktracker.debounce import debounce
from booktracker.models import Book, Query, View
from booktracker.overlay import OverlayStore
from booktracker.stats import compute_stats

logger = logging.getLogger(__name__)

FILTER_FIELDS = {
    "status": "status_filter",
    "representation": "representation_filter",
    "genre": "genre_filter",
}


class UnknownBook(LookupError):
    """A command referred to a book id that is not in the catalog."""


class Browser:
    """Explicit session state for one user."""

    def __init__(
        self,
        catalog: Catalog,
        overlay_store: OverlayStore,
        renderer: Optional[Callable[[View], None]] = None,
        search_debounce: float = 0.3
    ):
        """
        Args:
            catalog: Loaded catalog
            overlay_store: Store whose overlay has already been loaded
            renderer: Called with every new View
            search_debounce: Quiet period before a search change is applied
        """
        self.catalog = catalog
        self.overlay_store = overlay_store
        self.query = Query()
        self.renderer = renderer
        self.on_search_changed = debounce(search_debounce)(self._apply_search)

    @property
    def overlay(self):
        return self.overlay_store.overlay

    def view(self) -> View:
        """Recompute the visible books and statistics from current state."""
        return View(
            books=engine.visible(self.catalog, self.overlay, self.query),
            stats=compute_stats(self.catalog, self.overlay),
        )

    def _publish(self) -> View:
        view = self.view()
        if self.renderer is not None:
            self.renderer(view)
        return view

    def _require_book(self, book_id: int) -> Book:
        book = self.catalog.find(book_id)
        if book is None:
            raise UnknownBook(f"No book with id {book_id}")
        return book

    # Command handlers

    def _apply_search(self, text: str) -> View:
        self.query.search_text = text
        return self._publish()

    def on_filter_changed(self, name: str, value: str) -> View:
        """
        Change the status, representation or genre filter.

        Args:
            name: "status", "representation" or "genre"
            value: New selection; unknown values behave like "all"
        """
        if name not in FILTER_FIELDS:
            raise ValueError(f"Unknown filter: {name}")
        self.query.set(FILTER_FIELDS[name], value)
        return self._publish()

    def on_sort_changed(self, sort_key: str) -> View:
        self.query.sort_key = sort_key
        return self._publish()

    def on_toggle_read(self, book_id: int) -> View:
        self._require_book(book_id)
        now_read = self.overlay_store.toggle_read(book_id)
        logger.info(f"Book {book_id} marked {'read' if now_read else 'unread'}")
        return self._publish()

    def on_set_rating(self, book_id: int, rating: int) -> View:
        self._require_book(book_id)
        new_rating = self.overlay_store.set_rating(book_id, rating)
        if new_rating is None:
            logger.info(f"Rating cleared for book {book_id}")
        else:
            logger.info(f"Book {book_id} rated {new_rating}")
        return self._publish()

    def on_reset(self) -> View:
        """Restore default filters, empty search and title order."""
        self.on_search_changed.cancel()
        self.query.reset()
        return self._publish()

    # Renderer queries

    def is_read(self, book_id: int) -> bool:
        return self.overlay.is_read(book_id)

    def rating_of(self, book_id: int) -> Optional[int]:
        return self.overlay.rating_of(book_id)

    def display_rating(self, book_id: int) -> float:
        return engine.display_rating(self._require_book(book_id), self.overlay)
