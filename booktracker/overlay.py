"""User overlay store: read flags and personal ratings, durably mirrored."""
import json
import sqlite3
from typing import Dict, Optional, Set
import logging

from booktracker.models import Overlay
from booktracker.storage import Storage

logger = logging.getLogger(__name__)

READ_BOOKS_KEY = "lgbtq_tracker_read_books"
USER_RATINGS_KEY = "lgbtq_tracker_user_ratings"

MIN_RATING = 1
MAX_RATING = 5


class CorruptOverlay(ValueError):
    """Stored overlay data could not be decoded."""


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def decode_read_ids(text: Optional[str]) -> Set[int]:
    """Decode the stored read-id list. Missing entry means nothing read."""
    if text is None:
        return set()
    try:
        values = json.loads(text)
    except ValueError as e:
        raise CorruptOverlay(f"read list is not JSON: {e}") from e
    if not isinstance(values, list) or not all(_is_int(v) for v in values):
        raise CorruptOverlay("read list must be a list of integer ids")
    return set(values)


def decode_ratings(text: Optional[str]) -> Dict[int, int]:
    """Decode the stored ratings object; JSON object keys come back as strings."""
    if text is None:
        return {}
    try:
        raw = json.loads(text)
    except ValueError as e:
        raise CorruptOverlay(f"ratings are not JSON: {e}") from e
    if not isinstance(raw, dict):
        raise CorruptOverlay("ratings must be an object")

    ratings = {}
    for key, value in raw.items():
        try:
            book_id = int(key)
        except ValueError as e:
            raise CorruptOverlay(f"rating key {key!r} is not a book id") from e
        if not _is_int(value) or not MIN_RATING <= value <= MAX_RATING:
            raise CorruptOverlay(f"rating {value!r} for book {book_id} is not 1-5")
        ratings[book_id] = value
    return ratings


class OverlayStore:
    """
    In-memory overlay with write-through to durable storage.

    Every mutation is saved synchronously before the method returns.
    """

    def __init__(self, storage: Storage):
        self.storage = storage
        self.overlay = Overlay()

    def load(self) -> Overlay:
        """
        Read the overlay from storage.

        Never fails: absent entries, unreadable storage and malformed data
        all yield an empty overlay.
        """
        try:
            read_ids = decode_read_ids(self.storage.get_item(READ_BOOKS_KEY))
            ratings = decode_ratings(self.storage.get_item(USER_RATINGS_KEY))
        except (CorruptOverlay, sqlite3.Error) as e:
            logger.warning(f"Ignoring unreadable user data: {e}")
            read_ids, ratings = set(), {}

        self.overlay = Overlay(read_ids=read_ids, ratings=ratings)
        logger.info(f"Loaded overlay: {len(read_ids)} read, {len(ratings)} rated")
        return self.overlay

    def save(self) -> bool:
        """
        Write both overlay entries to storage.

        Returns:
            True if successful, False if the write failed (the in-memory
            overlay keeps the change either way)
        """
        read_json = json.dumps(sorted(self.overlay.read_ids))
        ratings_json = json.dumps({str(k): v for k, v in self.overlay.ratings.items()})
        try:
            self.storage.set_item(READ_BOOKS_KEY, read_json)
            self.storage.set_item(USER_RATINGS_KEY, ratings_json)
            return True
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failed to save user data: {e}")
            return False

    def toggle_read(self, book_id: int) -> bool:
        """
        Flip the read flag for a book and persist.

        Returns:
            The new read state
        """
        read_ids = self.overlay.read_ids
        if book_id in read_ids:
            read_ids.discard(book_id)
        else:
            read_ids.add(book_id)

        self.save()
        return book_id in read_ids

    def set_rating(self, book_id: int, rating: int) -> Optional[int]:
        """
        Rate a book; choosing its current rating again clears it.

        Args:
            book_id: Book to rate
            rating: Star value, 1 to 5

        Returns:
            The new rating, or None if the rating was cleared

        Raises:
            ValueError: If rating is outside 1-5
        """
        if not _is_int(rating) or not MIN_RATING <= rating <= MAX_RATING:
            raise ValueError(f"Rating must be an integer from {MIN_RATING} to {MAX_RATING}, got {rating!r}")

        ratings = self.overlay.ratings
        if ratings.get(book_id) == rating:
            del ratings[book_id]
        else:
            ratings[book_id] = rating

        self.save()
        return ratings.get(book_id)
