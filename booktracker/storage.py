"""Durable local key-value storage backed by a SQLite file."""
import sqlite3
from pathlib import Path
from typing import Optional, Union
import logging

logger = logging.getLogger(__name__)


class Storage:
    """Single-table key-value store. Every write is committed immediately."""

    def __init__(self, path: Union[str, Path] = ":memory:"):
        """
        Open the store.

        Args:
            path: SQLite file path, or ":memory:" for a throwaway store
        """
        self.path = str(path)
        self.connection = sqlite3.connect(self.path)
        logger.info(f"Storage opened at {self.path}")

    def init_schema(self):
        """Create the key-value table if it doesn't exist."""
        with self.connection:
            self.connection.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

    def get_item(self, key: str) -> Optional[str]:
        """
        Read a stored value.

        Args:
            key: Entry key

        Returns:
            Stored text, or None if the key is absent
        """
        row = self.connection.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        """
        Insert or overwrite a value.

        Raises:
            sqlite3.Error: If the write fails
        """
        with self.connection:
            self.connection.execute("""
                INSERT INTO kv_store (key, value) VALUES (?, ?)
                ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value
            """, (key, value))

    def remove_item(self, key: str) -> None:
        """Delete a key if present."""
        with self.connection:
            self.connection.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def close(self):
        """Close the connection."""
        self.connection.close()
        logger.info("Storage closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


def open_storage(path: Union[str, Path]) -> Storage:
    """Open a store and make sure its schema exists."""
    storage = Storage(path)
    storage.init_schema()
    return storage
