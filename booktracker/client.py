"""Catalog loader for local files and HTTP sources."""
from pathlib import Path
from typing import Union
import logging

import requests

from booktracker.catalog import Catalog
from booktracker.parse import LoadError, parse_catalog_text

logger = logging.getLogger(__name__)


def is_url(source: Union[str, Path]) -> bool:
    """True when ``source`` should be fetched over HTTP."""
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def read_catalog_file(path: Union[str, Path]) -> str:
    """Read a catalog document from disk, raising LoadError on failure."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise LoadError(f"Cannot read catalog {path}: {e}") from e


class CatalogClient:
    """Loads the catalog once, from a file path or an http(s) URL.

    There is deliberately no retry: a failed load ends the session.
    """

    def __init__(self, timeout: int = 10):
        """
        Initialize catalog client.

        Args:
            timeout: Request timeout in seconds
        """
        self.timeout = timeout

        # Create session for connection pooling
        self.session = requests.Session()

    def load(self, source: Union[str, Path]) -> Catalog:
        """
        Load and validate the catalog.

        Args:
            source: File path or http(s) URL of a JSON list of book records

        Returns:
            Catalog of parsed books

        Raises:
            LoadError: If the source is unreachable or the data is malformed
        """
        logger.info(f"Loading catalog from {source}")

        if is_url(source):
            text = self._fetch(source)
        else:
            text = read_catalog_file(source)

        catalog = Catalog(parse_catalog_text(text))
        logger.info(f"Loaded {len(catalog)} books")
        return catalog

    def _fetch(self, url: str) -> str:
        """
        Fetch the catalog document over HTTP.

        Args:
            url: Request URL

        Returns:
            Response body text
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise LoadError(f"Timed out fetching catalog from {url}") from e
        except requests.exceptions.RequestException as e:
            raise LoadError(f"Cannot reach catalog at {url}: {e}") from e

        if response.status_code != 200:
            logger.error(f"Catalog request failed ({response.status_code}): {url}")
            raise LoadError(f"Catalog request failed with status {response.status_code}")

        return response.text

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
