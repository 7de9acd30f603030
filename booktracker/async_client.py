"""Async catalog loader; the session's one suspending step."""
import asyncio
from pathlib import Path
from typing import Optional, Union
import logging

import httpx

from booktracker.catalog import Catalog
from booktracker.client import is_url, read_catalog_file
from booktracker.parse import LoadError, parse_catalog_text

logger = logging.getLogger(__name__)


class AsyncCatalogClient:
    """Async client that fetches the catalog once at startup."""

    def __init__(
        self,
        timeout: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize async client.

        Args:
            timeout: Request timeout
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout

        # Create async HTTP client
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def load(self, source: Union[str, Path]) -> Catalog:
        """
        Load and validate the catalog asynchronously.

        Args:
            source: File path or http(s) URL

        Returns:
            Catalog of parsed books

        Raises:
            LoadError: If the source is unreachable or the data is malformed
        """
        logger.info(f"Async catalog load: {source}")

        if is_url(source):
            text = await self._fetch(source)
        else:
            text = await asyncio.to_thread(read_catalog_file, source)

        catalog = Catalog(parse_catalog_text(text))
        logger.info(f"Loaded {len(catalog)} books")
        return catalog

    async def _fetch(self, url: str) -> str:
        try:
            response = await self.client.get(url)
        except httpx.TimeoutException as e:
            raise LoadError(f"Timed out fetching catalog from {url}") from e
        except httpx.HTTPError as e:
            raise LoadError(f"Cannot reach catalog at {url}: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Status {response.status_code} for catalog: {url}")
            raise LoadError(f"Catalog request failed with status {response.status_code}")

        return response.text

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
