"""Tests for the catalog loaders."""
import asyncio
import json
from unittest.mock import MagicMock, patch

import httpx
import pytest
import requests

from booktracker.async_client import AsyncCatalogClient
from booktracker.client import CatalogClient, is_url
from booktracker.parse import LoadError


def test_is_url():
    assert is_url("https://example.com/books.json")
    assert is_url("http://localhost/books.json")
    assert not is_url("books.json")


def test_load_from_file(catalog_file):
    """Test loading the catalog from disk."""
    with CatalogClient() as client:
        catalog = client.load(catalog_file)

    assert len(catalog) == 5
    assert catalog.find(3).title == "Giovanni's Room"


def test_load_missing_file(tmp_path):
    with CatalogClient() as client:
        with pytest.raises(LoadError, match="Cannot read catalog"):
            client.load(tmp_path / "nope.json")


def test_load_malformed_file(tmp_path):
    path = tmp_path / "books.json"
    path.write_text("<html>not json</html>", encoding="utf-8")

    with CatalogClient() as client:
        with pytest.raises(LoadError):
            client.load(path)


def test_load_from_url(records):
    """Test fetching the catalog over HTTP."""
    client = CatalogClient(timeout=5)
    response = MagicMock(status_code=200, text=json.dumps(records))

    with patch.object(client.session, "get", return_value=response) as mock_get:
        catalog = client.load("https://example.com/books.json")

    mock_get.assert_called_once_with("https://example.com/books.json", timeout=5)
    assert len(catalog) == 5


def test_load_from_url_bad_status():
    """Test that a non-200 response is fatal and not retried."""
    client = CatalogClient()
    response = MagicMock(status_code=503, text="")

    with patch.object(client.session, "get", return_value=response) as mock_get:
        with pytest.raises(LoadError, match="503"):
            client.load("https://example.com/books.json")

    assert mock_get.call_count == 1


@pytest.mark.parametrize("error", [
    requests.exceptions.Timeout("slow"),
    requests.exceptions.ConnectionError("down"),
])
def test_load_from_url_unreachable(error):
    client = CatalogClient()

    with patch.object(client.session, "get", side_effect=error) as mock_get:
        with pytest.raises(LoadError):
            client.load("https://example.com/books.json")

    assert mock_get.call_count == 1


def _async_load(source, handler=None):
    transport = httpx.MockTransport(handler) if handler else None

    async def run():
        async with AsyncCatalogClient(transport=transport) as client:
            return await client.load(source)

    return asyncio.run(run())


def test_async_load_from_url(records):
    """Test the async client against a mocked transport."""
    def handler(request):
        assert request.url.path == "/books.json"
        return httpx.Response(200, json=records)

    catalog = _async_load("https://example.com/books.json", handler)

    assert [b.id for b in catalog] == [1, 2, 3, 4, 5]


def test_async_load_bad_status():
    def handler(request):
        return httpx.Response(404)

    with pytest.raises(LoadError, match="404"):
        _async_load("https://example.com/books.json", handler)


def test_async_load_connection_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(LoadError, match="Cannot reach"):
        _async_load("https://example.com/books.json", handler)


def test_async_load_from_file(catalog_file):
    catalog = _async_load(catalog_file)
    assert len(catalog) == 5
