"""Pytest configuration and fixtures."""
import json

import pytest

from booktracker.catalog import Catalog
from booktracker.overlay import OverlayStore
from booktracker.parse import parse_catalog
from booktracker.storage import open_storage


def make_record(**overrides):
    """A valid catalog record; override any field."""
    record = {
        "id": 1,
        "title": "Untitled",
        "author": "Anonymous",
        "authorDescription": "A writer.",
        "description": "A book.",
        "genre": "Literary Fiction",
        "publishYear": 2000,
        "averageRating": 4.0,
        "lgbtqRepresentation": ["Gay"],
        "triggerWarnings": [],
        "coverColor": "#336699",
    }
    record.update(overrides)
    return record


SAMPLE_RECORDS = [
    make_record(
        id=1,
        title="The Song of Achilles",
        author="Madeline Miller",
        description="A retelling of the Iliad.",
        genre="Historical Fiction",
        publishYear=2011,
        averageRating=4.4,
        lgbtqRepresentation=["Gay", "M/M Romance"],
        triggerWarnings=["Violence", "War"],
        coverColor="#C9A227",
    ),
    make_record(
        id=2,
        title="Red, White & Royal Blue",
        author="Casey McQuiston",
        description="The First Son falls for a prince.",
        genre="Romance",
        publishYear=2019,
        averageRating=4.1,
        lgbtqRepresentation=["Bisexual", "Gay", "M/M Romance"],
    ),
    make_record(
        id=3,
        title="Giovanni's Room",
        author="James Baldwin",
        description="An American in Paris.",
        genre="Literary Fiction",
        publishYear=1956,
        averageRating=4.2,
        lgbtqRepresentation=["Gay", "Bisexual"],
    ),
    make_record(
        id=4,
        title="Fun Home",
        author="Alison Bechdel",
        description="A family tragicomic.",
        genre="Graphic Memoir",
        publishYear=2006,
        averageRating=4.0,
        lgbtqRepresentation=["Lesbian"],
    ),
    make_record(
        id=5,
        title="Gideon the Ninth",
        author="Tamsyn Muir",
        description="Lesbian necromancers in space.",
        genre="Fantasy",
        publishYear=2019,
        averageRating=4.1,
        lgbtqRepresentation=["Lesbian"],
        triggerWarnings=["Gore"],
    ),
]


@pytest.fixture
def records():
    return [dict(r) for r in SAMPLE_RECORDS]


@pytest.fixture
def catalog(records):
    return Catalog(parse_catalog(records))


@pytest.fixture
def catalog_file(tmp_path, records):
    path = tmp_path / "books.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


@pytest.fixture
def storage():
    store = open_storage(":memory:")
    yield store
    store.close()


@pytest.fixture
def overlay_store(storage):
    store = OverlayStore(storage)
    store.load()
    return store
