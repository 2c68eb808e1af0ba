from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from katika import config, models
from katika.api import create_app
from katika.models import Artist, Portfolio, reset_engine
from katika.store import SqlPortfolioStore


@pytest.fixture
def out_dir(tmp_path: Path):
    target = tmp_path / "out"
    config.set_out_dir(target)
    reset_engine()
    yield target
    models.engine.dispose()


@pytest.fixture
def store(out_dir: Path) -> SqlPortfolioStore:
    return SqlPortfolioStore()


@pytest.fixture
def client(store: SqlPortfolioStore) -> TestClient:
    return TestClient(create_app(store))


def make_artist(store: SqlPortfolioStore, media=(), **overrides) -> Artist:
    fields = {
        "name": "Ama K.",
        "email": "ama@x.com",
        "bio": "Vocalist and guitarist from Accra.",
        "category": "musician",
        "experience": "advanced",
        "genres": ["vocals", "guitar"],
        "city": "Accra",
        "country": "Ghana",
        "social_links": {"instagram": "https://instagram.com/ama", "website": ""},
    }
    fields.update(overrides)
    return store.create_artist(Artist(**fields), media)


def make_portfolio(store: SqlPortfolioStore, artist: Artist, **overrides) -> Portfolio:
    fields = {
        "artist_id": artist.id,
        "title": "Live Sessions",
        "description": "Highlights from the last two seasons.",
        "template": "modern",
        "sections": [
            {"type": "gallery", "title": "Gallery", "content": "Photos from the Accra Jazz Week."},
            {"type": "press", "content": "Featured in City Sounds."},
        ],
        "customizations": {"colors": {"primary": "#112233", "accent": "#FFD23F"}},
        "content": {"jobs": "Resident singer at Jazz Loft", "phone": "+233 20 000 0000"},
    }
    fields.update(overrides)
    return store.create_portfolio(Portfolio(**fields))


@pytest.fixture
def artist(store: SqlPortfolioStore) -> Artist:
    return make_artist(store)


@pytest.fixture
def portfolio(store: SqlPortfolioStore, artist: Artist) -> Portfolio:
    return make_portfolio(store, artist)
