"""Shared pytest fixtures for the menubot test suite."""

from __future__ import annotations

from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from menubot.auth.token_cache import TokenCache
from menubot.config import get_settings, load_sites
from menubot.models.site import SiteConfig
from menubot.server.app import create_app
from tests.helpers import FIXTURES_DIR, CountingRefresher, FakeClock, StaticFetcher, read_page


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Point settings at the fixture sites file and drop any ambient credentials."""

    monkeypatch.setenv("MENUBOT_SITES_PATH", str(FIXTURES_DIR / "sites.json"))
    monkeypatch.setenv("MENUBOT_API_URL", "http://connector.test")
    for key in ("MENUBOT_API_TOKEN", "MENUBOT_BOT_ID", "MENUBOT_BOT_SECRET", "MENUBOT_SERVER_ENDPOINT"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sites() -> list[SiteConfig]:
    return load_sites(FIXTURES_DIR / "sites.json")


@pytest.fixture()
def fixture_fetcher() -> StaticFetcher:
    return StaticFetcher(
        {
            "http://canteen.test/menu": read_page("canteen.html"),
            "http://bistro.test/lunch": read_page("bistro.html"),
        }
    )


@pytest.fixture()
def refresher(fake_clock) -> CountingRefresher:
    return CountingRefresher(fake_clock)


@pytest.fixture()
def token_cache(refresher, fake_clock) -> TokenCache:
    return TokenCache(refresher, clock=fake_clock)


@pytest.fixture()
def app(token_cache) -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app(token_cache=token_cache)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)
