"""Test doubles shared across the menubot test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Union

from menubot.errors import FetchFailure
from menubot.models.token import BearerToken

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
PAGES_DIR = FIXTURES_DIR / "pages"

# 2024-01-01 is a Monday (weekday index 1)
MONDAY_NOON = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = MONDAY_NOON) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class StaticFetcher:
    """Serve canned documents by URL; exceptions in the mapping are raised instead."""

    def __init__(self, pages: Dict[str, Union[bytes, Exception]]) -> None:
        self._pages = pages
        self.requested: list[str] = []

    async def fetch(self, url: str) -> bytes:
        self.requested.append(url)
        page = self._pages.get(url)
        if page is None:
            raise FetchFailure(url, "HTTP 404")
        if isinstance(page, Exception):
            raise page
        return page


class CountingRefresher:
    """Token refresher that issues sequential tokens with a fixed lifetime."""

    def __init__(self, clock: FakeClock, lifetime_s: int = 3600) -> None:
        self.clock = clock
        self.lifetime_s = lifetime_s
        self.calls = 0

    async def __call__(self) -> BearerToken:
        self.calls += 1
        return BearerToken(
            token=f"token-{self.calls}",
            expires_at=self.clock() + timedelta(seconds=self.lifetime_s),
        )


def read_page(name: str) -> bytes:
    return (PAGES_DIR / name).read_bytes()
