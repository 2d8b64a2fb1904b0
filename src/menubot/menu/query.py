"""Chat query recognition and answer generation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from menubot.clock import Clock, local_now
from menubot.menu.extractor import MenuExtractor
from menubot.menu.fetcher import DocumentFetcher
from menubot.menu.render import render_menu
from menubot.menu.store import build_menu_store
from menubot.models.site import SiteConfig

KEYWORD = "menu"
TOMORROW = "tomorrow"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MenuQuery:
    want_tomorrow: bool = False


def parse_menu_query(text: str) -> Optional[MenuQuery]:
    """Return the query when ``text`` asks for the menu, otherwise ``None``."""

    normalized = (text or "").strip().lower()
    if not normalized.startswith(KEYWORD):
        return None
    return MenuQuery(want_tomorrow=TOMORROW in normalized)


class MenuAnswerer:
    """Build a fresh menu store for every question and render the reply text."""

    def __init__(
        self,
        *,
        sites: Sequence[SiteConfig],
        fetcher: DocumentFetcher,
        extractor: Optional[MenuExtractor] = None,
        clock: Clock = local_now,
    ) -> None:
        self._sites = list(sites)
        self._fetcher = fetcher
        self._extractor = extractor or MenuExtractor()
        self._clock = clock

    async def answer(self, want_tomorrow: bool) -> str:
        store = await build_menu_store(self._sites, self._fetcher, self._extractor)
        now = self._clock()
        text = render_menu(store, self._sites, want_tomorrow, now)
        logger.debug("Rendered menu answer tomorrow=%s chars=%s", want_tomorrow, len(text))
        return text


__all__ = ["KEYWORD", "MenuAnswerer", "MenuQuery", "TOMORROW", "parse_menu_query"]
