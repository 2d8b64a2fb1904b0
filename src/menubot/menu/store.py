"""Weekday-indexed menu store and the per-request builder."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Iterator, Sequence

from menubot import metrics
from menubot.errors import FetchFailure, SelectorFailure
from menubot.logging_utils import site_logger
from menubot.menu.extractor import MenuExtractor
from menubot.menu.fetcher import DocumentFetcher
from menubot.models.site import SiteConfig

logger = logging.getLogger(__name__)

BucketKey = tuple[str, int]


class MenuStore:
    """Ordered menu lines keyed by ``(site name, weekday index)``."""

    def __init__(self) -> None:
        self._buckets: dict[BucketKey, list[str]] = {}

    def add(self, site_name: str, weekday: int, entries: Iterable[str]) -> None:
        """Append entries to a bucket; nothing is recorded for an empty batch."""

        entries = list(entries)
        if not entries:
            return
        self._buckets.setdefault((site_name, weekday), []).extend(entries)

    def get(self, site_name: str, weekday: int) -> list[str]:
        return list(self._buckets.get((site_name, weekday), ()))

    def keys(self) -> list[BucketKey]:
        return list(self._buckets)

    def __contains__(self, key: object) -> bool:
        return key in self._buckets

    def __iter__(self) -> Iterator[BucketKey]:
        return iter(list(self._buckets))

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        return f"MenuStore(buckets={len(self._buckets)})"


async def build_menu_store(
    sites: Sequence[SiteConfig],
    fetcher: DocumentFetcher,
    extractor: MenuExtractor,
) -> MenuStore:
    """Fetch every site concurrently and collect its weekday buckets.

    A site that cannot be fetched or parsed is logged and left out; a weekday whose selector
    fails is logged and left out while the site's other weekdays are still extracted. Errors
    outside the menubot hierarchy are contained the same way, so one site never cancels the
    others.
    """

    store = MenuStore()
    await asyncio.gather(*(_populate_site(store, site, fetcher, extractor) for site in sites))
    logger.info("Built menu store sites=%s buckets=%s", len(sites), len(store))
    return store


async def _populate_site(
    store: MenuStore,
    site: SiteConfig,
    fetcher: DocumentFetcher,
    extractor: MenuExtractor,
) -> None:
    log = site_logger(logger, site.name)
    selectors = list(site.active_weekdays())
    if not selectors:
        log.debug("Site %s has no weekday selectors; skipping fetch", site.name)
        return

    try:
        content = await fetcher.fetch(site.url)
        document = extractor.parse(content)
    except FetchFailure as exc:
        metrics.SITE_FETCHES.labels(result="error").inc()
        log.warning("Skipping site %s (%s): %s", site.name, site.url, exc.reason)
        return
    except Exception:
        metrics.SITE_FETCHES.labels(result="error").inc()
        log.exception("Skipping site %s (%s) after unexpected error", site.name, site.url)
        return
    metrics.SITE_FETCHES.labels(result="ok").inc()

    for weekday, selector in selectors:
        try:
            entries = extractor.extract(document, selector)
        except SelectorFailure as exc:
            metrics.SELECTOR_FAILURES.inc()
            log.warning("Skipping weekday %s for site %s: %s", weekday, site.name, exc)
            continue
        except Exception:
            metrics.SELECTOR_FAILURES.inc()
            log.exception("Skipping weekday %s for site %s after unexpected error", weekday, site.name)
            continue
        store.add(site.name, weekday, entries)


__all__ = ["BucketKey", "MenuStore", "build_menu_store"]
