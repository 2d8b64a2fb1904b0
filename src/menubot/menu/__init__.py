"""Menu aggregation engine: fetch, extract, store and render."""

from menubot.menu.extractor import LxmlSelectorEngine, MenuExtractor, SelectorEngine
from menubot.menu.fetcher import DocumentFetcher, HttpDocumentFetcher
from menubot.menu.query import MenuAnswerer, MenuQuery, parse_menu_query
from menubot.menu.render import NO_MENU_TODAY, NO_MENU_TOMORROW, render_menu, target_weekday
from menubot.menu.store import MenuStore, build_menu_store

__all__ = [
    "DocumentFetcher",
    "HttpDocumentFetcher",
    "LxmlSelectorEngine",
    "MenuAnswerer",
    "MenuExtractor",
    "MenuQuery",
    "MenuStore",
    "NO_MENU_TODAY",
    "NO_MENU_TOMORROW",
    "SelectorEngine",
    "build_menu_store",
    "parse_menu_query",
    "render_menu",
    "target_weekday",
]
