"""Weekday selection and answer text rendering."""

from __future__ import annotations

from datetime import date
from typing import Sequence

from menubot.clock import DAYS_PER_WEEK, weekday_index
from menubot.menu.store import MenuStore
from menubot.models.site import SiteConfig

NO_MENU_TODAY = "No menus today."
NO_MENU_TOMORROW = "No menus tomorrow."


def target_weekday(now: date, want_tomorrow: bool) -> int:
    return (weekday_index(now) + (1 if want_tomorrow else 0)) % DAYS_PER_WEEK


def render_menu(
    store: MenuStore,
    sites: Sequence[SiteConfig],
    want_tomorrow: bool,
    now: date,
) -> str:
    """Render the menus of the target weekday in configured site order.

    Sites without entries are left out entirely. When a site lists several dishes each line
    carries a 1-based ordinal; a single dish is shown bare. If no site has anything to show
    the fixed "no menus" sentinel for today or tomorrow is returned.
    """

    weekday = target_weekday(now, want_tomorrow)
    lines: list[str] = []
    for site in sites:
        entries = store.get(site.name, weekday)
        if not entries:
            continue
        lines.append(f"#= **{site.name}** =")
        numbered = len(entries) > 1
        for position, entry in enumerate(entries, start=1):
            prefix = f"{position} " if numbered else ""
            lines.append(f" ### {prefix}{entry}")

    if not lines:
        return NO_MENU_TOMORROW if want_tomorrow else NO_MENU_TODAY
    return "\n".join(lines)


__all__ = ["NO_MENU_TODAY", "NO_MENU_TOMORROW", "render_menu", "target_weekday"]
