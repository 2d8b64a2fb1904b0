"""Site configuration models."""

from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

from menubot.clock import DAYS_PER_WEEK


class SiteConfig(BaseModel):
    """A menu page and the XPath selector for each weekday (index 0 = Sunday)."""

    name: str = Field(min_length=1)
    url: str = Field(min_length=1)
    day_selectors: tuple[str, ...] = Field(alias="dayPaths")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("day_selectors", mode="before")
    @classmethod
    def normalize_selectors(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return tuple(entry.strip() if isinstance(entry, str) else entry for entry in value)
        return value

    @field_validator("day_selectors")
    @classmethod
    def require_full_week(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(value) != DAYS_PER_WEEK:
            raise ValueError(
                f"expected {DAYS_PER_WEEK} day selectors (Sunday first), got {len(value)}"
            )
        return value

    def active_weekdays(self) -> Iterator[tuple[int, str]]:
        """Yield ``(weekday, selector)`` pairs for weekdays with a selector."""

        for index, selector in enumerate(self.day_selectors):
            if selector:
                yield index, selector


__all__ = ["SiteConfig"]
