"""Exception hierarchy shared across the menu engine, auth and messaging layers."""

from __future__ import annotations


class MenuBotError(Exception):
    """Base class for menubot failures."""


class ConfigurationError(MenuBotError):
    """Raised when settings or the site list cannot be loaded."""


class FetchFailure(MenuBotError):
    """A site document could not be retrieved or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Unable to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class SelectorFailure(MenuBotError):
    """A selector expression could not be compiled or evaluated."""

    def __init__(self, selector: str, reason: str) -> None:
        super().__init__(f"Invalid selector {selector!r}: {reason}")
        self.selector = selector
        self.reason = reason


class AuthFailure(MenuBotError):
    """The auth endpoint rejected the refresh or could not be reached."""


class DeliveryFailure(MenuBotError):
    """The messaging API did not accept an outbound activity."""


__all__ = [
    "AuthFailure",
    "ConfigurationError",
    "DeliveryFailure",
    "FetchFailure",
    "MenuBotError",
    "SelectorFailure",
]
