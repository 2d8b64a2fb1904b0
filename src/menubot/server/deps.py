"""Dependency definitions for the menubot API server."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from menubot.auth.token_cache import TokenCache
from menubot.clock import Clock, local_now
from menubot.config import Settings, get_settings, load_sites
from menubot.menu.fetcher import DocumentFetcher, HttpDocumentFetcher
from menubot.menu.query import MenuAnswerer
from menubot.messaging.sender import ActivitySender, build_activity_sender
from menubot.models.site import SiteConfig


def get_clock() -> Clock:
    """Return the clock used for weekday selection."""

    return local_now


def get_sites(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> list[SiteConfig]:
    """Return the configured sites, loading the sites file on first use."""

    sites = getattr(request.app.state, "sites", None)
    if sites is None:
        sites = load_sites(settings.sites_path)
        request.app.state.sites = sites
    return sites


def get_fetcher(settings: Settings = Depends(get_settings)) -> DocumentFetcher:
    return HttpDocumentFetcher(timeout=settings.fetch_timeout)


def get_answerer(
    sites: list[SiteConfig] = Depends(get_sites),
    fetcher: DocumentFetcher = Depends(get_fetcher),
    clock: Clock = Depends(get_clock),
) -> MenuAnswerer:
    return MenuAnswerer(sites=sites, fetcher=fetcher, clock=clock)


def get_token_cache(request: Request) -> TokenCache:
    return request.app.state.token_cache


def get_sender(
    settings: Settings = Depends(get_settings),
    token_cache: TokenCache = Depends(get_token_cache),
) -> ActivitySender:
    return build_activity_sender(settings, token_cache)


def require_api_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when required."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.split("Bearer ")[-1].strip() == token:
        return

    if request.headers.get("X-API-Key") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
