"""Process-wide bearer token cache with single-flight refresh."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from menubot import metrics
from menubot.clock import Clock, local_now
from menubot.errors import AuthFailure
from menubot.logging_utils import register_secret
from menubot.models.token import BearerToken

logger = logging.getLogger(__name__)

TokenRefresher = Callable[[], Awaitable[BearerToken]]


class TokenCache:
    """Hold the current bearer token and refresh it lazily once it expires.

    A valid token is served from a plain attribute read. When the token is missing or
    expired, the first caller starts a refresh task and every caller arriving before it
    finishes awaits that same task, so concurrent requests cause one auth call and share its
    token or its ``AuthFailure``. A failed refresh leaves the cache unset.
    """

    def __init__(self, refresher: TokenRefresher, *, clock: Clock = local_now) -> None:
        self._refresher = refresher
        self._clock = clock
        self._current: Optional[BearerToken] = None
        self._inflight: Optional[asyncio.Task[BearerToken]] = None

    @property
    def current(self) -> Optional[BearerToken]:
        return self._current

    async def get_token(self) -> str:
        """Return a valid token, refreshing it first when missing or expired."""

        current = self._current
        if current is not None and current.is_valid(self._clock()):
            return current.token
        bearer = await self._join_refresh()
        return bearer.token

    async def refresh(self) -> str:
        """Fetch a new token even if the cached one has not expired yet.

        Used when the messaging API rejects the cached token. Joins a refresh that is
        already running instead of starting a second one.
        """

        bearer = await self._join_refresh()
        return bearer.token

    async def _join_refresh(self) -> BearerToken:
        task = self._inflight
        if task is None:
            logger.info("Refreshing bearer token")
            task = asyncio.get_running_loop().create_task(self._run_refresh())
            self._inflight = task
        # shield so one cancelled waiter does not cancel the shared refresh
        return await asyncio.shield(task)

    async def _run_refresh(self) -> BearerToken:
        try:
            bearer = await self._refresher()
        except AuthFailure:
            self._fail()
            raise
        except Exception as exc:
            self._fail()
            raise AuthFailure(f"Token refresh failed: {exc}") from exc
        finally:
            self._inflight = None

        self._current = bearer
        register_secret(bearer.token, slot="bearer")
        metrics.TOKEN_REFRESHES.labels(status="ok").inc()
        logger.info("Bearer token refreshed; expires_at=%s", bearer.expires_at.isoformat())
        return bearer

    def _fail(self) -> None:
        self._current = None
        metrics.TOKEN_REFRESHES.labels(status="error").inc()
        logger.error("Bearer token refresh failed")


__all__ = ["TokenCache", "TokenRefresher"]
