"""OAuth2 client-credentials refresher for the connector API token."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

import httpx

from menubot.clock import Clock, local_now
from menubot.config import Settings
from menubot.errors import AuthFailure
from menubot.models.token import BearerToken

AUTH_TIMEOUT = 10.0

logger = logging.getLogger(__name__)


class ClientCredentialsAuth:
    """Exchange the bot id/secret for an access token at the auth endpoint."""

    def __init__(
        self,
        *,
        auth_url: str,
        client_id: Optional[str],
        client_secret: Optional[str],
        scope: str,
        timeout: float = AUTH_TIMEOUT,
        clock: Clock = local_now,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._auth_url = auth_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._scope = scope
        self._timeout = timeout
        self._clock = clock
        self._client = client

    async def __call__(self) -> BearerToken:
        if not self._client_id or not self._client_secret:
            raise AuthFailure("Bot credentials are not configured (MENUBOT_BOT_ID / MENUBOT_BOT_SECRET).")

        form = {
            "grant_type": "client_credentials",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "scope": self._scope,
        }
        try:
            if self._client is not None:
                response = await self._client.post(self._auth_url, data=form)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._auth_url, data=form)
        except httpx.HTTPError as exc:
            raise AuthFailure(f"Auth endpoint unreachable: {exc}") from exc

        if response.status_code >= 400:
            raise AuthFailure(f"Auth endpoint rejected credentials: HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise AuthFailure("Auth endpoint returned invalid JSON") from exc

        access_token = (body.get("access_token") or "").strip() if isinstance(body, dict) else ""
        expires_in = body.get("expires_in") if isinstance(body, dict) else None
        if not access_token:
            raise AuthFailure("Auth response did not include an access_token")
        try:
            lifetime = int(expires_in)
        except (TypeError, ValueError) as exc:
            raise AuthFailure(f"Auth response has invalid expires_in: {expires_in!r}") from exc

        fetched_at = self._clock()
        logger.debug("Auth endpoint issued token type=%s expires_in=%s", body.get("token_type"), lifetime)
        return BearerToken(token=access_token, expires_at=fetched_at + timedelta(seconds=lifetime))


def build_client_credentials_auth(settings: Settings, *, clock: Clock = local_now) -> ClientCredentialsAuth:
    """Create the refresher from configured bot credentials."""

    return ClientCredentialsAuth(
        auth_url=settings.auth_url,
        client_id=settings.bot_id,
        client_secret=settings.bot_secret,
        scope=settings.auth_scope,
        timeout=settings.auth_timeout,
        clock=clock,
    )


__all__ = ["AUTH_TIMEOUT", "ClientCredentialsAuth", "build_client_credentials_auth"]
