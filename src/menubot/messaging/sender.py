"""Post reply activities to the chat connector API."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from menubot import metrics
from menubot.auth.token_cache import TokenCache
from menubot.config import Settings
from menubot.errors import ConfigurationError, DeliveryFailure
from menubot.models.activity import OutboundActivity

CONVERSATION_ID_PLACEHOLDER = "<conversationId>"
SEND_TIMEOUT = 10.0

logger = logging.getLogger(__name__)


class ActivitySender:
    """Deliver an activity with the cached bearer token, re-authenticating once on 401."""

    def __init__(
        self,
        *,
        api_url: Optional[str],
        activity_endpoint: str,
        token_cache: TokenCache,
        timeout: float = SEND_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_url = (api_url or "").rstrip("/")
        self._activity_endpoint = activity_endpoint
        self._token_cache = token_cache
        self._timeout = timeout
        self._client = client

    def activity_url(self, conversation_id: str) -> str:
        if not self._api_url:
            raise ConfigurationError("MENUBOT_API_URL is not configured.")
        template = f"{self._api_url}{self._activity_endpoint}"
        return template.replace(CONVERSATION_ID_PLACEHOLDER, conversation_id, 1)

    async def send(self, activity: OutboundActivity, conversation_id: str) -> None:
        """Post ``activity`` to the conversation.

        ``AuthFailure`` from the token cache propagates unchanged so nothing is sent without a
        credential; any other delivery problem raises ``DeliveryFailure``.
        """

        url = self.activity_url(conversation_id)
        payload = activity.to_wire()

        token = await self._token_cache.get_token()
        response = await self._post(url, payload, token)
        if response.status_code == httpx.codes.UNAUTHORIZED:
            logger.warning("Connector rejected bearer token; re-authenticating")
            token = await self._token_cache.refresh()
            response = await self._post(url, payload, token)

        if response.status_code >= 400:
            metrics.MESSAGES_SENT.labels(status="error").inc()
            raise DeliveryFailure(
                f"Connector returned HTTP {response.status_code} for conversation {conversation_id}"
            )
        metrics.MESSAGES_SENT.labels(status="ok").inc()
        logger.info("Sent reply to conversation %s status=%s", conversation_id, response.status_code)

    async def _post(self, url: str, payload: dict[str, object], token: str) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json;charset=utf-8",
        }
        try:
            if self._client is not None:
                return await self._client.post(url, json=payload, headers=headers)
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            metrics.MESSAGES_SENT.labels(status="error").inc()
            raise DeliveryFailure(f"Connector unreachable: {exc}") from exc


def build_activity_sender(settings: Settings, token_cache: TokenCache) -> ActivitySender:
    return ActivitySender(
        api_url=settings.api_url,
        activity_endpoint=settings.activity_endpoint,
        token_cache=token_cache,
        timeout=settings.send_timeout,
    )


__all__ = ["ActivitySender", "CONVERSATION_ID_PLACEHOLDER", "build_activity_sender"]
