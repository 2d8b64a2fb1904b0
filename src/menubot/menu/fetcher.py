"""HTTP retrieval of menu pages."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

import httpx

from menubot.errors import FetchFailure

DEFAULT_FETCH_TIMEOUT = 10.0
USER_AGENT = "menubot/0.1 (+daily menu aggregator)"

logger = logging.getLogger(__name__)


class DocumentFetcher(Protocol):
    """Anything that can return the raw bytes behind a site URL."""

    async def fetch(self, url: str) -> bytes: ...


class HttpDocumentFetcher:
    """Fetch pages with httpx, bounding each fetch by a total timeout."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._timeout = timeout
        self._client = client

    async def fetch(self, url: str) -> bytes:
        try:
            return await asyncio.wait_for(self._get(url), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise FetchFailure(url, f"timed out after {self._timeout:.1f}s") from exc
        except httpx.HTTPStatusError as exc:
            raise FetchFailure(url, f"HTTP {exc.response.status_code}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchFailure(url, str(exc) or exc.__class__.__name__) from exc

    async def _get(self, url: str) -> bytes:
        headers = {"User-Agent": USER_AGENT}
        if self._client is not None:
            response = await self._client.get(url, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                response = await client.get(url, headers=headers)
        response.raise_for_status()
        logger.debug("Fetched %s status=%s bytes=%s", url, response.status_code, len(response.content))
        return response.content


__all__ = ["DEFAULT_FETCH_TIMEOUT", "DocumentFetcher", "HttpDocumentFetcher"]
