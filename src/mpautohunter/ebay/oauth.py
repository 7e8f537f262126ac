"""eBay application access token cache (OAuth2 client-credentials grant)."""

from __future__ import annotations

import asyncio
import base64
import logging
import time
from dataclasses import dataclass
from typing import Callable

import httpx

from ..errors import UpstreamAuthError
from . import response_detail

logger = logging.getLogger(__name__)

DEFAULT_SAFETY_MARGIN = 5.0
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class CachedToken:
    token: str | None = None
    expires_at_ms: int = 0

    def is_fresh(self, now_ms: int, margin_ms: int) -> bool:
        return self.token is not None and self.expires_at_ms - now_ms > margin_ms


class TokenManager:
    """Holds one application token and refreshes it on demand.

    Concurrent callers that find the token missing or about to expire share a
    single in-flight refresh instead of each hitting the OAuth endpoint.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        client_id: str,
        client_secret: str,
        oauth_url: str,
        scope: str,
        timeout: float = DEFAULT_TIMEOUT,
        safety_margin: float = DEFAULT_SAFETY_MARGIN,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._client_id = client_id
        self._client_secret = client_secret
        self._oauth_url = oauth_url
        self._scope = scope
        self._timeout = timeout
        self._margin_ms = int(safety_margin * 1000)
        self._clock = clock
        self._cached = CachedToken()
        self._refresh_task: asyncio.Task[str] | None = None

    @property
    def cached(self) -> CachedToken:
        """Current cache snapshot (never triggers a refresh)."""
        return self._cached

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    def invalidate(self) -> None:
        """Drop the cached token so the next caller refreshes."""
        self._cached = CachedToken()

    async def acquire_token(self) -> str:
        """Return a valid access token, refreshing it if needed.

        Raises:
            UpstreamAuthError: the token exchange failed. The cache is left as it was.
        """
        cached = self._cached
        if cached.is_fresh(self.now_ms(), self._margin_ms):
            logger.debug("Using cached eBay token")
            return cached.token

        if self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self._refresh())
            self._refresh_task.add_done_callback(self._on_refresh_done)
        # Shielded so a cancelled request does not abort the shared refresh
        return await asyncio.shield(self._refresh_task)

    def _on_refresh_done(self, task: asyncio.Task[str]) -> None:
        if self._refresh_task is task:
            self._refresh_task = None
        if not task.cancelled():
            # Mark the exception retrieved even if every waiter went away
            task.exception()

    def _basic_auth(self) -> str:
        raw = f"{self._client_id}:{self._client_secret}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    async def _refresh(self) -> str:
        started_ms = self.now_ms()
        headers = {
            "Authorization": self._basic_auth(),
            "Content-Type": "application/x-www-form-urlencoded",
        }
        data = {"grant_type": "client_credentials", "scope": self._scope}

        try:
            resp = await self._client.post(
                self._oauth_url, data=data, headers=headers, timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            logger.warning("eBay OAuth request failed: %s", e)
            raise UpstreamAuthError(f"eBay OAuth HTTP error: {e}") from e

        if not 200 <= resp.status_code < 300:
            detail = response_detail(resp)
            logger.warning("eBay OAuth returned %s: %s", resp.status_code, detail)
            raise UpstreamAuthError(
                f"eBay OAuth returned {resp.status_code}",
                status_code=resp.status_code,
                detail=detail,
            )

        try:
            body = resp.json()
            token = body["access_token"]
            expires_in = int(body["expires_in"])
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("eBay OAuth returned a malformed body: %s", e)
            raise UpstreamAuthError(
                "eBay OAuth returned a malformed body",
                status_code=resp.status_code,
                detail=resp.text,
            ) from e
        if not isinstance(token, str) or not token:
            logger.warning("eBay OAuth response has no usable access_token")
            raise UpstreamAuthError(
                "eBay OAuth response has no access_token",
                status_code=resp.status_code,
                detail=resp.text,
            )

        self._cached = CachedToken(token=token, expires_at_ms=started_ms + expires_in * 1000)
        logger.info("Refreshed eBay application token (expires in %ds)", expires_in)
        return token

