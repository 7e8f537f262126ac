"""Search pass-through to the eBay Browse API with affiliate rewriting."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..affiliate import AffiliateParams, build_affiliate_url
from ..errors import UpstreamAuthError, UpstreamSearchError, ValidationError
from ..schemas import EnrichedItemSummary, SearchResponse
from . import response_detail
from .oauth import DEFAULT_TIMEOUT, TokenManager

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25
MIN_LIMIT = 1
MAX_LIMIT = 100


def clamp_limit(
    limit: int | None,
    default: int = DEFAULT_LIMIT,
    lower: int = MIN_LIMIT,
    upper: int = MAX_LIMIT,
) -> int:
    if limit is None:
        limit = default
    return max(lower, min(upper, limit))


class SearchProxy:
    """Runs a keyword search upstream and returns affiliate-tagged results."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        tokens: TokenManager,
        affiliate: AffiliateParams,
        search_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
        min_limit: int = MIN_LIMIT,
        default_custom_id: str | None = None,
    ) -> None:
        self._client = client
        self._tokens = tokens
        self._affiliate = affiliate
        self._search_url = search_url
        self._timeout = timeout
        self._default_limit = default_limit
        self._max_limit = max_limit
        self._min_limit = min_limit
        self._default_custom_id = default_custom_id or None

    async def search(
        self,
        query: str | None,
        limit: int | None = None,
        custom_id: str | None = None,
    ) -> SearchResponse:
        """Search upstream items and rewrite their URLs into affiliate links.

        Args:
            query: Keywords; surrounding whitespace is stripped.
            limit: Requested result count, clamped into [min_limit, max_limit].
            custom_id: Optional EPN customid tag for every returned link.

        Raises:
            ValidationError: query is missing or blank.
            UpstreamSearchError: token exchange or search call failed.
        """
        q = (query or "").strip()
        if not q:
            raise ValidationError("Missing q parameter")
        effective_limit = clamp_limit(
            limit, self._default_limit, self._min_limit, self._max_limit,
        )

        try:
            token = await self._tokens.acquire_token()
        except UpstreamAuthError as e:
            raise UpstreamSearchError(
                f"Could not authorize search: {e}",
                status_code=e.status_code,
                detail=e.detail,
                kind="auth_error",
            ) from e

        data = await self._fetch(q, effective_limit, token)
        summaries = data.get("itemSummaries") or []
        total = data.get("total")
        if not isinstance(summaries, list) or not all(isinstance(s, dict) for s in summaries):
            logger.warning("eBay search for '%s' returned malformed itemSummaries", q)
            raise UpstreamSearchError("eBay search returned malformed itemSummaries", detail=data)
        if total is not None and (not isinstance(total, int) or isinstance(total, bool)):
            logger.warning("eBay search for '%s' returned a non-integer total: %r", q, total)
            raise UpstreamSearchError("eBay search returned a malformed total", detail=data)

        tag = custom_id or self._default_custom_id
        items = [self._enrich(summary, tag) for summary in summaries]
        if total is None:
            total = len(items)
        return SearchResponse(total=total, items=items)

    async def _fetch(self, query: str, limit: int, token: str) -> dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        params = {"q": query, "limit": limit}

        try:
            resp = await self._client.get(
                self._search_url, params=params, headers=headers, timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            logger.warning("eBay search request failed for '%s': %s", query, e)
            raise UpstreamSearchError(f"eBay search HTTP error: {e}") from e

        if not 200 <= resp.status_code < 300:
            detail = response_detail(resp)
            logger.warning("eBay search for '%s' returned %s: %s", query, resp.status_code, detail)
            raise UpstreamSearchError(
                f"eBay search returned {resp.status_code}",
                status_code=resp.status_code,
                detail=detail,
            )

        try:
            data = resp.json()
        except ValueError as e:
            logger.warning("eBay search for '%s' returned a non-JSON body", query)
            raise UpstreamSearchError("eBay search returned a malformed body", detail=resp.text) from e
        if not isinstance(data, dict):
            logger.warning("eBay search for '%s' returned unexpected JSON", query)
            raise UpstreamSearchError("eBay search returned a malformed body", detail=data)
        return data

    def _enrich(self, summary: dict[str, Any], custom_id: str | None) -> EnrichedItemSummary:
        web_url = summary.get("itemWebUrl")
        affiliate_url = None
        if isinstance(web_url, str) and web_url:
            try:
                affiliate_url = build_affiliate_url(web_url, self._affiliate, custom_id)
            except ValidationError:
                logger.warning("Item %s has an unusable itemWebUrl: %r", summary.get("itemId"), web_url)
        elif web_url:
            logger.warning("Item %s has a non-string itemWebUrl: %r", summary.get("itemId"), web_url)
        return EnrichedItemSummary(
            item_id=summary.get("itemId"),
            title=summary.get("title"),
            price=summary.get("price"),
            image=summary.get("image"),
            item_web_url=web_url,
            affiliate_url=affiliate_url,
        )
