"""eBay search pass-through endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from ..ebay.search import SearchProxy
from ..errors import UpstreamSearchError, ValidationError
from ..schemas import SearchResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["search"])


def _get_search_proxy() -> SearchProxy:
    from ..main import app_state
    return app_state["search_proxy"]


@router.get("/search", response_model=SearchResponse)
async def search_items(
    q: str | None = Query(None, description="Search keywords"),
    limit: int | None = Query(None, description="Max results (clamped to 1-100, default 25)"),
    customid: str | None = Query(None, description="EPN customid tag for returned links"),
):
    proxy = _get_search_proxy()
    try:
        return await proxy.search(q, limit, custom_id=customid)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except UpstreamSearchError as e:
        logger.warning("Search failed for '%s' (%s, HTTP %s): %s", q, e.kind, e.http_status, e)
        return JSONResponse(
            status_code=e.http_status,
            content={"error": e.kind, "detail": e.detail},
        )
