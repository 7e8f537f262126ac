"""Affiliate redirect endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from ..affiliate import AffiliateParams, resolve_redirect
from ..errors import ValidationError

logger = logging.getLogger(__name__)
router = APIRouter(tags=["redirect"])


def _get_affiliate_params() -> AffiliateParams:
    from ..main import app_state
    return app_state["affiliate"]


def raw_query_value(query: str, name: str) -> str | None:
    """Value of ``name`` in a query string, still percent-encoded."""
    for pair in query.split("&"):
        key, _, value = pair.partition("=")
        if key == name:
            return value
    return None


@router.get("/go")
def go(request: Request):
    # Raw value; resolve_redirect performs the one percent-decode
    url = raw_query_value(request.url.query, "url")
    try:
        target = resolve_redirect(url, _get_affiliate_params())
    except ValidationError as e:
        logger.info("Rejected redirect for %r: %s", url, e)
        return PlainTextResponse(str(e), status_code=400)
    return RedirectResponse(target, status_code=302)
