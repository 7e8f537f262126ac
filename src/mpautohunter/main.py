"""FastAPI application with lifespan-managed eBay client and token cache."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from .affiliate import AffiliateParams
from .api.router import api_router
from .config import settings
from .ebay.oauth import TokenManager
from .ebay.search import SearchProxy

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Shared state accessible by API endpoints
app_state: dict = {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    missing = settings.missing_credentials()
    if missing:
        logger.error("Missing required environment variables: %s", ", ".join(missing))
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    client = httpx.AsyncClient(timeout=settings.upstream_timeout)
    affiliate = AffiliateParams(campaign_id=settings.epn_campaign_id)
    tokens = TokenManager(
        client,
        client_id=settings.ebay_client_id,
        client_secret=settings.ebay_client_secret,
        oauth_url=settings.ebay_oauth_url,
        scope=settings.ebay_scope,
        timeout=settings.upstream_timeout,
        safety_margin=settings.token_safety_margin,
    )
    app_state["http_client"] = client
    app_state["affiliate"] = affiliate
    app_state["tokens"] = tokens
    app_state["search_proxy"] = SearchProxy(
        client,
        tokens,
        affiliate,
        search_url=settings.ebay_search_url,
        timeout=settings.upstream_timeout,
        default_limit=settings.search_default_limit,
        max_limit=settings.search_max_limit,
        min_limit=settings.search_min_limit,
        default_custom_id=settings.epn_custom_id,
    )

    logger.info("MPAutoHunter backend started")
    yield

    # Shutdown
    await client.aclose()
    app_state.clear()
    logger.info("MPAutoHunter backend stopped")


app = FastAPI(
    title="MPAutoHunter",
    description="eBay search proxy with EPN affiliate links",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(api_router)
