"""Liveness and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from ..schemas import HealthResponse

router = APIRouter(tags=["system"])


@router.get("/", response_class=PlainTextResponse)
def root():
    return "MPAutoHunter backend running"


@router.get("/health", response_model=HealthResponse)
def health_check():
    from ..main import app_state

    tokens = app_state.get("tokens")
    if tokens is None:
        return HealthResponse(status="starting", token_cached=False)

    cached = tokens.cached
    if cached.token is None:
        return HealthResponse(status="ok", token_cached=False)
    expires_in = max(0, (cached.expires_at_ms - tokens.now_ms()) // 1000)
    return HealthResponse(status="ok", token_cached=True, token_expires_in=expires_in)
