"""Aggregate all API routers."""

from fastapi import APIRouter

from . import redirect, search, system

api_router = APIRouter()
api_router.include_router(search.router)
api_router.include_router(redirect.router)
api_router.include_router(system.router)
