"""Health check endpoint with a content-extraction backend check.

The check has a short timeout so it cannot block the response. A backend
reporting "disconnected" does not change the overall status ("ok"): resolution
falls back to the remaining strategies without it.
"""

from __future__ import annotations

import asyncio

import httpx
import structlog
from fastapi import APIRouter, Depends

from movelist.api.deps import get_matcher, get_resolver
from movelist.catalog.matcher import CatalogMatcher
from movelist.config import settings
from movelist.lookup.resolver import ItemResolver

logger = structlog.get_logger()

router = APIRouter(tags=["health"])

_CHECK_TIMEOUT = 3.0  # seconds


async def _check_backend(transport: httpx.AsyncBaseTransport | None = None) -> str:
    """Any HTTP answer from the backend URL counts as reachable."""
    if not settings.use_external_lookup:
        return "disabled"
    try:
        async with httpx.AsyncClient(transport=transport) as client:
            await asyncio.wait_for(client.get(settings.backend_url), timeout=_CHECK_TIMEOUT)
        return "connected"
    except Exception as exc:
        logger.debug("health_backend_failed", error=str(exc))
        return "disconnected"


@router.get("/health")
async def health_check(
    matcher: CatalogMatcher = Depends(get_matcher),
    resolver: ItemResolver = Depends(get_resolver),
) -> dict:
    """Confirms the API process is alive. Always returns 200."""
    backend = await _check_backend()
    return {
        "status": "ok",
        "version": "0.1.0",
        "environment": settings.environment,
        "catalog_items": len(matcher),
        "lookup_cache_size": resolver.cache_size(),
        "backend": backend,
    }
