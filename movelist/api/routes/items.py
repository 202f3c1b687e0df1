"""Free-text item resolution and lookup-cache management."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from movelist.api.deps import get_resolver
from movelist.lookup.resolver import ItemResolver
from movelist.models.contracts import (
    CacheStats,
    ErrorResponse,
    ResolvedItem,
    ResolvePendingResponse,
    ResolveRequest,
)

router = APIRouter(tags=["items"])


@router.post(
    "/items/resolve",
    response_model=ResolvedItem,
    responses={202: {"model": ResolvePendingResponse}, 422: {"model": ErrorResponse}},
)
async def resolve_item(body: ResolveRequest, resolver: ItemResolver = Depends(get_resolver)):
    """Resolve free text through the lookup cascade.

    Answers 202 while an identical lookup is still in flight; the client
    retries. Invalid text is rejected with 422 by the app's error handler.
    """
    item = await resolver.resolve(body.text, external_only=body.external_only)
    if item is None:
        pending = ResolvePendingResponse(
            message=f"Lookup for {body.text.strip()!r} is already in progress"
        )
        return JSONResponse(status_code=202, content=pending.model_dump())
    return item


@router.get("/lookup-cache", response_model=CacheStats)
async def get_cache_stats(resolver: ItemResolver = Depends(get_resolver)) -> CacheStats:
    return resolver.cache_stats()


@router.delete("/lookup-cache", status_code=204)
async def clear_lookup_cache(resolver: ItemResolver = Depends(get_resolver)) -> None:
    resolver.clear_cache()
