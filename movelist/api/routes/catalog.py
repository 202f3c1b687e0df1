"""Catalog search and lookup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from movelist.api.deps import error_response, get_matcher
from movelist.catalog.matcher import CatalogMatcher
from movelist.models.contracts import (
    CatalogItem,
    CatalogSearchResponse,
    ErrorResponse,
    SearchFilters,
)

router = APIRouter(tags=["catalog"])


@router.get("/catalog/search", response_model=CatalogSearchResponse)
async def search_catalog(
    q: str = Query("", max_length=200),
    min_weight: float | None = Query(None, ge=0),
    max_weight: float | None = Query(None, ge=0),
    min_volume: float | None = Query(None, ge=0),
    max_volume: float | None = Query(None, ge=0),
    matcher: CatalogMatcher = Depends(get_matcher),
) -> CatalogSearchResponse:
    """Search the catalog; suggestions are filled only when nothing matched."""
    filters = SearchFilters(
        min_weight=min_weight,
        max_weight=max_weight,
        min_volume=min_volume,
        max_volume=max_volume,
    )
    result = matcher.search(q, filters)
    return CatalogSearchResponse(
        query=q,
        match_kind=result.match_kind,
        total=len(result.matches),
        matches=result.matches,
        suggestions=result.suggestions,
    )


@router.get(
    "/catalog/{item_id}",
    response_model=CatalogItem,
    responses={404: {"model": ErrorResponse}},
)
async def get_catalog_item(item_id: int, matcher: CatalogMatcher = Depends(get_matcher)):
    item = matcher.get(item_id)
    if item is None:
        return error_response(404, "item_not_found", f"Catalog item {item_id} not found")
    return item
