"""Shared service instances and response helpers for the API routes.

Each provider builds its service once per process. Tests swap them through
``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi.responses import JSONResponse

from movelist.catalog.matcher import CatalogMatcher
from movelist.config import settings
from movelist.inventory.store import InventoryStore
from movelist.lookup.resolver import ItemResolver
from movelist.models.contracts import ErrorResponse


@lru_cache(maxsize=1)
def get_matcher() -> CatalogMatcher:
    return CatalogMatcher.from_settings(settings)


@lru_cache(maxsize=1)
def get_resolver() -> ItemResolver:
    return ItemResolver.from_settings(get_matcher(), settings)


@lru_cache(maxsize=1)
def get_inventory() -> InventoryStore:
    return InventoryStore(settings.inventory_path or None)


def error_response(
    status: int, code: str, message: str, *, retryable: bool = False
) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=ErrorResponse(error=code, message=message, retryable=retryable).model_dump(),
    )
