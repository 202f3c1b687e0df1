"""Personal inventory endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from movelist.api.deps import error_response, get_inventory, get_matcher
from movelist.catalog.matcher import CatalogMatcher
from movelist.errors import InvalidInventoryItem, InventoryRecordNotFound
from movelist.inventory.store import InventoryStore
from movelist.models.contracts import (
    AddInventoryRequest,
    CatalogItem,
    ErrorResponse,
    InventoryRecord,
    InventoryTotals,
    ResolvedItem,
    UpdateInventoryRequest,
)

router = APIRouter(tags=["inventory"])


def _record_not_found(record_id: str):
    return error_response(404, "record_not_found", f"Inventory record {record_id} not found")


@router.get("/inventory", response_model=list[InventoryRecord])
async def list_inventory(
    location: str | None = None,
    inventory: InventoryStore = Depends(get_inventory),
) -> list[InventoryRecord]:
    return inventory.list_records(location)


@router.get("/inventory/totals", response_model=InventoryTotals)
async def inventory_totals(inventory: InventoryStore = Depends(get_inventory)) -> InventoryTotals:
    return inventory.totals()


@router.post(
    "/inventory",
    status_code=201,
    response_model=InventoryRecord,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def add_inventory_record(
    body: AddInventoryRequest,
    inventory: InventoryStore = Depends(get_inventory),
    matcher: CatalogMatcher = Depends(get_matcher),
):
    """Add a catalog item (by id) or a previously resolved item."""
    item: CatalogItem | ResolvedItem | None
    if body.catalog_item_id is not None and body.resolved_item is None:
        item = matcher.get(body.catalog_item_id)
        if item is None:
            return error_response(
                404, "item_not_found", f"Catalog item {body.catalog_item_id} not found"
            )
    elif body.resolved_item is not None and body.catalog_item_id is None:
        item = body.resolved_item
    else:
        return error_response(
            422, "invalid_item", "Provide exactly one of catalog_item_id or resolved_item"
        )

    try:
        return inventory.add(item, body.quantity, body.location, body.notes)
    except InvalidInventoryItem as exc:
        return error_response(422, "invalid_item", str(exc))


@router.patch(
    "/inventory/{record_id}",
    response_model=InventoryRecord,
    responses={404: {"model": ErrorResponse}},
)
async def update_inventory_record(
    record_id: str,
    body: UpdateInventoryRequest,
    inventory: InventoryStore = Depends(get_inventory),
):
    try:
        return inventory.update(
            record_id,
            quantity=body.quantity,
            location=body.location,
            notes=body.notes,
        )
    except InventoryRecordNotFound:
        return _record_not_found(record_id)


@router.delete(
    "/inventory/{record_id}",
    status_code=204,
    responses={404: {"model": ErrorResponse}},
)
async def delete_inventory_record(
    record_id: str, inventory: InventoryStore = Depends(get_inventory)
):
    try:
        inventory.remove(record_id)
    except InventoryRecordNotFound:
        return _record_not_found(record_id)
