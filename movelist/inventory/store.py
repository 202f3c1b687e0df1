"""Personal inventory of catalog and resolved items.

Records are kept in insertion order. When a path is configured every change
is written back to a JSON file; a missing or unreadable file starts an empty
inventory.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from movelist.errors import InvalidInventoryItem, InventoryRecordNotFound
from movelist.models.contracts import (
    CatalogItem,
    InventoryRecord,
    InventoryTotals,
    ResolvedItem,
)
from movelist.utils.formatting import format_volume, format_weight
from movelist.utils.validation import is_valid_dimensions, is_valid_weight

logger = structlog.get_logger()

_records_adapter = TypeAdapter(list[InventoryRecord])


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InventoryStore:
    def __init__(
        self,
        path: str | Path | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.path = Path(path) if path else None
        self._clock = clock
        self._records: dict[str, InventoryRecord] = {}
        self._load()

    def _load(self) -> None:
        if self.path is None or not self.path.exists():
            return
        try:
            records = _records_adapter.validate_json(self.path.read_bytes())
        except (OSError, ValidationError) as exc:
            logger.warning("inventory_load_failed", path=str(self.path), error=str(exc))
            return
        self._records = {record.id: record for record in records}
        logger.info("inventory_loaded", path=str(self.path), records=len(self._records))

    def _save(self) -> None:
        if self.path is None:
            return
        payload = _records_adapter.dump_python(list(self._records.values()), mode="json")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def __len__(self) -> int:
        return len(self._records)

    def list_records(self, location: str | None = None) -> list[InventoryRecord]:
        records = list(self._records.values())
        if location:
            wanted = location.strip().lower()
            records = [r for r in records if r.location.strip().lower() == wanted]
        return records

    def get(self, record_id: str) -> InventoryRecord:
        try:
            return self._records[record_id]
        except KeyError:
            raise InventoryRecordNotFound(record_id) from None

    def add(
        self,
        item: ResolvedItem | CatalogItem,
        quantity: int = 1,
        location: str = "",
        notes: str | None = None,
    ) -> InventoryRecord:
        """Add a snapshot of item; raises InvalidInventoryItem for absurd sizes."""
        if not is_valid_weight(item.weight):
            raise InvalidInventoryItem(f"Weight {item.weight} kg is out of range")
        if not is_valid_dimensions(item.height, item.width, item.depth):
            raise InvalidInventoryItem(
                f"Dimensions {item.height}×{item.width}×{item.depth} cm are out of range"
            )
        record = InventoryRecord(
            id=uuid.uuid4().hex,
            item=item,
            quantity=quantity,
            location=location.strip(),
            date_added=self._clock(),
            notes=notes,
        )
        self._records[record.id] = record
        self._save()
        logger.info(
            "inventory_record_added",
            record_id=record.id,
            item=item.name,
            quantity=quantity,
        )
        return record

    def update(
        self,
        record_id: str,
        *,
        quantity: int | None = None,
        location: str | None = None,
        notes: str | None = None,
    ) -> InventoryRecord:
        """Apply the given fields; None leaves a field unchanged."""
        record = self.get(record_id)
        changes: dict[str, object] = {}
        if quantity is not None:
            if quantity < 1:
                raise ValueError("Quantity must be at least 1")
            changes["quantity"] = quantity
        if location is not None:
            changes["location"] = location.strip()
        if notes is not None:
            changes["notes"] = notes
        updated = record.model_copy(update=changes)
        self._records[record_id] = updated
        self._save()
        logger.info("inventory_record_updated", record_id=record_id, fields=sorted(changes))
        return updated

    def remove(self, record_id: str) -> None:
        self.get(record_id)
        del self._records[record_id]
        self._save()
        logger.info("inventory_record_removed", record_id=record_id)

    def totals(self) -> InventoryTotals:
        records = self._records.values()
        total_weight = sum(r.item.weight * r.quantity for r in records)
        total_volume = sum(r.item.volume * r.quantity for r in records)
        return InventoryTotals(
            total_items=sum(r.quantity for r in records),
            total_weight=round(total_weight, 2),
            total_volume=round(total_volume, 2),
            weight_display=format_weight(total_weight),
            volume_display=format_volume(total_volume),
        )
