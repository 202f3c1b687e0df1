"""movelist contract models shared by the pipeline, the inventory and the API.

Catalog and resolution models are frozen: a value is built once and handed
to callers, never patched in place.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

ItemSource = Literal["catalog", "external-extraction", "encyclopedic", "estimated"]
MatchKind = Literal["exact", "substring", "variant", "token", "none"]

# === Catalog ===


class CatalogItem(BaseModel):
    """One entry of the static reference catalog (kg / cm / cm³)."""

    model_config = {"frozen": True}

    id: int
    name: str = Field(min_length=1)
    weight: float = Field(gt=0)
    height: float = Field(gt=0)
    width: float = Field(gt=0)
    depth: float = Field(gt=0)
    volume: float = Field(gt=0)
    rank: int = 0
    category: str | None = None


class SearchFilters(BaseModel):
    """Inclusive numeric bounds applied after text matching."""

    min_weight: float | None = None
    max_weight: float | None = None
    min_volume: float | None = None
    max_volume: float | None = None

    def accepts(self, item: CatalogItem) -> bool:
        if self.min_weight is not None and item.weight < self.min_weight:
            return False
        if self.max_weight is not None and item.weight > self.max_weight:
            return False
        if self.min_volume is not None and item.volume < self.min_volume:
            return False
        if self.max_volume is not None and item.volume > self.max_volume:
            return False
        return True


class CatalogSearchResult(BaseModel):
    matches: list[CatalogItem] = []
    suggestions: list[str] = []
    match_kind: MatchKind = "none"


# === Resolution ===


class LookupResult(BaseModel):
    """Strategy output, and the payload stored in the lookup cache (no id)."""

    model_config = {"frozen": True}

    name: str
    weight: float
    height: float
    width: float
    depth: float
    category: str = "misc"
    confidence: float = Field(ge=0, le=1)
    source: ItemSource
    description: str | None = None
    specifications: dict[str, Any] | None = None
    source_detail: str | None = None  # label reported by an external service
    catalog_id: int | None = None
    catalog_rank: int | None = None

    @property
    def volume(self) -> float:
        return self.height * self.width * self.depth


class ResolvedItem(BaseModel):
    """Pipeline output: catalog fields plus category, confidence and provenance."""

    model_config = {"frozen": True}

    id: int
    name: str
    weight: float = Field(gt=0)
    height: float = Field(gt=0)
    width: float = Field(gt=0)
    depth: float = Field(gt=0)
    volume: float = Field(gt=0)
    rank: int
    category: str
    confidence: float = Field(ge=0, le=1)
    source: ItemSource
    original_text: str
    description: str | None = None
    specifications: dict[str, Any] | None = None
    source_detail: str | None = None


class CacheStats(BaseModel):
    size: int
    max_entries: int
    ttl_seconds: float | None = None
    hits: int = 0
    misses: int = 0
    expired: int = 0


# === Inventory ===


class InventoryRecord(BaseModel):
    id: str
    item: ResolvedItem | CatalogItem
    quantity: int = Field(ge=1)
    location: str = ""
    date_added: datetime
    notes: str | None = None


class InventoryTotals(BaseModel):
    total_items: int = 0
    total_weight: float = 0.0
    total_volume: float = 0.0
    weight_display: str = "0 kg"
    volume_display: str = "0 cm³"


# === API Envelopes ===


class ResolveRequest(BaseModel):
    text: str
    external_only: bool = False


class ResolvePendingResponse(BaseModel):
    status: Literal["pending"] = "pending"
    message: str
    retryable: bool = True


class CatalogSearchResponse(BaseModel):
    query: str
    match_kind: MatchKind
    total: int
    matches: list[CatalogItem]
    suggestions: list[str]


class AddInventoryRequest(BaseModel):
    """Either a catalog item id or a previously resolved item."""

    catalog_item_id: int | None = None
    resolved_item: ResolvedItem | None = None
    quantity: int = Field(ge=1, default=1)
    location: str = ""
    notes: str | None = None


class UpdateInventoryRequest(BaseModel):
    quantity: int | None = Field(ge=1, default=None)
    location: str | None = None
    notes: str | None = None


class ErrorResponse(BaseModel):
    error: str
    message: str
    retryable: bool
