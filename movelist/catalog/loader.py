"""Load the static item catalog and the variant/synonym table from JSON.

Catalog records carry weight (kg) and height/width/depth (cm); volume is
derived here so the stored data cannot disagree with its dimensions.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import structlog
from pydantic import ValidationError

from movelist.errors import CatalogLoadError
from movelist.models.contracts import CatalogItem
from movelist.utils.text import normalize_text

logger = structlog.get_logger()


def _read_json(path: str | Path) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise CatalogLoadError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"Invalid JSON in {path}: {exc}") from exc


def build_catalog(records: list[dict[str, Any]]) -> tuple[CatalogItem, ...]:
    """Validate raw records into CatalogItems, keeping their order.

    Raises CatalogLoadError on a duplicate id or an invalid record.
    """
    items: list[CatalogItem] = []
    seen_ids: set[int] = set()
    for index, raw in enumerate(records):
        try:
            volume = float(raw["height"]) * float(raw["width"]) * float(raw["depth"])
            item = CatalogItem.model_validate({**raw, "volume": volume})
        except (KeyError, TypeError, ValueError, ValidationError) as exc:
            raise CatalogLoadError(f"Invalid catalog record #{index}: {exc}") from exc
        if item.id in seen_ids:
            raise CatalogLoadError(f"Duplicate catalog id {item.id} ({item.name!r})")
        seen_ids.add(item.id)
        items.append(item)
    return tuple(items)


def load_catalog(path: str | Path) -> tuple[CatalogItem, ...]:
    data = _read_json(path)
    if not isinstance(data, list):
        raise CatalogLoadError(f"Catalog {path} must be a JSON list")
    items = build_catalog(data)
    logger.info("catalog_loaded", path=str(path), items=len(items))
    return items


def build_variant_index(table: Mapping[str, list[str]]) -> Mapping[str, tuple[str, ...]]:
    """Invert ``canonical fragment -> surface forms`` into ``surface -> fragments``.

    Fragments keep the order in which they appear in the table.
    """
    index: dict[str, list[str]] = {}
    for canonical, surfaces in table.items():
        fragment = normalize_text(canonical)
        for surface in surfaces:
            targets = index.setdefault(normalize_text(surface), [])
            if fragment not in targets:
                targets.append(fragment)
    return MappingProxyType({surface: tuple(frags) for surface, frags in index.items()})


def load_variants(path: str | Path) -> Mapping[str, tuple[str, ...]]:
    data = _read_json(path)
    if not isinstance(data, dict) or not all(
        isinstance(v, list) and all(isinstance(s, str) for s in v) for v in data.values()
    ):
        raise CatalogLoadError(f"Variant table {path} must map strings to lists of strings")
    index = build_variant_index(data)
    logger.info("variants_loaded", path=str(path), surfaces=len(index))
    return index
