"""Tests for the shared pydantic contract models."""

import pytest
from pydantic import ValidationError

from movelist.models.contracts import (
    CatalogItem,
    ErrorResponse,
    LookupResult,
    SearchFilters,
    UpdateInventoryRequest,
)

_ITEM = CatalogItem(
    id=1, name="Fridge", weight=40, height=85, width=55, depth=60, volume=280500, rank=1
)


class TestCatalogItem:
    def test_frozen(self):
        with pytest.raises(ValidationError):
            _ITEM.weight = 10  # type: ignore[misc]

    def test_positive_measurements(self):
        with pytest.raises(ValidationError):
            CatalogItem(id=2, name="X", weight=-1, height=1, width=1, depth=1, volume=1)


class TestSearchFilters:
    def test_no_bounds_accept_everything(self):
        assert SearchFilters().accepts(_ITEM)

    def test_bounds_are_inclusive(self):
        assert SearchFilters(min_weight=40, max_weight=40).accepts(_ITEM)
        assert SearchFilters(min_volume=280500, max_volume=280500).accepts(_ITEM)

    def test_all_bounds_must_hold(self):
        assert not SearchFilters(min_weight=10, max_volume=1000).accepts(_ITEM)


class TestLookupResult:
    def test_volume(self):
        result = LookupResult(
            name="Box", weight=2, height=10, width=20, depth=30, confidence=0.5, source="estimated"
        )
        assert result.volume == 6000
        assert result.category == "misc"

    @pytest.mark.parametrize("confidence", [-0.1, 1.1])
    def test_confidence_range(self, confidence):
        with pytest.raises(ValidationError):
            LookupResult(
                name="Box",
                weight=2,
                height=1,
                width=1,
                depth=1,
                confidence=confidence,
                source="estimated",
            )

    def test_unknown_source_rejected(self):
        with pytest.raises(ValidationError):
            LookupResult(
                name="Box", weight=2, height=1, width=1, depth=1, confidence=0.5, source="guess"
            )


class TestRequests:
    def test_update_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            UpdateInventoryRequest(quantity=0)
        assert UpdateInventoryRequest().quantity is None

    def test_error_response_shape(self):
        er = ErrorResponse(error="item_not_found", message="nope", retryable=False)
        assert er.model_dump() == {"error": "item_not_found", "message": "nope", "retryable": False}
