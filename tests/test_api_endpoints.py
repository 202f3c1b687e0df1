"""Integration tests for the FastAPI endpoints.

Services are swapped for in-memory instances via dependency overrides; every
external HTTP call answers 503, so resolution falls through to the catalog or
the estimator.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from movelist.api.routes.health import _check_backend
from movelist.config import settings
from movelist.models.contracts import ErrorResponse

_RESOLVED = {
    "id": 123456,
    "name": "Gaming Chair",
    "weight": 22,
    "height": 130,
    "width": 70,
    "depth": 70,
    "volume": 637000,
    "rank": 659,
    "category": "furniture",
    "confidence": 0.8,
    "source": "external-extraction",
    "original_text": "gaming chair",
}


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_health_returns_200(self, client):
        with patch(
            "movelist.api.routes.health._check_backend",
            new_callable=AsyncMock,
            return_value="connected",
        ):
            resp = await client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["version"] == "0.1.0"
        assert body["catalog_items"] == 80
        assert body["backend"] == "connected"

    @pytest.mark.asyncio
    async def test_backend_down_still_ok(self, client):
        with patch(
            "movelist.api.routes.health._check_backend",
            new_callable=AsyncMock,
            return_value="disconnected",
        ):
            resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["backend"] == "disconnected"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        with patch(
            "movelist.api.routes.health._check_backend",
            new_callable=AsyncMock,
            return_value="connected",
        ):
            resp = await client.get("/health", headers={"X-Request-ID": "req-123"})
        assert resp.headers["X-Request-ID"] == "req-123"


class TestBackendCheck:
    @pytest.mark.asyncio
    async def test_any_http_answer_is_connected(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(405, request=request)

        with patch.object(settings, "use_external_lookup", True):
            status = await _check_backend(httpx.MockTransport(handler))
        assert status == "connected"
        assert seen == [settings.backend_url]

    @pytest.mark.asyncio
    async def test_connection_refused_is_disconnected(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with patch.object(settings, "use_external_lookup", True):
            status = await _check_backend(httpx.MockTransport(handler))
        assert status == "disconnected"

    @pytest.mark.asyncio
    async def test_disabled_without_external_lookup(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("backend should not be contacted")

        with patch.object(settings, "use_external_lookup", False):
            assert await _check_backend(httpx.MockTransport(handler)) == "disabled"


class TestCatalogEndpoints:
    @pytest.mark.asyncio
    async def test_search(self, client):
        resp = await client.get("/api/v1/catalog/search", params={"q": "chest freezer"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["match_kind"] == "exact"
        assert body["total"] == 1
        assert body["matches"][0]["id"] == 55
        assert body["suggestions"] == []

    @pytest.mark.asyncio
    async def test_search_with_filters(self, client):
        resp = await client.get("/api/v1/catalog/search", params={"min_weight": 100})
        body = resp.json()
        assert body["total"] > 0
        assert all(item["weight"] >= 100 for item in body["matches"])

    @pytest.mark.asyncio
    async def test_search_suggestions(self, client):
        resp = await client.get("/api/v1/catalog/search", params={"q": "wardrobz"})
        body = resp.json()
        assert body["total"] == 0
        assert body["suggestions"]

    @pytest.mark.asyncio
    async def test_negative_filter_is_a_validation_error(self, client):
        resp = await client.get("/api/v1/catalog/search", params={"min_weight": -1})
        assert resp.status_code == 422
        assert ErrorResponse.model_validate(resp.json()).error == "validation_error"

    @pytest.mark.asyncio
    async def test_get_item(self, client):
        resp = await client.get("/api/v1/catalog/55")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Chest Freezer"

    @pytest.mark.asyncio
    async def test_get_unknown_item(self, client):
        resp = await client.get("/api/v1/catalog/9999")
        assert resp.status_code == 404
        er = ErrorResponse.model_validate(resp.json())
        assert er.error == "item_not_found"
        assert er.retryable is False


class TestResolveEndpoint:
    @pytest.mark.asyncio
    async def test_resolves_catalog_item(self, client):
        resp = await client.post("/api/v1/items/resolve", json={"text": "Chest Freezer"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == 55
        assert body["source"] == "catalog"
        assert body["category"] == "appliances"

    @pytest.mark.asyncio
    async def test_external_only_falls_back_to_estimate(self, client):
        resp = await client.post(
            "/api/v1/items/resolve",
            json={"text": "chest freezer", "external_only": True},
        )
        assert resp.status_code == 200
        assert resp.json()["source"] == "estimated"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "x" * 100])
    async def test_invalid_text_is_422(self, client, api_resolver, text):
        resp = await client.post("/api/v1/items/resolve", json={"text": text})
        assert resp.status_code == 422
        er = ErrorResponse.model_validate(resp.json())
        assert er.error == "validation_error"
        assert "X-Request-ID" in resp.headers
        assert api_resolver.cache_size() == 0

    @pytest.mark.asyncio
    async def test_missing_text_is_422(self, client):
        resp = await client.post("/api/v1/items/resolve", json={})
        assert resp.status_code == 422
        assert resp.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_pending_lookup_is_202(self, client, api_resolver):
        with patch.object(api_resolver, "resolve", new_callable=AsyncMock, return_value=None):
            resp = await client.post("/api/v1/items/resolve", json={"text": "sofa"})
        assert resp.status_code == 202
        body = resp.json()
        assert body["status"] == "pending"
        assert body["retryable"] is True


class TestLookupCacheEndpoints:
    @pytest.mark.asyncio
    async def test_stats_and_clear(self, client):
        await client.post("/api/v1/items/resolve", json={"text": "fridge"})
        await client.post("/api/v1/items/resolve", json={"text": "fridge"})

        stats = (await client.get("/api/v1/lookup-cache")).json()
        assert stats["size"] == 1
        assert stats["hits"] == 1

        resp = await client.delete("/api/v1/lookup-cache")
        assert resp.status_code == 204
        assert (await client.get("/api/v1/lookup-cache")).json()["size"] == 0


class TestInventoryEndpoints:
    @pytest.mark.asyncio
    async def test_catalog_item_lifecycle(self, client):
        resp = await client.post(
            "/api/v1/inventory",
            json={"catalog_item_id": 55, "quantity": 2, "location": "Garage"},
        )
        assert resp.status_code == 201
        record = resp.json()
        assert record["item"]["name"] == "Chest Freezer"

        listing = (await client.get("/api/v1/inventory")).json()
        assert [r["id"] for r in listing] == [record["id"]]

        totals = (await client.get("/api/v1/inventory/totals")).json()
        assert totals["total_items"] == 2
        assert totals["total_weight"] == 140
        assert totals["weight_display"] == "140 kg"

        resp = await client.patch(f"/api/v1/inventory/{record['id']}", json={"quantity": 3})
        assert resp.status_code == 200
        assert resp.json()["quantity"] == 3

        resp = await client.delete(f"/api/v1/inventory/{record['id']}")
        assert resp.status_code == 204
        resp = await client.delete(f"/api/v1/inventory/{record['id']}")
        assert resp.status_code == 404
        assert resp.json()["error"] == "record_not_found"

    @pytest.mark.asyncio
    async def test_add_resolved_item(self, client):
        resolved = (
            await client.post(
                "/api/v1/items/resolve",
                json={"text": "mystery gadget"},
            )
        ).json()
        resp = await client.post(
            "/api/v1/inventory", json={"resolved_item": resolved, "location": "Loft"}
        )
        assert resp.status_code == 201
        assert resp.json()["item"]["source"] == "estimated"

    @pytest.mark.asyncio
    async def test_filter_by_location(self, client):
        await client.post("/api/v1/inventory", json={"catalog_item_id": 55, "location": "Garage"})
        await client.post("/api/v1/inventory", json={"catalog_item_id": 52, "location": "Kitchen"})
        resp = await client.get("/api/v1/inventory", params={"location": "kitchen"})
        assert [r["item"]["id"] for r in resp.json()] == [52]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload", [{"quantity": 1}, {"catalog_item_id": 55, "resolved_item": _RESOLVED}]
    )
    async def test_exactly_one_item_source_required(self, client, payload):
        resp = await client.post("/api/v1/inventory", json=payload)
        assert resp.status_code == 422
        assert resp.json()["error"] == "invalid_item"

    @pytest.mark.asyncio
    async def test_unknown_catalog_item(self, client):
        resp = await client.post("/api/v1/inventory", json={"catalog_item_id": 9999})
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_zero_quantity_rejected(self, client):
        resp = await client.post("/api/v1/inventory", json={"catalog_item_id": 55, "quantity": 0})
        assert resp.status_code == 422
        assert resp.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_patch_unknown_record(self, client):
        resp = await client.patch("/api/v1/inventory/nope", json={"quantity": 2})
        assert resp.status_code == 404


class TestErrorHandling:
    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500_json(self, client, matcher):
        with patch.object(matcher, "search", side_effect=RuntimeError("unexpected bug")):
            resp = await client.get("/api/v1/catalog/search", params={"q": "sofa"})
        assert resp.status_code == 500
        er = ErrorResponse.model_validate(resp.json())
        assert er.error == "internal_error"
        assert er.retryable is True
        assert "X-Request-ID" in resp.headers
