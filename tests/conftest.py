"""Shared fixtures: the shipped catalog, fake HTTP transports and an API client."""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from movelist.api import deps
from movelist.catalog.matcher import CatalogMatcher
from movelist.config import Settings
from movelist.inventory.store import InventoryStore
from movelist.lookup.cache import LookupCache
from movelist.lookup.resolver import ItemResolver
from movelist.lookup.strategies import (
    BackendStrategy,
    CatalogStrategy,
    EncyclopediaStrategy,
    EstimatorStrategy,
)

BACKEND_URL = "http://backend.test/api/scrape-item"
ENCYCLOPEDIA_URL = "http://wiki.test/w/api.php"


def unavailable(request: httpx.Request) -> httpx.Response:
    """Every external service answers 503."""
    return httpx.Response(503, request=request)


@pytest.fixture(scope="session")
def matcher() -> CatalogMatcher:
    return CatalogMatcher.from_settings(Settings())


@pytest.fixture
def make_resolver(matcher):
    """Factory for a resolver whose HTTP traffic goes to ``handler``."""

    def _make(handler=unavailable, **kwargs) -> ItemResolver:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        strategies = [
            CatalogStrategy(matcher),
            BackendStrategy(BACKEND_URL, timeout=2.0),
            EncyclopediaStrategy(ENCYCLOPEDIA_URL, timeout=2.0),
            EstimatorStrategy(),
        ]
        return ItemResolver(strategies, LookupCache(), http_client=client, **kwargs)

    return _make


@pytest.fixture
def api_resolver(make_resolver) -> ItemResolver:
    return make_resolver()


@pytest.fixture
def api_inventory() -> InventoryStore:
    return InventoryStore()


@pytest.fixture
async def client(matcher, api_resolver, api_inventory):
    """ASGI client with in-memory services swapped in for the app's providers."""
    from movelist.main import app

    app.dependency_overrides[deps.get_matcher] = lambda: matcher
    app.dependency_overrides[deps.get_resolver] = lambda: api_resolver
    app.dependency_overrides[deps.get_inventory] = lambda: api_inventory
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
