"""Item resolver: turn free text into a ResolvedItem.

Flow for one call to ``ItemResolver.resolve``:

1. Validate the text (raises InvalidItemText before any cache or network use)
2. Return a cached result for the normalized key, if present
3. Return None when the same key is already being resolved
4. Run the strategies in order until one yields an acceptable result
5. Cache the result and wrap it in a ResolvedItem with a stable id
"""

from __future__ import annotations

import asyncio
import zlib
from collections.abc import Sequence

import httpx
import structlog

from movelist.catalog.matcher import CatalogMatcher
from movelist.config import Settings
from movelist.errors import StrategyError
from movelist.estimation import estimator
from movelist.lookup.cache import LookupCache
from movelist.lookup.strategies import LookupStrategy, build_strategies
from movelist.models.contracts import CacheStats, LookupResult, ResolvedItem
from movelist.utils.validation import validate_item_text

logger = structlog.get_logger()

# Generated ids start here so they never collide with catalog ids
GENERATED_ID_BASE = 100_000


def stable_item_id(key: str) -> int:
    """Deterministic id for a non-catalog resolution of a normalized key."""
    return GENERATED_ID_BASE + zlib.crc32(key.encode("utf-8"))


def compute_rank(weight: float, volume: float) -> int:
    return int(estimator.round_half_up(weight * 10 + volume / 1000))


class ItemResolver:
    def __init__(
        self,
        strategies: Sequence[LookupStrategy],
        cache: LookupCache | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        max_text_length: int = 100,
        min_confidence: float = 0.5,
    ) -> None:
        self.strategies = list(strategies)
        self.cache = cache if cache is not None else LookupCache()
        self.max_text_length = max_text_length
        self.min_confidence = min_confidence
        self._http_client = http_client
        self._pending: set[str] = set()

    @classmethod
    def from_settings(
        cls,
        matcher: CatalogMatcher,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> ItemResolver:
        return cls(
            build_strategies(matcher, settings),
            LookupCache(settings.cache_max_entries, settings.cache_ttl_seconds),
            http_client=http_client,
            max_text_length=settings.max_text_length,
            min_confidence=settings.min_confidence,
        )

    def is_pending(self, text: str) -> bool:
        return self.cache.key(text) in self._pending

    async def resolve(self, text: str, *, external_only: bool = False) -> ResolvedItem | None:
        """Resolve text to an item, or None if the same text is already in flight.

        With ``external_only`` the catalog strategy is skipped.
        """
        cleaned = validate_item_text(text, self.max_text_length)
        key = self.cache.key(cleaned)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("lookup_cache_hit", key=key, source=cached.source)
            return self._to_resolved(cached, cleaned, key)

        if key in self._pending:
            logger.info("lookup_already_pending", key=key)
            return None

        self._pending.add(key)
        try:
            result = await self._run_strategies(cleaned, external_only=external_only)
        finally:
            self._pending.discard(key)

        self.cache.set(key, result)
        logger.info(
            "item_resolved",
            key=key,
            source=result.source,
            confidence=result.confidence,
            category=result.category,
        )
        return self._to_resolved(result, cleaned, key)

    async def _run_strategies(self, text: str, *, external_only: bool) -> LookupResult:
        client = self._http_client
        owns_client = client is None
        if client is None:
            client = httpx.AsyncClient()
        try:
            for strategy in self.strategies:
                if external_only and strategy.uses_catalog:
                    continue
                result = await self._attempt(strategy, text, client)
                if result is not None:
                    return result
        finally:
            if owns_client:
                await client.aclose()

        logger.warning("lookup_strategies_exhausted", text=text[:80])
        return estimator.estimate(text)

    async def _attempt(
        self, strategy: LookupStrategy, text: str, client: httpx.AsyncClient
    ) -> LookupResult | None:
        try:
            result = await asyncio.wait_for(strategy(text, client), timeout=strategy.timeout)
        except StrategyError as exc:
            logger.warning("lookup_strategy_failed", strategy=strategy.name, error=str(exc))
            return None
        except TimeoutError:
            logger.warning(
                "lookup_strategy_failed",
                strategy=strategy.name,
                error=f"timed out after {strategy.timeout}s",
            )
            return None
        except Exception as exc:
            logger.warning(
                "lookup_strategy_failed",
                strategy=strategy.name,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=exc,
            )
            return None

        if result is None:
            logger.debug("lookup_strategy_empty", strategy=strategy.name)
            return None
        if not self._is_acceptable(result):
            logger.info(
                "lookup_result_rejected",
                strategy=strategy.name,
                confidence=result.confidence,
                weight=result.weight,
            )
            return None
        return result

    def _is_acceptable(self, result: LookupResult) -> bool:
        return (
            result.confidence >= self.min_confidence
            and result.weight > 0
            and min(result.height, result.width, result.depth) > 0
            and bool(result.name.strip())
        )

    def _to_resolved(self, result: LookupResult, text: str, key: str) -> ResolvedItem:
        volume = result.volume
        if result.catalog_id is not None:
            item_id = result.catalog_id
            rank = result.catalog_rank if result.catalog_rank is not None else 0
        else:
            item_id = stable_item_id(key)
            rank = compute_rank(result.weight, volume)
        return ResolvedItem(
            id=item_id,
            name=result.name,
            weight=result.weight,
            height=result.height,
            width=result.width,
            depth=result.depth,
            volume=volume,
            rank=rank,
            category=result.category,
            confidence=result.confidence,
            source=result.source,
            original_text=text,
            description=result.description,
            specifications=result.specifications,
            source_detail=result.source_detail,
        )

    # === Cache management ===

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("lookup_cache_cleared")

    def cache_size(self) -> int:
        return self.cache.size()

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()
