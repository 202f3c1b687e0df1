"""Lookup strategies tried in order by the item resolver.

Every strategy is an async callable ``(text, client) -> LookupResult | None``
with a ``name`` and an optional ``timeout``. Returning None means "nothing
found, try the next one"; raising StrategyError means the strategy failed.
Either way the resolver moves on.
"""

from __future__ import annotations

import re
from typing import Any, Protocol

import httpx
import structlog

from movelist.catalog.matcher import CatalogMatcher
from movelist.config import Settings
from movelist.errors import StrategyError
from movelist.estimation import estimator
from movelist.models.contracts import LookupResult, MatchKind
from movelist.utils.text import normalize_text, split_words, title_case

logger = structlog.get_logger()


class LookupStrategy(Protocol):
    name: str
    timeout: float | None
    uses_catalog: bool

    async def __call__(self, text: str, client: httpx.AsyncClient) -> LookupResult | None: ...


# === Catalog ===

CATALOG_CONFIDENCE: dict[MatchKind, float] = {
    "exact": 0.95,
    "substring": 0.9,
    "variant": 0.85,
    "token": 0.8,
}


class CatalogStrategy:
    """Local catalog match; the only strategy skipped for external-only lookups."""

    name = "catalog"
    timeout = None
    uses_catalog = True

    def __init__(self, matcher: CatalogMatcher) -> None:
        self.matcher = matcher

    async def __call__(self, text: str, client: httpx.AsyncClient) -> LookupResult | None:
        found = self.matcher.best_match(text)
        if found is None:
            return None
        item, kind = found
        return LookupResult(
            name=item.name,
            weight=item.weight,
            height=item.height,
            width=item.width,
            depth=item.depth,
            category=item.category or estimator.detect_category(text, item.name),
            confidence=CATALOG_CONFIDENCE.get(kind, CATALOG_CONFIDENCE["token"]),
            source="catalog",
            specifications={"match_kind": kind},
            catalog_id=item.id,
            catalog_rank=item.rank,
        )


# === Content-extraction backend ===

BACKEND_DEFAULT_CONFIDENCE = 0.7


def _coerce_weight(raw: Any) -> float | None:
    """Backend weights arrive as numbers or as strings such as "45 kg"."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw) if raw > 0 else None
    if isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            return estimator.parse_weight(raw)
        return value if value > 0 else None
    return None


def _coerce_confidence(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return BACKEND_DEFAULT_CONFIDENCE
    return min(max(float(raw), 0.0), 1.0)


class BackendStrategy:
    """POST the item text to the local content-extraction backend."""

    name = "backend"
    uses_catalog = False

    def __init__(self, url: str, timeout: float = 10.0) -> None:
        self.url = url
        self.timeout = timeout

    async def __call__(self, text: str, client: httpx.AsyncClient) -> LookupResult | None:
        try:
            resp = await client.post(self.url, json={"itemText": text}, timeout=self.timeout)
        except httpx.TimeoutException as exc:
            raise StrategyError(self.name, "request timed out") from exc
        except httpx.RequestError as exc:
            raise StrategyError(self.name, f"network error: {type(exc).__name__}") from exc

        if resp.status_code >= 400:
            raise StrategyError(self.name, f"HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise StrategyError(self.name, "malformed JSON payload") from exc
        if not isinstance(data, dict):
            raise StrategyError(self.name, "payload is not an object")

        return self._to_result(text, data)

    def _to_result(self, text: str, data: dict[str, Any]) -> LookupResult | None:
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            logger.debug("backend_result_incomplete", text=text[:80])
            return None

        description = data.get("description")
        if not isinstance(description, str):
            description = None

        category = data.get("category")
        if not isinstance(category, str) or not category.strip():
            category = estimator.detect_category(text, description)
        category = category.strip().lower()

        weight = _coerce_weight(data.get("weight"))
        if weight is None:
            weight = estimator.estimate_weight(text, category, description)

        raw_dims = data.get("dimensions")
        dims = estimator.parse_dimensions(raw_dims) if isinstance(raw_dims, str) else None
        if dims is None:
            dims = estimator.estimate_dimensions(text, category)
        height, width, depth = dims

        specifications = data.get("specifications")
        source_detail = data.get("source")
        return LookupResult(
            name=name.strip(),
            weight=weight,
            height=height,
            width=width,
            depth=depth,
            category=category,
            confidence=_coerce_confidence(data.get("confidence")),
            source="external-extraction",
            description=description,
            specifications=specifications if isinstance(specifications, dict) else None,
            source_detail=source_detail if isinstance(source_detail, str) else None,
        )


# === Encyclopedic summary ===

ENCYCLOPEDIA_WEIGHT_CONFIDENCE = 0.88
ENCYCLOPEDIA_SUMMARY_CONFIDENCE = 0.75
_DESCRIPTION_LENGTH = 200

_STOPWORDS = frozenset(
    {"with", "from", "that", "this", "into", "large", "small", "medium", "used", "old", "new"}
)
_NON_WORD_RE = re.compile(r"[^\w\s-]")


def _shorten(summary: str) -> str:
    if len(summary) <= _DESCRIPTION_LENGTH:
        return summary
    return summary[:_DESCRIPTION_LENGTH] + "..."


def search_terms(text: str, max_terms: int = 4) -> list[str]:
    """Title-search terms derived from item text, most specific first.

    The full phrase comes first, then each significant word, then the first
    two words as a shorter phrase.
    """
    phrase = normalize_text(_NON_WORD_RE.sub(" ", text))
    if not phrase:
        return []
    words = split_words(phrase)
    terms = [phrase]
    terms.extend(w for w in words if len(w) > 3 and w not in _STOPWORDS)
    if len(words) > 2:
        terms.append(" ".join(words[:2]))

    unique: list[str] = []
    for term in terms:
        if term not in unique:
            unique.append(term)
    return unique[:max_terms]


class EncyclopediaStrategy:
    """MediaWiki title search plus intro extract, mined for weight and size."""

    name = "encyclopedia"
    uses_catalog = False

    def __init__(
        self,
        url: str,
        timeout: float = 8.0,
        max_terms: int = 4,
        min_summary: int = 50,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.max_terms = max_terms
        self.min_summary = min_summary

    async def _get_json(self, client: httpx.AsyncClient, params: dict[str, Any]) -> Any:
        try:
            resp = await client.get(self.url, params=params, timeout=self.timeout)
        except httpx.TimeoutException as exc:
            raise StrategyError(self.name, "request timed out") from exc
        except httpx.RequestError as exc:
            raise StrategyError(self.name, f"network error: {type(exc).__name__}") from exc
        if resp.status_code >= 400:
            raise StrategyError(self.name, f"HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as exc:
            raise StrategyError(self.name, "malformed JSON payload") from exc

    async def find_title(self, client: httpx.AsyncClient, term: str) -> str | None:
        data = await self._get_json(
            client,
            {
                "action": "opensearch",
                "search": term,
                "limit": 3,
                "namespace": 0,
                "format": "json",
            },
        )
        # [query, [titles], [descriptions], [urls]]
        if not isinstance(data, list) or len(data) < 2 or not isinstance(data[1], list):
            raise StrategyError(self.name, "unexpected search payload")
        titles = [t for t in data[1] if isinstance(t, str) and t]
        return titles[0] if titles else None

    async def fetch_summary(self, client: httpx.AsyncClient, title: str) -> str | None:
        data = await self._get_json(
            client,
            {
                "action": "query",
                "prop": "extracts",
                "exintro": 1,
                "explaintext": 1,
                "titles": title,
                "format": "json",
            },
        )
        pages = data.get("query", {}).get("pages", {}) if isinstance(data, dict) else {}
        if not isinstance(pages, dict):
            raise StrategyError(self.name, "unexpected extract payload")
        for page in pages.values():
            extract = page.get("extract") if isinstance(page, dict) else None
            if isinstance(extract, str) and extract.strip():
                return extract.strip()
        return None

    async def __call__(self, text: str, client: httpx.AsyncClient) -> LookupResult | None:
        for term in search_terms(text, self.max_terms):
            title = await self.find_title(client, term)
            if title is None:
                continue
            summary = await self.fetch_summary(client, title)
            if summary is None or len(summary) < self.min_summary:
                logger.debug("encyclopedia_summary_too_short", term=term, title=title)
                continue

            base = estimator.estimate(text, prose=summary)
            weight_found = estimator.parse_weight(summary) is not None
            return base.model_copy(
                update={
                    "confidence": (
                        ENCYCLOPEDIA_WEIGHT_CONFIDENCE
                        if weight_found
                        else ENCYCLOPEDIA_SUMMARY_CONFIDENCE
                    ),
                    "source": "encyclopedic",
                    "description": _shorten(summary),
                    "specifications": {"title": title, "search_term": term},
                    "source_detail": title,
                }
            )
        return None


# === Estimator ===


class EstimatorStrategy:
    """Heuristic estimate; always produces a result."""

    name = "estimator"
    timeout = None
    uses_catalog = False

    async def __call__(self, text: str, client: httpx.AsyncClient) -> LookupResult | None:
        return estimator.estimate(text)


def build_strategies(matcher: CatalogMatcher, settings: Settings) -> list[LookupStrategy]:
    """The standard cascade: catalog, backend, encyclopedia, estimator."""
    strategies: list[LookupStrategy] = [CatalogStrategy(matcher)]
    if settings.use_external_lookup:
        strategies.append(BackendStrategy(settings.backend_url, settings.backend_timeout))
        strategies.append(
            EncyclopediaStrategy(
                settings.encyclopedia_url,
                timeout=settings.encyclopedia_timeout,
                max_terms=settings.encyclopedia_max_terms,
                min_summary=settings.encyclopedia_min_summary,
            )
        )
    strategies.append(EstimatorStrategy())
    return strategies
