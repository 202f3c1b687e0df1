"""Catalog matcher: strict-to-loose text search over the static catalog.

Strategies run in order and the first one that yields anything wins:

1. Exact name match
2. Substring match (query inside a name, or a whole name inside the query)
3. Variant/synonym table lookup
4. Token overlap (fraction of query words found in an item's words)

When all four find nothing, a bounded list of "did you mean" suggestions is
built from character-overlap scoring backed by a rapidfuzz search. The
matcher never raises for any query.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence

import structlog
from rapidfuzz import fuzz, process

from movelist.catalog.loader import load_catalog, load_variants
from movelist.config import Settings
from movelist.models.contracts import (
    CatalogItem,
    CatalogSearchResult,
    MatchKind,
    SearchFilters,
)
from movelist.utils.text import contains_word, normalize_text, split_words

logger = structlog.get_logger()

# A word pair counts toward relevance at this prefix/containment overlap,
# or at the lower value when the shorter word is at most SHORT_WORD_LENGTH.
_OVERLAP_STRONG = 3
_OVERLAP_WEAK = 2
_SHORT_WORD_LENGTH = 4
_CONTAINMENT_BONUS = 2
_SUGGESTION_MIN_QUERY = 3
_EVIDENCE_PREFIX = 3


def _shared_prefix(a: str, b: str) -> int:
    count = 0
    for ch_a, ch_b in zip(a, b):
        if ch_a != ch_b:
            break
        count += 1
    return count


def relevance_score(query_words: Sequence[str], name: str) -> int:
    """Character-overlap score of a normalized item name against query words.

    Each (query word, name word) pair scores its shared prefix length plus a
    bonus when one contains the other; only pairs with meaningful overlap
    contribute.
    """
    score = 0
    name_words = name.split(" ")
    for query_word in query_words:
        for name_word in name_words:
            overlap = _shared_prefix(query_word, name_word)
            if name_word in query_word or query_word in name_word:
                overlap += _CONTAINMENT_BONUS
            shortest = min(len(query_word), len(name_word))
            if overlap >= _OVERLAP_STRONG or (
                overlap >= _OVERLAP_WEAK and shortest <= _SHORT_WORD_LENGTH
            ):
                score += overlap
    return score


def has_prefix_evidence(query_words: Iterable[str], name: str) -> bool:
    """True when the name contains the leading characters of some query word."""
    return any(word[:_EVIDENCE_PREFIX] in name for word in query_words)


class CatalogMatcher:
    """Search a fixed, ordered collection of catalog items."""

    def __init__(
        self,
        items: Iterable[CatalogItem],
        variants: Mapping[str, Sequence[str]] | None = None,
        *,
        token_overlap_ratio: float = 0.6,
        suggestion_min_score: int = 3,
        fuzzy_score_cutoff: float = 60.0,
        fuzzy_candidate_limit: int = 5,
        max_suggestions: int = 3,
        max_results: int = 50,
    ) -> None:
        self._items: tuple[CatalogItem, ...] = tuple(items)
        self._names: tuple[str, ...] = tuple(normalize_text(i.name) for i in self._items)
        self._by_id: dict[int, CatalogItem] = {item.id: item for item in self._items}
        self._variants: Mapping[str, Sequence[str]] = variants or {}
        self.token_overlap_ratio = token_overlap_ratio
        self.suggestion_min_score = suggestion_min_score
        self.fuzzy_score_cutoff = fuzzy_score_cutoff
        self.fuzzy_candidate_limit = fuzzy_candidate_limit
        self.max_suggestions = max_suggestions
        self.max_results = max_results

    @classmethod
    def from_settings(cls, settings: Settings) -> CatalogMatcher:
        return cls(
            load_catalog(settings.catalog_path),
            load_variants(settings.variants_path),
            token_overlap_ratio=settings.token_overlap_ratio,
            suggestion_min_score=settings.suggestion_min_score,
            fuzzy_score_cutoff=settings.fuzzy_score_cutoff,
            fuzzy_candidate_limit=settings.fuzzy_candidate_limit,
            max_suggestions=settings.max_suggestions,
            max_results=settings.max_results,
        )

    @property
    def items(self) -> tuple[CatalogItem, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: int) -> CatalogItem | None:
        return self._by_id.get(item_id)

    # === Strategies ===

    def _collect(self, predicate: Callable[[str], bool]) -> list[int]:
        return [idx for idx, name in enumerate(self._names) if predicate(name)]

    def _match_exact(self, query: str) -> list[int]:
        return self._collect(lambda name: name == query)

    def _match_substring(self, query: str) -> list[int]:
        return self._collect(lambda name: query in name or contains_word(query, name))

    def _match_variants(self, query: str) -> list[int]:
        found: list[int] = []
        for fragment in self._variants.get(query, ()):
            for idx in self._collect(lambda name, f=fragment: f in name):
                if idx not in found:
                    found.append(idx)
        return found

    def _match_tokens(self, query: str) -> list[int]:
        query_words = split_words(query, min_length=2)
        if not query_words:
            return []

        def overlaps(name: str) -> bool:
            name_words = [w for w in name.split(" ") if len(w) > 1]
            hits = sum(
                1
                for qw in query_words
                if any(qw in nw or nw in qw for nw in name_words)
            )
            return hits / len(query_words) >= self.token_overlap_ratio

        return self._collect(overlaps)

    def _strategies(self) -> list[tuple[MatchKind, Callable[[str], list[int]]]]:
        return [
            ("exact", self._match_exact),
            ("substring", self._match_substring),
            ("variant", self._match_variants),
            ("token", self._match_tokens),
        ]

    # === Ranking & Suggestions ===

    def _rank(self, indices: list[int], query: str) -> list[int]:
        def key(idx: int) -> tuple[bool, bool, bool, int]:
            name = self._names[idx]
            return (
                name != query,
                query not in name,
                not name.startswith(query),
                len(name),
            )

        # sorted() is stable, so ties keep catalog order
        return sorted(indices, key=key)

    def suggest(self, query: str) -> list[str]:
        """Up to ``max_suggestions`` item names that look like the query."""
        query = normalize_text(query)
        if len(query) < _SUGGESTION_MIN_QUERY:
            return []
        query_words = split_words(query, min_length=3)
        if not query_words:
            return []

        heuristic: dict[int, int] = {}
        for idx, name in enumerate(self._names):
            score = relevance_score(query_words, name)
            if score >= self.suggestion_min_score:
                heuristic[idx] = score

        fuzzy: dict[int, float] = {}
        for _, score, idx in process.extract(
            query,
            self._names,
            scorer=fuzz.WRatio,
            score_cutoff=self.fuzzy_score_cutoff,
            limit=self.fuzzy_candidate_limit,
        ):
            if has_prefix_evidence(query_words, self._names[idx]):
                fuzzy[idx] = score

        both = sorted((i for i in fuzzy if i in heuristic), key=lambda i: -fuzzy[i])
        heuristic_only = sorted(
            (i for i in heuristic if i not in fuzzy), key=lambda i: -heuristic[i]
        )
        fuzzy_only = sorted((i for i in fuzzy if i not in heuristic), key=lambda i: -fuzzy[i])
        ordered = [*both, *heuristic_only, *fuzzy_only]
        return [self._items[idx].name for idx in ordered[: self.max_suggestions]]

    # === Public API ===

    def search(self, text: str, filters: SearchFilters | None = None) -> CatalogSearchResult:
        """Match text against the catalog, then apply numeric filters.

        An empty query lists the whole catalog (filtered). Suggestions are only
        produced when no strategy matched.
        """
        query = normalize_text(text or "")
        kind: MatchKind = "none"
        suggestions: list[str] = []

        if not query:
            candidates = list(self._items)
        else:
            indices: list[int] = []
            for strategy_kind, strategy in self._strategies():
                indices = strategy(query)
                if indices:
                    kind = strategy_kind
                    break
            if not indices:
                suggestions = self.suggest(query)
            candidates = [self._items[idx] for idx in self._rank(indices, query)]

        if filters is not None:
            candidates = [item for item in candidates if filters.accepts(item)]

        logger.debug(
            "catalog_search",
            query=query,
            match_kind=kind,
            matches=len(candidates),
            suggestions=len(suggestions),
        )
        return CatalogSearchResult(
            matches=candidates[: self.max_results],
            suggestions=suggestions,
            match_kind=kind,
        )

    def best_match(self, text: str) -> tuple[CatalogItem, MatchKind] | None:
        """Top-ranked match for text and the strategy that found it, if any."""
        if not normalize_text(text or ""):
            return None
        result = self.search(text)
        if not result.matches:
            return None
        return result.matches[0], result.match_kind
