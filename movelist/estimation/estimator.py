"""Heuristic item estimator: weight, dimensions and category from plain text.

Used as the last-resort lookup strategy and to backfill fields missing from
external results. Explicit values found in supplied prose (an encyclopedia
summary, a product description) take precedence over table-driven guesses.
Nothing here performs I/O and ``estimate`` never raises.
"""

from __future__ import annotations

import math
import re

from movelist.estimation.tables import (
    CATEGORY_BASE_DIMENSIONS,
    CATEGORY_BASE_WEIGHT,
    CATEGORY_TRIGGERS,
    DEFAULT_CATEGORY,
    ITEM_DIMENSIONS,
    MATERIAL_MULTIPLIERS,
    MAX_WEIGHT_KG,
    MIN_WEIGHT_KG,
    SIZE_MODIFIERS,
    WEIGHT_FLOORS,
)
from movelist.models.contracts import LookupResult
from movelist.utils.text import contains_term, contains_word, normalize_text, title_case

Dimensions = tuple[float, float, float]

KG_PER_LB = 0.453592
MIN_PARSED_WEIGHT = 0.5
MAX_PARSED_WEIGHT = 5000.0

CONFIDENCE_EXTRACTED_WEIGHT = 0.88
CONFIDENCE_EXTRACTED_DIMENSIONS = 0.75
CONFIDENCE_ESTIMATED = 0.65

_NUMBER = r"(\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?)"
_QUALIFIER = r"(?:about|around|approximately|approx\.?|roughly|nearly|up to)?"
_KG = r"(?:kg|kgs|kilograms?)\b"
_LB = r"(?:lbs?|pounds?)\b"

_WEIGHT_LEAD = rf"(?:weighs?|weight|mass)[\s:]*{_QUALIFIER}\s*{_NUMBER}\s*"

_WEIGHT_PATTERNS: tuple[tuple[re.Pattern[str], float], ...] = (
    (re.compile(rf"{_WEIGHT_LEAD}{_KG}", re.I), 1.0),
    (re.compile(rf"{_WEIGHT_LEAD}{_LB}", re.I), KG_PER_LB),
    (re.compile(rf"{_NUMBER}\s*{_KG}", re.I), 1.0),
    (re.compile(rf"{_NUMBER}\s*{_LB}", re.I), KG_PER_LB),
)

_SEP = r"\s*(?:x|×|by)\s*"
# Bare "in" followed by another word is the preposition, not inches
_UNIT = r"(cm|centimet(?:er|re)s?|mm|m|inch(?:es)?|in(?!\s+[a-z])|\")?(?![a-z])"
_DIMENSION_RE = re.compile(rf"{_NUMBER}{_SEP}{_NUMBER}{_SEP}{_NUMBER}\s*{_UNIT}", re.I)
_UNIT_TO_CM = {"mm": 0.1, "m": 100.0, "in": 2.54, "inch": 2.54, "inches": 2.54, '"': 2.54}


def round_half_up(value: float, places: int = 0) -> float:
    """Round like arithmetic rounding (2.5 -> 3), not banker's rounding."""
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def _to_float(number: str) -> float:
    return float(number.replace(",", ""))


def parse_weight(prose: str | None) -> float | None:
    """Extract an explicit weight in kilograms from prose, or None.

    Raw values outside [0.5, 5000] (in the matched unit) are ignored. Pounds
    are converted to kilograms and the result is rounded to a whole number.
    """
    if not prose:
        return None
    for pattern, factor in _WEIGHT_PATTERNS:
        for match in pattern.finditer(prose):
            raw = _to_float(match.group(1))
            if MIN_PARSED_WEIGHT <= raw <= MAX_PARSED_WEIGHT:
                return round_half_up(raw * factor)
    return None


def parse_dimensions(prose: str | None) -> Dimensions | None:
    """Extract an ``H x W x D [unit]`` triple in centimetres, or None.

    Values keep their textual order (height, width, depth); no unit means cm.
    """
    if not prose:
        return None
    match = _DIMENSION_RE.search(prose)
    if match is None:
        return None
    unit = (match.group(4) or "cm").lower()
    factor = 1.0 if unit.startswith("c") else _UNIT_TO_CM.get(unit, 1.0)
    dims = tuple(round_half_up(_to_float(match.group(i)) * factor, 1) for i in (1, 2, 3))
    if any(d <= 0 for d in dims):
        return None
    return dims  # type: ignore[return-value]


def detect_category(text: str, prose: str | None = None) -> str:
    """First category whose triggers appear in the text, then in the prose."""
    for haystack in (normalize_text(text), normalize_text(prose or "")):
        if not haystack:
            continue
        for category, triggers in CATEGORY_TRIGGERS.items():
            if any(contains_term(haystack, trigger) for trigger in triggers):
                return category
    return DEFAULT_CATEGORY


def size_multipliers(text: str) -> tuple[float, float]:
    """(weight, dimension) multipliers from size words such as "large" or "mini"."""
    lowered = normalize_text(text)
    weight_mult = dim_mult = 1.0
    for words, weight_factor, dim_factor in SIZE_MODIFIERS:
        if any(contains_word(lowered, word) for word in words):
            weight_mult *= weight_factor
            dim_mult *= dim_factor
    return weight_mult, dim_mult


def material_multiplier(text: str) -> float:
    lowered = normalize_text(text)
    for words, factor in MATERIAL_MULTIPLIERS:
        if any(contains_word(lowered, word) for word in words):
            return factor
    return 1.0


def estimate_weight(text: str, category: str | None = None, prose: str | None = None) -> float:
    """Weight in kilograms: explicit prose value, else a table-driven guess."""
    parsed = parse_weight(prose) or parse_weight(text)
    if parsed is not None:
        return parsed

    lowered = normalize_text(text)
    category = category or detect_category(text, prose)
    weight = float(CATEGORY_BASE_WEIGHT.get(category, CATEGORY_BASE_WEIGHT[DEFAULT_CATEGORY]))
    weight *= size_multipliers(lowered)[0]
    weight *= material_multiplier(lowered)
    for name, floor in WEIGHT_FLOORS:
        if contains_word(lowered, name):
            weight = max(weight, floor)
            break
    weight = min(max(weight, MIN_WEIGHT_KG), MAX_WEIGHT_KG)
    return round_half_up(weight, 2)


def estimate_dimensions(
    text: str, category: str | None = None, prose: str | None = None
) -> Dimensions:
    """(height, width, depth) in whole centimetres."""
    parsed = parse_dimensions(prose) or parse_dimensions(text)
    if parsed is not None:
        return parsed

    lowered = normalize_text(text)
    base: Dimensions | None = None
    # Longest key first, so "fridge freezer" is sized as a freezer
    for name in sorted(ITEM_DIMENSIONS, key=len, reverse=True):
        if contains_term(lowered, name):
            base = ITEM_DIMENSIONS[name]
            break
    if base is None:
        category = category or detect_category(text, prose)
        base = CATEGORY_BASE_DIMENSIONS.get(category, CATEGORY_BASE_DIMENSIONS[DEFAULT_CATEGORY])

    multiplier = size_multipliers(lowered)[1]
    height, width, depth = (round_half_up(axis * multiplier) for axis in base)
    return height, width, depth


def estimate(text: str, prose: str | None = None, name: str | None = None) -> LookupResult:
    """Build a complete estimated LookupResult for free text.

    Confidence is tiered: an explicit weight found in the prose scores highest,
    explicit dimensions alone score in the middle, pure heuristics lowest.
    """
    category = detect_category(text, prose)
    weight_found = parse_weight(prose) is not None
    dims_found = parse_dimensions(prose) is not None
    height, width, depth = estimate_dimensions(text, category, prose)

    if weight_found:
        confidence = CONFIDENCE_EXTRACTED_WEIGHT
    elif dims_found:
        confidence = CONFIDENCE_EXTRACTED_DIMENSIONS
    else:
        confidence = CONFIDENCE_ESTIMATED

    return LookupResult(
        name=name or title_case(text),
        weight=estimate_weight(text, category, prose),
        height=height,
        width=width,
        depth=depth,
        category=category,
        confidence=confidence,
        source="estimated",
        description=f"Estimated specifications for {text.strip()}",
    )
