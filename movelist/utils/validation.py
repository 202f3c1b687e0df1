"""Input and value sanity checks for item text, weights and dimensions."""

from __future__ import annotations

import math

from movelist.errors import InvalidItemText

MAX_REASONABLE_WEIGHT_KG = 10_000
MAX_REASONABLE_DIMENSION_CM = 1_000


def validate_item_text(text: object, max_length: int = 100) -> str:
    """Return the stripped text, or raise InvalidItemText.

    Text must be a string with 1 to ``max_length - 1`` characters after
    stripping.
    """
    if not isinstance(text, str):
        raise InvalidItemText("Item text must be a string")
    stripped = text.strip()
    if not stripped:
        raise InvalidItemText("Item text must not be empty")
    if len(stripped) >= max_length:
        raise InvalidItemText(f"Item text must be shorter than {max_length} characters")
    return stripped


def _is_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


def is_valid_weight(weight: object) -> bool:
    return _is_number(weight) and 0 < weight < MAX_REASONABLE_WEIGHT_KG  # type: ignore[operator]


def is_valid_dimensions(height: object, width: object, depth: object) -> bool:
    return all(
        _is_number(dim) and 0 < dim < MAX_REASONABLE_DIMENSION_CM  # type: ignore[operator]
        for dim in (height, width, depth)
    )
