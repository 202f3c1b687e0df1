"""Display helpers for weights, volumes and dimensions."""

from __future__ import annotations

CM3_PER_M3 = 1_000_000
CM3_PER_LITRE = 1_000


def _trim_number(value: float, places: int = 2) -> str:
    text = f"{value:,.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_volume(volume_cm3: float) -> str:
    """Render a volume as m³, litres or cm³ depending on magnitude."""
    if volume_cm3 >= CM3_PER_M3:
        return f"{volume_cm3 / CM3_PER_M3:.1f} m³"
    if volume_cm3 >= CM3_PER_LITRE:
        return f"{volume_cm3 / CM3_PER_LITRE:.1f} L"
    return f"{_trim_number(volume_cm3)} cm³"


def format_weight(weight_kg: float) -> str:
    return f"{_trim_number(weight_kg)} kg"


def format_dimensions(height: float, width: float, depth: float) -> str:
    """``H×W×D cm`` with whole-number axes rendered without decimals."""
    axes = "×".join(_trim_number(v, 1).replace(",", "") for v in (height, width, depth))
    return f"{axes} cm"
