"""Exception types raised across the resolution pipeline."""

from __future__ import annotations


class InvalidItemText(ValueError):
    """Raised when item text is empty, whitespace-only or too long to resolve."""


class StrategyError(Exception):
    """Raised by a lookup strategy that could not produce a usable result.

    The orchestrator catches it and moves on to the next strategy; it never
    reaches callers of ``ItemResolver.resolve``.
    """

    def __init__(self, strategy: str, message: str) -> None:
        super().__init__(f"{strategy}: {message}")
        self.strategy = strategy


class CatalogLoadError(Exception):
    """Raised when the catalog or variant table cannot be loaded."""


class InventoryRecordNotFound(KeyError):
    """Raised when an inventory record id does not exist."""


class InvalidInventoryItem(ValueError):
    """Raised when an item's weight or dimensions are outside sane bounds."""
