"""Rendering merged shopping list entries as display lines."""

import math

from mealcart.normalize.units import ReferenceCatalog
from mealcart.plan.merge import MergedEntry


def format_quantity(quantity: float) -> str:
    """
    Format a quantity for display.

    Whole numbers render without a decimal point; anything else renders with
    at most two decimals and no trailing zeros ("1.50" -> "1.5").
    """
    if math.isfinite(quantity) and quantity == int(quantity):
        return str(int(quantity))
    return f"{quantity:.2f}".rstrip("0").rstrip(".")


def format_line(quantity: float | None, unit_label: str, ingredient_label: str) -> str:
    """Build "<quantity> <unit> <ingredient>" from already resolved labels."""
    if quantity is None or quantity == 0 or not math.isfinite(quantity):
        return ingredient_label

    quantity_str = format_quantity(quantity)
    if unit_label:
        return f"{quantity_str} {unit_label} {ingredient_label}"
    return f"{quantity_str} {ingredient_label}"


class ShoppingListFormatter:
    """Formats merged entries using catalog labels in one display language."""

    def __init__(self, catalog: ReferenceCatalog, language: str):
        self.catalog = catalog
        self.language = language

    def unit_label(self, entry: MergedEntry) -> str:
        return self.catalog.unit_label(entry.unit_key, self.language)

    def ingredient_label(self, entry: MergedEntry) -> str:
        if entry.ingredient_key is not None:
            return self.catalog.ingredient_label(entry.ingredient_key, self.language)
        return entry.name or ""

    def format_entry(self, entry: MergedEntry) -> str:
        """Render one merged entry as a human-readable line."""
        return format_line(entry.quantity, self.unit_label(entry), self.ingredient_label(entry))
