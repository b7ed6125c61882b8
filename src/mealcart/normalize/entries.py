"""Ingredient entries as stored on a recipe."""

import math
from dataclasses import dataclass
from typing import Any

from mealcart.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StructuredEntry:
    """An ingredient authored against the reference catalog."""

    ingredient_key: str
    unit_key: str | None = None
    quantity: float | None = None


@dataclass(frozen=True)
class FreeTextEntry:
    """An unmanaged ingredient line, e.g. "250g flour"."""

    text: str


IngredientEntry = StructuredEntry | FreeTextEntry


def _coerce_quantity(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        quantity = float(value)
    elif isinstance(value, str):
        try:
            quantity = float(value.strip().replace(",", "."))
        except ValueError:
            return None
    else:
        return None
    return quantity if math.isfinite(quantity) else None


def coerce_entry(value: Any) -> IngredientEntry | None:
    """
    Convert a stored JSON value into an IngredientEntry.

    Strings become FreeTextEntry; objects carrying an "ingredient_key" become
    StructuredEntry. Anything else is not an ingredient entry.
    """
    if isinstance(value, str):
        return FreeTextEntry(text=value)

    if isinstance(value, dict) and value.get("ingredient_key"):
        unit_key = value.get("unit_key") or None
        return StructuredEntry(
            ingredient_key=str(value["ingredient_key"]),
            unit_key=str(unit_key) if unit_key is not None else None,
            quantity=_coerce_quantity(value.get("quantity")),
        )

    logger.debug(f"Ignoring stored ingredient of unexpected shape: {value!r}")
    return None


def coerce_entries(values: Any) -> list[IngredientEntry]:
    """Convert a stored ingredient list, dropping values that are not entries."""
    if not isinstance(values, list):
        return []
    entries = []
    for value in values:
        entry = coerce_entry(value)
        if entry is not None:
            entries.append(entry)
    return entries


def entry_to_json(entry: IngredientEntry) -> str | dict[str, Any]:
    """Convert an entry back to its stored JSON form."""
    if isinstance(entry, FreeTextEntry):
        return entry.text
    return {
        "ingredient_key": entry.ingredient_key,
        "unit_key": entry.unit_key,
        "quantity": entry.quantity,
    }
