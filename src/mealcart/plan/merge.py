"""Merge keys and quantity accumulation for shopping list entries."""

import math
from dataclasses import dataclass, field
from typing import NamedTuple

from mealcart.normalize.entries import FreeTextEntry, IngredientEntry, StructuredEntry
from mealcart.normalize.parser import parse_ingredient_line

CATALOG_KEYSPACE = "catalog"
TEXT_KEYSPACE = "text"


class MergeKey(NamedTuple):
    """
    Identity used to decide whether two contributions are the same line item.

    Catalog entries are keyed by (ingredient_key, unit_key) and free-text
    entries by (unit_token, normalized name). The keyspace component keeps the
    two apart, so a catalog "flour" never merges with a free-text "flour".
    """

    keyspace: str
    unit: str
    identity: str


@dataclass
class Contribution:
    """One scaled ingredient occurrence from one selected recipe."""

    key: MergeKey
    quantity: float | None
    unit_key: str
    ingredient_key: str | None = None
    name: str | None = None


@dataclass
class MergedEntry:
    """Aggregate of every contribution sharing a merge key."""

    quantity: float | None
    unit_key: str
    ingredient_key: str | None = None
    name: str | None = None
    recipe_sources: list[int] = field(default_factory=list)


def scale_quantity(quantity: float | None, scale: float) -> float | None:
    """
    Scale a quantity, keeping an unknown quantity unknown.

    A product that overflows the float range is unknown as well.
    """
    if quantity is None:
        return None
    scaled = quantity * scale
    return scaled if math.isfinite(scaled) else None


def contribution_from_entry(entry: IngredientEntry, scale: float) -> Contribution | None:
    """
    Build the scaled contribution of one stored ingredient entry.

    Returns None for free-text lines that cannot be parsed into a name.
    """
    if isinstance(entry, StructuredEntry):
        unit_key = entry.unit_key or ""
        return Contribution(
            key=MergeKey(CATALOG_KEYSPACE, unit_key, entry.ingredient_key),
            quantity=scale_quantity(entry.quantity, scale),
            unit_key=unit_key,
            ingredient_key=entry.ingredient_key,
        )

    if isinstance(entry, FreeTextEntry):
        parsed = parse_ingredient_line(entry.text)
        if parsed is None:
            return None
        return Contribution(
            key=MergeKey(TEXT_KEYSPACE, parsed.unit_token, parsed.name),
            quantity=scale_quantity(parsed.quantity, scale),
            unit_key=parsed.unit_token,
            name=parsed.name,
        )

    raise TypeError(f"Unsupported ingredient entry: {entry!r}")


def merge_contribution(
    merged: dict[MergeKey, MergedEntry],
    contribution: Contribution,
    recipe_id: int | None = None,
) -> MergedEntry:
    """
    Add a contribution to the merge map.

    Known quantities are summed. Unknown (None) and zero contributions never
    change the accumulated quantity, and the first known value replaces an
    unknown accumulator rather than being added to zero.
    """
    quantity = contribution.quantity or None

    entry = merged.get(contribution.key)
    if entry is None:
        entry = MergedEntry(
            quantity=quantity,
            unit_key=contribution.unit_key,
            ingredient_key=contribution.ingredient_key,
            name=contribution.name,
        )
        merged[contribution.key] = entry
    elif quantity is not None:
        total = quantity if entry.quantity is None else entry.quantity + quantity
        # An overflowing sum keeps the last finite total
        if math.isfinite(total):
            entry.quantity = total

    if recipe_id is not None and recipe_id not in entry.recipe_sources:
        entry.recipe_sources.append(recipe_id)

    return entry
