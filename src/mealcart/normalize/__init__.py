"""Parse and canonicalize ingredient lines and units."""

from mealcart.normalize.entries import (
    FreeTextEntry,
    IngredientEntry,
    StructuredEntry,
    coerce_entries,
    coerce_entry,
)
from mealcart.normalize.parser import (
    ParsedLine,
    parse_ingredient_line,
    parse_quantity,
    split_unit,
)
from mealcart.normalize.units import (
    CANONICAL_UNITS,
    UNIT_ALIASES,
    LabelCatalog,
    LabelLookup,
    ReferenceCatalog,
    canonical_unit,
)

__all__ = [
    "CANONICAL_UNITS",
    "UNIT_ALIASES",
    "FreeTextEntry",
    "IngredientEntry",
    "LabelCatalog",
    "LabelLookup",
    "ParsedLine",
    "ReferenceCatalog",
    "StructuredEntry",
    "canonical_unit",
    "coerce_entries",
    "coerce_entry",
    "parse_ingredient_line",
    "parse_quantity",
    "split_unit",
]
