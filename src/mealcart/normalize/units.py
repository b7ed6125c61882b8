"""Unit canonicalization and reference catalog label lookups."""

from dataclasses import dataclass, field
from typing import Protocol

from mealcart.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Unit Alias Table
# =============================================================================

# Mass
MASS_UNITS: frozenset[str] = frozenset({"g", "kg"})

# Volume
VOLUME_UNITS: frozenset[str] = frozenset({"ml", "l", "cup", "tbsp", "tsp"})

# Count
COUNT_UNITS: frozenset[str] = frozenset({"stk"})

# Imperial mass
IMPERIAL_UNITS: frozenset[str] = frozenset({"oz", "lb"})

CANONICAL_UNITS: frozenset[str] = MASS_UNITS | VOLUME_UNITS | COUNT_UNITS | IMPERIAL_UNITS

# Lower-cased surface forms (German and English) -> canonical code
UNIT_ALIASES: dict[str, str] = {
    # Mass
    "g": "g",
    "gr": "g",
    "gram": "g",
    "grams": "g",
    "gramm": "g",
    "gramms": "g",
    "gramme": "g",
    "kg": "kg",
    "kilo": "kg",
    "kilos": "kg",
    "kilogram": "kg",
    "kilograms": "kg",
    "kilogramm": "kg",
    # Volume
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "l": "l",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "cup": "cup",
    "cups": "cup",
    "tasse": "cup",
    "tassen": "cup",
    "tbsp": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "el": "tbsp",
    "esslöffel": "tbsp",
    "tsp": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tl": "tsp",
    "teelöffel": "tsp",
    # Count
    "stk": "stk",
    "stück": "stk",
    "stücke": "stk",
    "piece": "stk",
    "pieces": "stk",
    # Imperial
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "unze": "oz",
    "unzen": "oz",
    "lb": "lb",
    "lbs": "lb",
    "pound": "lb",
    "pounds": "lb",
    "pfund": "lb",
}

# Plural/inflection endings tried when the exact form is unknown
_STRIPPABLE_ENDINGS = ("s", "e")


def canonical_unit(token: str | None) -> str | None:
    """
    Map a surface unit word to its canonical code.

    Lookups are exact after lower-casing. A single trailing "s" or "e" is
    stripped as a second attempt, so "Tasse" and "grams" resolve even when only
    the stem is listed.

    Returns:
        The canonical unit code, or None when the token is not a unit.
    """
    if not token:
        return None

    word = token.strip().lower()
    if word in UNIT_ALIASES:
        return UNIT_ALIASES[word]

    if len(word) > 1 and word.endswith(_STRIPPABLE_ENDINGS):
        return UNIT_ALIASES.get(word[:-1])

    return None


# =============================================================================
# Reference Catalog Lookups
# =============================================================================


class LabelLookup(Protocol):
    """Read-only key -> display label lookup owned by the reference catalog."""

    def label(self, key: str, language: str) -> str | None: ...


@dataclass
class LabelCatalog:
    """In-memory label lookup keyed by catalog key, then by language."""

    labels: dict[str, dict[str, str]] = field(default_factory=dict)

    def label(self, key: str, language: str) -> str | None:
        translations = self.labels.get(key)
        if not translations:
            return None
        return translations.get(language) or None

    def add(self, key: str, **translations: str | None) -> None:
        """Register labels for a key, ignoring empty translations."""
        entry = self.labels.setdefault(key, {})
        for language, text in translations.items():
            if text:
                entry[language] = text

    def __contains__(self, key: object) -> bool:
        return key in self.labels

    def __len__(self) -> int:
        return len(self.labels)


@dataclass
class ReferenceCatalog:
    """The unit and ingredient catalogs used for rendering display labels."""

    units: LabelLookup = field(default_factory=LabelCatalog)
    ingredients: LabelLookup = field(default_factory=LabelCatalog)

    def unit_label(self, unit_key: str | None, language: str) -> str:
        """
        Resolve the display label for a unit.

        Returns an empty string for "no unit" and the key itself when the
        catalog has no label for it.
        """
        if not unit_key:
            return ""
        label = self.units.label(unit_key, language)
        if label is None:
            logger.debug(f"No {language} label for unit '{unit_key}', using key")
            return unit_key
        return label

    def ingredient_label(self, ingredient_key: str, language: str) -> str:
        """Resolve the display label for an ingredient, falling back to its key."""
        label = self.ingredients.label(ingredient_key, language)
        if label is None:
            logger.debug(f"No {language} label for ingredient '{ingredient_key}', using key")
            return ingredient_key
        return label
