"""Parsing of free-text ingredient lines into quantity, unit and name."""

import math
import re
from dataclasses import dataclass

from mealcart.logging_config import get_logger
from mealcart.normalize.units import canonical_unit

logger = get_logger(__name__)


# =============================================================================
# Quantity Grammars
# =============================================================================

# Tried in order: mixed number ("1 1/2"), simple fraction ("1/2", "1.5/2"), number ("2,5")
_MIXED_NUMBER = re.compile(r"^(-?\d+(?:[.,]\d+)?)\s+(\d+)\s*/\s*(\d+)")
_FRACTION = re.compile(r"^(-?\d+(?:[.,]\d+)?)\s*/\s*(\d+)")
_NUMBER = re.compile(r"^(-?\d+(?:[.,]\d+)?)")

# A leading word of letters followed by whitespace and more text
_UNIT_WORD = re.compile(r"^([^\W\d_]+)\s+(.+)$", re.DOTALL)


@dataclass(frozen=True)
class ParsedLine:
    """A free-text ingredient line split into structured parts."""

    quantity: float | None
    unit_token: str
    name: str
    raw: str

    @property
    def has_quantity(self) -> bool:
        return self.quantity is not None


def _to_float(number: str) -> float:
    return float(number.replace(",", "."))


def _finite_or_whole_line(value: float, text: str, end: int) -> tuple[float | None, str]:
    # Digit runs too long for a float overflow to inf (or nan for inf/inf)
    if not math.isfinite(value):
        logger.debug(f"Quantity out of range, keeping whole line: {text!r}")
        return None, text
    return value, text[end:].strip()


def parse_quantity(text: str) -> tuple[float | None, str]:
    """
    Split a leading quantity off a line.

    Handles formats like:
    - "2" and "1.5" or "1,5" (decimal comma)
    - "1/2" and "1.5/2"
    - "1 1/2" (one and a half)

    Returns:
        Tuple of (quantity, remainder). The quantity is None and the remainder
        is the whole text when no quantity leads the line, when a fraction
        has a zero denominator, or when the value does not fit in a float.
    """
    text = text.strip()

    mixed = _MIXED_NUMBER.match(text)
    if mixed:
        whole = _to_float(mixed.group(1))
        denominator = _to_float(mixed.group(3))
        if denominator == 0:
            return None, text
        fraction = _to_float(mixed.group(2)) / denominator
        value = whole - fraction if mixed.group(1).startswith("-") else whole + fraction
        return _finite_or_whole_line(value, text, mixed.end())

    fraction = _FRACTION.match(text)
    if fraction:
        denominator = _to_float(fraction.group(2))
        if denominator == 0:
            return None, text
        value = _to_float(fraction.group(1)) / denominator
        return _finite_or_whole_line(value, text, fraction.end())

    number = _NUMBER.match(text)
    if number:
        return _finite_or_whole_line(_to_float(number.group(1)), text, number.end())

    return None, text


def split_unit(remainder: str) -> tuple[str, str]:
    """
    Split a recognized unit word off the front of a remainder.

    Examples:
        "g flour" -> ("g", "flour")
        "Tassen Milch" -> ("cup", "Milch")
        "large eggs" -> ("", "large eggs")
        "g" -> ("", "g")
    """
    match = _UNIT_WORD.match(remainder)
    if not match:
        return "", remainder

    unit = canonical_unit(match.group(1))
    if unit is None:
        return "", remainder

    return unit, match.group(2)


def parse_ingredient_line(line: str) -> ParsedLine | None:
    """
    Parse one free-text ingredient line.

    Examples:
        "1 1/2 cups milk" -> (1.5, "cup", "milk")
        "250g flour" -> (250.0, "g", "flour")
        "salt" -> (None, "", "salt")

    Returns:
        The ParsedLine, or None when the line is empty or nothing is left for
        the ingredient name.
    """
    raw = str(line).strip()
    if not raw:
        return None

    quantity, remainder = parse_quantity(raw)
    unit_token, name = split_unit(remainder)

    name = name.strip().lower()
    if not name:
        logger.debug(f"Unparsable ingredient line (no name): {raw!r}")
        return None

    return ParsedLine(quantity=quantity, unit_token=unit_token, name=name, raw=raw)
