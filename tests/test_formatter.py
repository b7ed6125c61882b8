"""Unit tests for shopping list line formatting."""

import pytest

from mealcart.plan.formatter import ShoppingListFormatter, format_line, format_quantity
from mealcart.plan.merge import MergedEntry


class TestFormatQuantity:
    """Tests for format_quantity function."""

    @pytest.mark.parametrize(
        ("quantity", "expected"),
        [
            (400.0, "400"),
            (2, "2"),
            (1.5, "1.5"),
            (1.25, "1.25"),
            (1.1, "1.1"),
            (1 / 3, "0.33"),
            (2.999, "3"),
            (-2.0, "-2"),
            (1e20, "100000000000000000000"),
            (float("inf"), "inf"),
        ],
    )
    def test_format(self, quantity, expected):
        """Test whole and fractional quantities."""
        assert format_quantity(quantity) == expected


class TestFormatLine:
    """Tests for format_line function."""

    def test_with_unit(self):
        """Test quantity, unit and ingredient."""
        assert format_line(400.0, "g", "flour") == "400 g flour"

    def test_without_unit(self):
        """Test quantity and ingredient only."""
        assert format_line(2.0, "", "eggs") == "2 eggs"

    def test_unknown_quantity(self):
        """Test that an unknown quantity renders the ingredient alone."""
        assert format_line(None, "g", "salt") == "salt"

    def test_zero_quantity(self):
        """Test that zero renders the ingredient alone."""
        assert format_line(0.0, "g", "salt") == "salt"

    @pytest.mark.parametrize("quantity", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_quantity(self, quantity):
        """Test that non-finite quantities render the ingredient alone."""
        assert format_line(quantity, "g", "flour") == "flour"


class TestShoppingListFormatter:
    """Tests for ShoppingListFormatter with catalog labels."""

    def test_catalog_entry_german(self, reference_catalog):
        """Test a catalog-linked entry rendered in German."""
        formatter = ShoppingListFormatter(reference_catalog, "de")
        entry = MergedEntry(quantity=1.5, unit_key="cup", ingredient_key="milk")

        assert formatter.format_entry(entry) == "1.5 Tasse Milch"

    def test_catalog_entry_english(self, reference_catalog):
        """Test a catalog-linked entry rendered in English."""
        formatter = ShoppingListFormatter(reference_catalog, "en")
        entry = MergedEntry(quantity=400.0, unit_key="g", ingredient_key="flour")

        assert formatter.format_entry(entry) == "400 g flour"

    def test_free_text_entry_uses_name(self, reference_catalog):
        """Test that free-text entries use their parsed name."""
        formatter = ShoppingListFormatter(reference_catalog, "de")
        entry = MergedEntry(quantity=3.0, unit_key="tbsp", name="zucker")

        assert formatter.format_entry(entry) == "3 EL zucker"

    def test_missing_labels_fall_back_to_keys(self, reference_catalog):
        """Test that keys are shown when the catalog has no label."""
        formatter = ShoppingListFormatter(reference_catalog, "en")
        entry = MergedEntry(quantity=2.0, unit_key="oz", ingredient_key="saffron")

        assert formatter.format_entry(entry) == "2 oz saffron"

    def test_no_unit_no_quantity(self, reference_catalog):
        """Test an entry with neither unit nor quantity."""
        formatter = ShoppingListFormatter(reference_catalog, "de")
        entry = MergedEntry(quantity=None, unit_key="", name="salt")

        assert formatter.format_entry(entry) == "salt"
