"""Shopping list aggregation and formatting."""

from mealcart.plan.formatter import ShoppingListFormatter, format_quantity
from mealcart.plan.merge import MergedEntry, MergeKey
from mealcart.plan.shopping_list import (
    AggregationResult,
    RecipeRecord,
    RecipeSource,
    SelectionItem,
    ShoppingList,
    ShoppingListAggregator,
    ShoppingListLine,
    ShoppingListService,
    scale_factor,
)

__all__ = [
    "AggregationResult",
    "MergeKey",
    "MergedEntry",
    "RecipeRecord",
    "RecipeSource",
    "SelectionItem",
    "ShoppingList",
    "ShoppingListAggregator",
    "ShoppingListFormatter",
    "ShoppingListLine",
    "ShoppingListService",
    "format_quantity",
    "scale_factor",
]
