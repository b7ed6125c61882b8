"""Shopping list generation from selected recipes."""

from dataclasses import dataclass, field
from typing import Protocol

from mealcart.logging_config import get_logger
from mealcart.normalize.entries import FreeTextEntry, IngredientEntry
from mealcart.normalize.units import ReferenceCatalog
from mealcart.plan.formatter import ShoppingListFormatter
from mealcart.plan.merge import (
    MergedEntry,
    MergeKey,
    contribution_from_entry,
    merge_contribution,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class SelectionItem:
    """A recipe the user wants to shop for, at a target serving count."""

    recipe_id: int
    servings: int


@dataclass
class RecipeRecord:
    """A recipe as loaded from the recipe store."""

    id: int
    servings: int | None
    ingredients: list[IngredientEntry] = field(default_factory=list)


class RecipeSource(Protocol):
    """Loads recipes, restricted to those saved by the user."""

    async def load_owned_recipes(
        self, user_id: str, recipe_ids: list[int]
    ) -> list[RecipeRecord]: ...


def scale_factor(requested_servings: int | None, recipe_servings: int | float | None) -> float:
    """
    Compute the ratio of requested to base servings.

    An unset or non-positive base serving count disables scaling (factor 1).
    """
    if not recipe_servings or recipe_servings <= 0:
        return 1.0
    return (requested_servings or 1) / recipe_servings


@dataclass
class AggregationResult:
    """Merged entries plus the records that were left out along the way."""

    entries: list[MergedEntry] = field(default_factory=list)
    excluded_recipe_ids: list[int] = field(default_factory=list)
    skipped_lines: list[str] = field(default_factory=list)


class ShoppingListAggregator:
    """
    Merges the ingredients of several selected recipes into one list.

    Each selection item is scaled independently, so selecting the same recipe
    twice counts its ingredients twice. Recipes that are unknown or not saved
    by the user are excluded without raising.
    """

    def __init__(self, recipe_source: RecipeSource):
        self.recipe_source = recipe_source

    async def aggregate(self, user_id: str, selection: list[SelectionItem]) -> AggregationResult:
        recipe_ids = list(dict.fromkeys(item.recipe_id for item in selection))
        if not recipe_ids:
            return AggregationResult()

        recipes = await self.recipe_source.load_owned_recipes(user_id, recipe_ids)
        recipes_by_id = {recipe.id: recipe for recipe in recipes}

        result = AggregationResult(
            excluded_recipe_ids=[rid for rid in recipe_ids if rid not in recipes_by_id]
        )
        if result.excluded_recipe_ids:
            logger.info(
                f"Excluding recipes not saved by user {user_id}: {result.excluded_recipe_ids}"
            )

        merged: dict[MergeKey, MergedEntry] = {}

        for item in selection:
            recipe = recipes_by_id.get(item.recipe_id)
            if recipe is None:
                continue

            scale = scale_factor(item.servings, recipe.servings)
            for entry in recipe.ingredients:
                contribution = contribution_from_entry(entry, scale)
                if contribution is None:
                    if isinstance(entry, FreeTextEntry) and entry.text.strip():
                        result.skipped_lines.append(entry.text)
                    continue
                merge_contribution(merged, contribution, recipe.id)

        result.entries = list(merged.values())

        logger.info(
            f"Aggregated {len(selection)} selections from {len(recipes_by_id)} recipes "
            f"into {len(result.entries)} entries"
        )
        return result


@dataclass
class ShoppingListLine:
    """A single rendered line of the shopping list."""

    raw: str
    quantity: float | None
    unit_key: str | None
    ingredient_key: str | None
    name: str | None
    recipe_sources: list[int] = field(default_factory=list)


@dataclass
class ShoppingList:
    """Complete shopping list for one aggregation request."""

    language: str
    items: list[ShoppingListLine] = field(default_factory=list)
    excluded_recipe_ids: list[int] = field(default_factory=list)
    skipped_lines: list[str] = field(default_factory=list)

    # Computed counts
    catalog_items_count: int = 0
    free_text_items_count: int = 0

    def add_item(self, item: ShoppingListLine) -> None:
        """Add an item and update computed fields."""
        self.items.append(item)

        if item.ingredient_key is not None:
            self.catalog_items_count += 1
        else:
            self.free_text_items_count += 1


class ShoppingListService:
    """
    Generates shopping lists from recipe selections with:
    - Per-recipe serving scaling
    - Merging across recipes by ingredient and unit
    - Display lines rendered with catalog labels
    """

    def __init__(self, recipe_source: RecipeSource, catalog: ReferenceCatalog):
        self.aggregator = ShoppingListAggregator(recipe_source)
        self.catalog = catalog

    async def generate(
        self,
        user_id: str,
        selection: list[SelectionItem],
        language: str,
    ) -> ShoppingList:
        """
        Generate a shopping list for the selected recipes.

        Args:
            user_id: The requesting user; only recipes they saved contribute.
            selection: Recipes with requested serving counts.
            language: Display language for catalog labels.

        Returns:
            ShoppingList with one line per merged ingredient.
        """
        logger.info(f"Generating shopping list for user {user_id} ({len(selection)} selections)")

        result = await self.aggregator.aggregate(user_id, selection)
        formatter = ShoppingListFormatter(self.catalog, language)

        shopping_list = ShoppingList(
            language=language,
            excluded_recipe_ids=result.excluded_recipe_ids,
            skipped_lines=result.skipped_lines,
        )

        for entry in result.entries:
            shopping_list.add_item(
                ShoppingListLine(
                    raw=formatter.format_entry(entry),
                    quantity=entry.quantity,
                    unit_key=entry.unit_key or None,
                    ingredient_key=entry.ingredient_key,
                    name=entry.name,
                    recipe_sources=entry.recipe_sources,
                )
            )

        return shopping_list
