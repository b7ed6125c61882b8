"""Database access for recipes, the reference catalog and saved lists."""

from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mealcart.logging_config import get_logger
from mealcart.models import (
    Ingredient,
    MealSchedule,
    Recipe,
    SavedShoppingList,
    Unit,
    UserRecipe,
)
from mealcart.normalize.entries import coerce_entries
from mealcart.normalize.units import LabelCatalog, ReferenceCatalog
from mealcart.plan.shopping_list import RecipeRecord, SelectionItem

logger = get_logger(__name__)


class RecipeRepository:
    """Recipe store restricted by the user's save relation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_owned_recipes(self, user_id: str, recipe_ids: list[int]) -> list[RecipeRecord]:
        """
        Load the recipes among recipe_ids that the user has saved.

        Recipes that do not exist or are not saved by the user are simply
        absent from the result.
        """
        if not recipe_ids:
            return []

        result = await self.db.execute(
            select(Recipe)
            .join(UserRecipe, UserRecipe.recipe_id == Recipe.id)
            .where(UserRecipe.user_id == user_id)
            .where(Recipe.id.in_(recipe_ids))
        )
        recipes = result.scalars().all()

        logger.debug(f"Loaded {len(recipes)} of {len(recipe_ids)} requested recipes")

        return [
            RecipeRecord(
                id=recipe.id,
                servings=recipe.servings,
                ingredients=coerce_entries(recipe.ingredients),
            )
            for recipe in recipes
        ]

    async def selection_for_schedule(
        self, user_id: str, start_date: date, end_date: date
    ) -> list[SelectionItem]:
        """Build a selection from the meals scheduled in an inclusive date range."""
        result = await self.db.execute(
            select(MealSchedule)
            .where(MealSchedule.user_id == user_id)
            .where(MealSchedule.meal_date >= start_date)
            .where(MealSchedule.meal_date <= end_date)
            .order_by(MealSchedule.meal_date, MealSchedule.id)
        )
        schedules = result.scalars().all()

        return [
            SelectionItem(recipe_id=schedule.recipe_id, servings=schedule.servings or 1)
            for schedule in schedules
        ]


class CatalogRepository:
    """Loads the unit and ingredient reference catalogs."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_catalog(self) -> ReferenceCatalog:
        units = LabelCatalog()
        for unit in (await self.db.execute(select(Unit))).scalars():
            units.add(unit.key, de=unit.label_de, en=unit.label_en)

        ingredients = LabelCatalog()
        for ingredient in (await self.db.execute(select(Ingredient))).scalars():
            ingredients.add(ingredient.key, de=ingredient.label_de, en=ingredient.label_en)

        logger.debug(f"Loaded catalog: {len(units)} units, {len(ingredients)} ingredients")
        return ReferenceCatalog(units=units, ingredients=ingredients)


class SavedListRepository:
    """Persistence for shopping lists the user chose to keep."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(self, user_id: str, limit: int = 20) -> list[SavedShoppingList]:
        result = await self.db.execute(
            select(SavedShoppingList)
            .where(SavedShoppingList.user_id == user_id)
            .order_by(SavedShoppingList.created_at.desc(), SavedShoppingList.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def save(
        self,
        user_id: str,
        items: list[dict[str, Any]],
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> SavedShoppingList:
        saved = SavedShoppingList(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            items=items,
        )
        self.db.add(saved)
        await self.db.commit()
        await self.db.refresh(saved)

        logger.info(f"Saved shopping list {saved.id} with {len(items)} items")
        return saved
