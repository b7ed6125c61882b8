"""Tests for the SQLAlchemy-backed recipe, catalog and saved list repositories."""

from datetime import date

import pytest

from mealcart.models import Ingredient, MealSchedule, Recipe, Unit, User, UserRecipe
from mealcart.normalize.entries import FreeTextEntry, StructuredEntry, entry_to_json
from mealcart.plan.shopping_list import SelectionItem, ShoppingListService
from mealcart.repository import CatalogRepository, RecipeRepository, SavedListRepository


async def _seed(session):
    """Two users, three recipes, one saved by each user, and a small catalog."""
    session.add_all(
        [
            User(id="user-1", email="one@example.com"),
            User(id="user-2", email="two@example.com"),
        ]
    )
    session.add_all(
        [
            Recipe(
                id=1,
                title="Pancakes",
                servings=4,
                ingredients=[
                    entry_to_json(StructuredEntry("flour", "g", 200.0)),
                    "500 ml milk",
                    "2 eggs",
                ],
            ),
            Recipe(
                id=2,
                title="Crepes",
                servings=None,
                ingredients=[
                    "250 ml milk",
                    {"ingredient_key": "flour", "unit_key": "g", "quantity": 100},
                ],
            ),
            Recipe(id=3, title="Bread", servings=1, ingredients=["1 kg flour"]),
        ]
    )
    session.add_all(
        [
            UserRecipe(user_id="user-1", recipe_id=1),
            UserRecipe(user_id="user-1", recipe_id=2),
            UserRecipe(user_id="user-2", recipe_id=3),
        ]
    )
    session.add_all(
        [
            Unit(key="g", label_de="g", label_en="g"),
            Unit(key="ml", label_de="ml", label_en="ml"),
            Ingredient(key="flour", label_de="Mehl", label_en="flour"),
        ]
    )
    await session.commit()


class TestRecipeRepository:
    """Tests for RecipeRepository."""

    @pytest.mark.asyncio
    async def test_load_owned_recipes_filters_by_save_relation(self, async_session):
        """Test that only recipes saved by the user are loaded."""
        await _seed(async_session)
        repository = RecipeRepository(async_session)

        recipes = await repository.load_owned_recipes("user-1", [1, 2, 3, 42])

        assert sorted(recipe.id for recipe in recipes) == [1, 2]

    @pytest.mark.asyncio
    async def test_load_owned_recipes_converts_entries(self, async_session):
        """Test that stored JSON becomes typed entries."""
        await _seed(async_session)
        repository = RecipeRepository(async_session)

        (recipe,) = await repository.load_owned_recipes("user-1", [1])

        assert recipe.servings == 4
        assert recipe.ingredients == [
            StructuredEntry("flour", "g", 200.0),
            FreeTextEntry("500 ml milk"),
            FreeTextEntry("2 eggs"),
        ]

    @pytest.mark.asyncio
    async def test_load_owned_recipes_empty_ids(self, async_session):
        """Test that no ids means no recipes."""
        repository = RecipeRepository(async_session)
        assert await repository.load_owned_recipes("user-1", []) == []

    @pytest.mark.asyncio
    async def test_selection_for_schedule(self, async_session):
        """Test building a selection from scheduled meals in a date range."""
        await _seed(async_session)
        async_session.add_all(
            [
                MealSchedule(
                    user_id="user-1",
                    recipe_id=1,
                    meal_date=date(2024, 3, 1),
                    meal_type="breakfast",
                    servings=2,
                ),
                MealSchedule(
                    user_id="user-1",
                    recipe_id=2,
                    meal_date=date(2024, 3, 3),
                    meal_type="dinner",
                    servings=None,
                ),
                MealSchedule(
                    user_id="user-1",
                    recipe_id=1,
                    meal_date=date(2024, 3, 4),
                    meal_type="dinner",
                    servings=4,
                ),
                MealSchedule(
                    user_id="user-2",
                    recipe_id=3,
                    meal_date=date(2024, 3, 2),
                    meal_type="lunch",
                    servings=1,
                ),
            ]
        )
        await async_session.commit()
        repository = RecipeRepository(async_session)

        selection = await repository.selection_for_schedule(
            "user-1", date(2024, 3, 1), date(2024, 3, 3)
        )

        assert selection == [
            SelectionItem(recipe_id=1, servings=2),
            SelectionItem(recipe_id=2, servings=1),
        ]


class TestCatalogRepository:
    """Tests for CatalogRepository."""

    @pytest.mark.asyncio
    async def test_load_catalog(self, async_session):
        """Test loading unit and ingredient labels."""
        await _seed(async_session)

        catalog = await CatalogRepository(async_session).load_catalog()

        assert catalog.ingredient_label("flour", "de") == "Mehl"
        assert catalog.unit_label("ml", "en") == "ml"
        assert catalog.unit_label("cup", "de") == "cup"


class TestSavedListRepository:
    """Tests for SavedListRepository."""

    @pytest.mark.asyncio
    async def test_save_and_list(self, async_session):
        """Test storing lists and reading back the newest first."""
        await _seed(async_session)
        repository = SavedListRepository(async_session)

        first = await repository.save("user-1", [{"raw": "salt"}])
        second = await repository.save(
            "user-1",
            [{"raw": "400 g Mehl"}],
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 7),
        )
        await repository.save("user-2", [{"raw": "1 kg flour"}])

        lists = await repository.list_for_user("user-1")

        assert [saved.id for saved in lists] == [second.id, first.id]
        assert lists[0].items == [{"raw": "400 g Mehl"}]
        assert lists[0].start_date == date(2024, 3, 1)

    @pytest.mark.asyncio
    async def test_list_limit(self, async_session):
        """Test that listing honors the limit."""
        await _seed(async_session)
        repository = SavedListRepository(async_session)
        for i in range(3):
            await repository.save("user-1", [{"raw": f"{i} eggs"}])

        assert len(await repository.list_for_user("user-1", limit=2)) == 2


class TestShoppingListFromDatabase:
    """End-to-end aggregation against the database repositories."""

    @pytest.mark.asyncio
    async def test_generate(self, async_session):
        """Test generating a list from saved recipes and the stored catalog."""
        await _seed(async_session)
        catalog = await CatalogRepository(async_session).load_catalog()
        service = ShoppingListService(RecipeRepository(async_session), catalog)

        shopping_list = await service.generate(
            "user-1",
            [
                SelectionItem(recipe_id=1, servings=2),
                SelectionItem(recipe_id=2, servings=3),
                SelectionItem(recipe_id=3, servings=1),
            ],
            "de",
        )

        lines = {
            (item.ingredient_key or item.name, item.unit_key): item for item in shopping_list.items
        }
        # Recipe 1 halved, recipe 2 unscaled (no base servings)
        assert lines[("flour", "g")].quantity == 200.0
        assert lines[("flour", "g")].raw == "200 g Mehl"
        assert lines[("milk", "ml")].quantity == 500.0
        assert lines[("eggs", None)].raw == "1 eggs"
        assert shopping_list.excluded_recipe_ids == [3]
