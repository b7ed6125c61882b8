"""Pytest configuration and shared fixtures."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import mealcart.models  # noqa: F401
from mealcart.database import Base
from mealcart.normalize.units import LabelCatalog, ReferenceCatalog
from mealcart.plan.shopping_list import RecipeRecord

# =============================================================================
# Recipe Source Fixtures
# =============================================================================


class InMemoryRecipeSource:
    """Recipe source backed by dicts, recording every lookup."""

    def __init__(
        self,
        recipes: list[RecipeRecord] | None = None,
        saved: dict[str, set[int]] | None = None,
    ):
        self.recipes = {recipe.id: recipe for recipe in recipes or []}
        self.saved = saved or {}
        self.calls: list[tuple[str, list[int]]] = []

    async def load_owned_recipes(self, user_id: str, recipe_ids: list[int]) -> list[RecipeRecord]:
        self.calls.append((user_id, list(recipe_ids)))
        owned = self.saved.get(user_id, set())
        return [
            self.recipes[recipe_id]
            for recipe_id in recipe_ids
            if recipe_id in owned and recipe_id in self.recipes
        ]


@pytest.fixture
def make_recipe_source():
    """Factory for in-memory recipe sources."""

    def _make(recipes: list[RecipeRecord], saved: dict[str, set[int]] | None = None):
        if saved is None:
            saved = {"user-1": {recipe.id for recipe in recipes}}
        return InMemoryRecipeSource(recipes, saved)

    return _make


# =============================================================================
# Reference Catalog Fixtures
# =============================================================================


@pytest.fixture
def reference_catalog() -> ReferenceCatalog:
    """Small unit and ingredient catalog in German and English."""
    units = LabelCatalog()
    units.add("g", de="g", en="g")
    units.add("kg", de="kg", en="kg")
    units.add("ml", de="ml", en="ml")
    units.add("cup", de="Tasse", en="cup")
    units.add("tbsp", de="EL", en="tbsp")
    units.add("stk", de="Stück")

    ingredients = LabelCatalog()
    ingredients.add("flour", de="Mehl", en="flour")
    ingredients.add("milk", de="Milch", en="milk")
    ingredients.add("egg", de="Ei", en="egg")
    ingredients.add("sugar", de="Zucker")

    return ReferenceCatalog(units=units, ingredients=ingredients)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def async_session():
    """In-memory SQLite session with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()
