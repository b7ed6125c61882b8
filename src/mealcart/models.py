"""SQLAlchemy database models."""

from datetime import date, datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mealcart.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """User account, owned by the authentication layer."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    saved_recipes: Mapped[list["UserRecipe"]] = relationship("UserRecipe", back_populates="user")


class Recipe(Base):
    """Recipe with its stored ingredient entries."""

    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    servings: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # Each element is a free-text line or {"ingredient_key", "unit_key", "quantity"}
    ingredients: Mapped[list] = mapped_column(JSON, default=list)
    created_by_user_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("users.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    saved_by: Mapped[list["UserRecipe"]] = relationship("UserRecipe", back_populates="recipe")


class UserRecipe(Base):
    """Save relation between a user and a recipe."""

    __tablename__ = "user_recipes"

    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), primary_key=True)
    recipe_id: Mapped[int] = mapped_column(Integer, ForeignKey("recipes.id"), primary_key=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False)
    saved_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    user: Mapped["User"] = relationship("User", back_populates="saved_recipes")
    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="saved_by")

    __table_args__ = (Index("idx_user_recipes_user", "user_id"),)


class Unit(Base):
    """Reference catalog entry for a canonical unit."""

    __tablename__ = "units"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    label_de: Mapped[str | None] = mapped_column(String(100), nullable=True)
    label_en: Mapped[str | None] = mapped_column(String(100), nullable=True)


class Ingredient(Base):
    """Reference catalog entry for a known ingredient."""

    __tablename__ = "ingredients"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    label_de: Mapped[str | None] = mapped_column(String(200), nullable=True)
    label_en: Mapped[str | None] = mapped_column(String(200), nullable=True)


class MealSchedule(Base):
    """A recipe scheduled for a meal on a given date."""

    __tablename__ = "meal_schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False)
    recipe_id: Mapped[int] = mapped_column(Integer, ForeignKey("recipes.id"), nullable=False)
    meal_date: Mapped[date] = mapped_column(Date, nullable=False)
    meal_type: Mapped[str] = mapped_column(String(50), nullable=False)  # breakfast, lunch, dinner
    servings: Mapped[int | None] = mapped_column(Integer, default=1, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    __table_args__ = (Index("idx_meal_schedules_user_date", "user_id", "meal_date"),)


class SavedShoppingList(Base):
    """A generated shopping list the user chose to keep."""

    __tablename__ = "shopping_lists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    items: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    __table_args__ = (Index("idx_shopping_lists_user_created", "user_id", "created_at"),)
