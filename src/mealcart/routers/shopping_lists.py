"""API routes for shopping list generation and saved lists."""

from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from mealcart.config import get_settings
from mealcart.database import get_db
from mealcart.logging_config import LoggingContext, get_logger
from mealcart.normalize.units import ReferenceCatalog
from mealcart.plan.shopping_list import SelectionItem, ShoppingList, ShoppingListService
from mealcart.repository import CatalogRepository, RecipeRepository, SavedListRepository

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/shopping-lists", tags=["shopping-lists"])


# =============================================================================
# Request/Response Schemas
# =============================================================================


class SelectionItemSchema(BaseModel):
    """A recipe to include, at a requested serving count."""

    recipe_id: int
    servings: int = Field(ge=1, description="Requested servings")


class GenerateShoppingListRequest(BaseModel):
    """Request to build a shopping list from selected recipes."""

    items: list[SelectionItemSchema] = Field(default_factory=list)
    language: str | None = Field(None, description="Display language for catalog labels")


class ShoppingListItemSchema(BaseModel):
    """Single merged line of the shopping list."""

    raw: str
    quantity: float | None = None
    unit_key: str | None = None
    ingredient_key: str | None = None
    name: str | None = None
    recipe_sources: list[int] = Field(default_factory=list)

    class Config:
        from_attributes = True


class ShoppingListResponse(BaseModel):
    """Generated shopping list."""

    language: str
    items: list[ShoppingListItemSchema]
    excluded_recipe_ids: list[int] = Field(default_factory=list)
    skipped_lines: list[str] = Field(default_factory=list)
    start: date | None = None
    end: date | None = None


class SaveShoppingListRequest(BaseModel):
    """Request to keep a generated shopping list."""

    start_date: date | None = None
    end_date: date | None = None
    items: list[ShoppingListItemSchema] = Field(default_factory=list)


class SavedShoppingListResponse(BaseModel):
    """A stored shopping list."""

    id: int
    start_date: date | None = None
    end_date: date | None = None
    items: list[dict[str, Any]]
    created_at: str


class SavedShoppingListsResponse(BaseModel):
    """Most recent saved shopping lists of a user."""

    lists: list[SavedShoppingListResponse]
    total: int


# =============================================================================
# Dependencies
# =============================================================================


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header(description="Authenticated user ID")] = None,
) -> str:
    """Identity of the caller, set by the authentication layer."""
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    return x_user_id


def resolve_language(language: str | None) -> str:
    """Validate a requested display language, defaulting from settings."""
    settings = get_settings()
    if language is None:
        return settings.default_language
    if language not in settings.languages:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unsupported language '{language}', expected one of {settings.languages}",
        )
    return language


async def get_recipe_repository(db: AsyncSession = Depends(get_db)) -> RecipeRepository:
    return RecipeRepository(db)


async def get_catalog(db: AsyncSession = Depends(get_db)) -> ReferenceCatalog:
    return await CatalogRepository(db).load_catalog()


async def get_shopping_list_service(
    recipes: RecipeRepository = Depends(get_recipe_repository),
    catalog: ReferenceCatalog = Depends(get_catalog),
) -> ShoppingListService:
    return ShoppingListService(recipes, catalog)


async def get_saved_list_repository(db: AsyncSession = Depends(get_db)) -> SavedListRepository:
    return SavedListRepository(db)


def _to_response(
    shopping_list: ShoppingList,
    start: date | None = None,
    end: date | None = None,
) -> ShoppingListResponse:
    return ShoppingListResponse(
        language=shopping_list.language,
        items=[ShoppingListItemSchema.model_validate(item) for item in shopping_list.items],
        excluded_recipe_ids=shopping_list.excluded_recipe_ids,
        skipped_lines=shopping_list.skipped_lines,
        start=start,
        end=end,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/generate", response_model=ShoppingListResponse)
async def generate_shopping_list(
    request: GenerateShoppingListRequest,
    user_id: str = Depends(get_current_user_id),
    service: ShoppingListService = Depends(get_shopping_list_service),
) -> ShoppingListResponse:
    """
    Build a consolidated shopping list from selected recipes.

    Each item is scaled to its requested servings. Recipes the user has not
    saved are left out and reported in excluded_recipe_ids.
    """
    language = resolve_language(request.language)
    selection = [
        SelectionItem(recipe_id=item.recipe_id, servings=item.servings) for item in request.items
    ]

    with LoggingContext(user_id=user_id):
        shopping_list = await service.generate(user_id, selection, language)

    return _to_response(shopping_list)


@router.get("/generate", response_model=ShoppingListResponse)
async def generate_scheduled_shopping_list(
    start: Annotated[date | None, Query(description="First day (YYYY-MM-DD)")] = None,
    end: Annotated[date | None, Query(description="Last day (YYYY-MM-DD)")] = None,
    language: Annotated[str | None, Query(description="Display language")] = None,
    user_id: str = Depends(get_current_user_id),
    recipes: RecipeRepository = Depends(get_recipe_repository),
    service: ShoppingListService = Depends(get_shopping_list_service),
) -> ShoppingListResponse:
    """Build a shopping list for the meals scheduled in a date range."""
    start_date = start or date.today()
    end_date = end or start_date

    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end must not be before start",
        )

    display_language = resolve_language(language)

    with LoggingContext(user_id=user_id):
        selection = await recipes.selection_for_schedule(user_id, start_date, end_date)
        logger.info(f"Found {len(selection)} scheduled meals between {start_date} and {end_date}")
        shopping_list = await service.generate(user_id, selection, display_language)

    return _to_response(shopping_list, start=start_date, end=end_date)


@router.get("/", response_model=SavedShoppingListsResponse)
async def list_saved_shopping_lists(
    user_id: str = Depends(get_current_user_id),
    repository: SavedListRepository = Depends(get_saved_list_repository),
) -> SavedShoppingListsResponse:
    """List the most recent saved shopping lists."""
    saved = await repository.list_for_user(user_id, limit=get_settings().saved_lists_limit)

    lists = [
        SavedShoppingListResponse(
            id=entry.id,
            start_date=entry.start_date,
            end_date=entry.end_date,
            items=entry.items or [],
            created_at=entry.created_at.isoformat(),
        )
        for entry in saved
    ]
    return SavedShoppingListsResponse(lists=lists, total=len(lists))


@router.post("/", response_model=SavedShoppingListResponse, status_code=status.HTTP_201_CREATED)
async def save_shopping_list(
    request: SaveShoppingListRequest,
    user_id: str = Depends(get_current_user_id),
    repository: SavedListRepository = Depends(get_saved_list_repository),
) -> SavedShoppingListResponse:
    """Keep a generated shopping list."""
    if (
        request.start_date is not None
        and request.end_date is not None
        and request.end_date < request.start_date
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must not be before start_date",
        )

    with LoggingContext(user_id=user_id):
        saved = await repository.save(
            user_id,
            [item.model_dump() for item in request.items],
            start_date=request.start_date,
            end_date=request.end_date,
        )

    return SavedShoppingListResponse(
        id=saved.id,
        start_date=saved.start_date,
        end_date=saved.end_date,
        items=saved.items or [],
        created_at=saved.created_at.isoformat(),
    )
