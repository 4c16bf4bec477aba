"""Shopping list Pydantic models.

Input records (products, recipes, meal plans) are snapshots handed over by
the plan store; output records are derived per request and never persisted.
JSON uses camelCase keys; Python code uses snake_case attributes.
"""

from __future__ import annotations

import datetime
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductUnit(str, Enum):
    """Units a recipe ingredient can be declared in."""

    GRAM = "g"
    MILLILITER = "ml"
    PIECE = "pcs"
    TABLESPOON = "tbsp"
    TEASPOON = "tsp"


class MealType(str, Enum):
    """Meal slots in a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


# ============================================================================
# Catalog & Plan Snapshots (input)
# ============================================================================


class Product(CamelModel):
    """Product snapshot joined onto a recipe ingredient."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: str
    category: str = "other"
    default_unit: str = ProductUnit.GRAM.value  # "g", "ml" or "pcs"
    allergens: tuple[str, ...] = ()


class ProductMeta(CamelModel):
    """Package metadata fetched separately from the recipe join."""

    model_config = ConfigDict(frozen=True)

    id: str
    package_size: Optional[float] = None  # grams per standard purchase unit
    is_always_owned: bool = False
    grams_per_piece: Optional[float] = None


class RecipeIngredient(CamelModel):
    """A single ingredient line of a recipe."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    product: Product
    amount: float = 0
    unit: str = ProductUnit.GRAM.value
    amount_in_grams: float  # authoritative quantity for aggregation
    is_optional: bool = False

    # Presentation only
    group_name: Optional[str] = None
    preparation: Optional[str] = None
    notes: Optional[str] = None


class Recipe(CamelModel):
    """A recipe with the serving count its ingredient amounts were authored for."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    servings: int
    ingredients: tuple[RecipeIngredient, ...] = ()


class MealPlanRecipeAssignment(CamelModel):
    """A recipe scheduled on a day/meal of a plan with the servings wanted."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    date: datetime.date
    meal_type: MealType
    servings: int
    recipe: Recipe


class MealPlan(CamelModel):
    """A user's meal plan over an inclusive date range."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    name: Optional[str] = None
    start_date: date
    end_date: date
    assignments: tuple[MealPlanRecipeAssignment, ...] = ()


# ============================================================================
# Derived Shopping List (output)
# ============================================================================


class ShoppingListItem(CamelModel):
    """One product on the shopping list, summed across the aggregation scope."""

    product_id: str
    product_name: str
    category: str
    unit: str

    # Amounts
    total_grams: float = 0
    rounded_grams: float = 0
    packages_needed: Optional[int] = None
    package_size: Optional[float] = None
    grams_per_piece: Optional[float] = None

    # Flags
    is_always_owned: bool = False
    is_checked: bool = False  # always-owned staples start checked
    is_excluded: bool = False
    exclude_reason: Optional[str] = None
    allergens: list[str] = Field(default_factory=list)


class ConsolidatedShoppingListItem(ShoppingListItem):
    """Shopping list item that remembers which plans needed it."""

    from_plans: list[str] = Field(default_factory=list)


class MealPlanSummary(CamelModel):
    """Short description of a plan included in a consolidated list."""

    id: str
    name: Optional[str] = None
    start_date: date
    end_date: date


class ShoppingList(CamelModel):
    """Shopping list for a single meal plan."""

    meal_plan_id: str
    meal_plan_name: Optional[str] = None
    start_date: date
    end_date: date

    total_items: int = 0
    excluded_items: int = 0

    items: list[ShoppingListItem] = Field(default_factory=list)
    grouped_by_category: dict[str, list[ShoppingListItem]] = Field(default_factory=dict)


class ConsolidatedShoppingList(CamelModel):
    """Shopping list aggregated jointly over several meal plans."""

    meal_plan_ids: list[str]
    meal_plans: list[MealPlanSummary] = Field(default_factory=list)
    start_date: date
    end_date: date

    total_items: int = 0
    excluded_items: int = 0

    items: list[ConsolidatedShoppingListItem] = Field(default_factory=list)
    grouped_by_category: dict[str, list[ConsolidatedShoppingListItem]] = Field(
        default_factory=dict
    )


class ConsolidatedShoppingListRequest(CamelModel):
    """Request to build one list from several meal plans."""

    meal_plan_ids: list[str] = Field(min_length=1)


class ExportFormat(str, Enum):
    """Shopping list export formats."""

    TEXT = "txt"
    CSV = "csv"
    JSON = "json"
