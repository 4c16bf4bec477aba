"""Pydantic models for the meal-planner API."""

from .shopping import (
    ConsolidatedShoppingList,
    ConsolidatedShoppingListItem,
    ConsolidatedShoppingListRequest,
    ExportFormat,
    MealPlan,
    MealPlanRecipeAssignment,
    MealPlanSummary,
    MealType,
    Product,
    ProductMeta,
    ProductUnit,
    Recipe,
    RecipeIngredient,
    ShoppingList,
    ShoppingListItem,
)

__all__ = [
    # Catalog & plans
    "MealPlan",
    "MealPlanRecipeAssignment",
    "MealType",
    "Product",
    "ProductMeta",
    "ProductUnit",
    "Recipe",
    "RecipeIngredient",
    # Shopping lists
    "ConsolidatedShoppingList",
    "ConsolidatedShoppingListItem",
    "ConsolidatedShoppingListRequest",
    "ExportFormat",
    "MealPlanSummary",
    "ShoppingList",
    "ShoppingListItem",
]
