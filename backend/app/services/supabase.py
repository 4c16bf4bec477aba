"""Supabase plan store.

Loads meal plans, product metadata and allergies, and parses rows into
typed snapshots. Ownership filtering happens inside the queries.
"""

import logging
from functools import lru_cache
from typing import Any, Optional

from supabase import create_client, Client

from app.config import get_settings
from app.models.shopping import (
    MealPlan,
    MealPlanRecipeAssignment,
    Product,
    ProductMeta,
    Recipe,
    RecipeIngredient,
)
from app.services.allergens import parse_allergen_tags
from app.services.units import to_grams

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase_client() -> Client:
    """Get Supabase client with service role key (admin access)."""
    settings = get_settings()
    if not settings.plan_store_configured:
        raise RuntimeError("Supabase plan store is not configured")
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
    )


# Table names (match the web app's schema)
TABLES = {
    "meal_plans": "meal_plans",
    "meal_plan_recipes": "meal_plan_recipes",
    "recipes": "recipes",
    "recipe_ingredients": "recipe_ingredients",
    "products": "products",
    "dietary_info": "product_dietary_info",
    "user_allergies": "user_allergies",
}

MEAL_PLAN_SELECT = (
    "*, "
    f"recipes:{TABLES['meal_plan_recipes']}(*, "
    f"recipe:{TABLES['recipes']}(*, "
    f"ingredients:{TABLES['recipe_ingredients']}(*, "
    f"product:{TABLES['products']}(*, "
    f"dietary_info:{TABLES['dietary_info']}(allergens)))))"
)


# ============================================================================
# Loaders
# ============================================================================


async def fetch_meal_plans(plan_ids: list[str], user_id: str) -> list[MealPlan]:
    """Load the requested plans owned by the user, with recipes and ingredients.

    Plans that do not exist or belong to someone else are simply absent.
    """
    client = get_supabase_client()
    result = (
        client.table(TABLES["meal_plans"])
        .select(MEAL_PLAN_SELECT)
        .in_("id", plan_ids)
        .eq("user_id", user_id)
        .eq("recipes.recipe.ingredients.is_optional", False)
        .execute()
    )

    plans = [parse_meal_plan(row) for row in (result.data or [])]
    logger.info(f"Loaded {len(plans)}/{len(plan_ids)} meal plans for {user_id[:8]}")
    return plans


async def fetch_product_meta(product_ids: Optional[list[str]] = None) -> dict[str, ProductMeta]:
    """Load package metadata keyed by product ID."""
    client = get_supabase_client()
    query = client.table(TABLES["products"]).select(
        "id, package_size, is_always_owned, grams_per_piece"
    )
    if product_ids:
        query = query.in_("id", product_ids)
    result = query.execute()

    return {row["id"]: parse_product_meta(row) for row in (result.data or [])}


async def fetch_user_allergens(user_id: str) -> set[str]:
    """Load the allergen tags a user has declared."""
    client = get_supabase_client()
    result = (
        client.table(TABLES["user_allergies"])
        .select("allergen")
        .eq("user_id", user_id)
        .execute()
    )
    return {row["allergen"] for row in (result.data or [])}


# ============================================================================
# Row Parsing
# ============================================================================


def parse_meal_plan(row: dict[str, Any]) -> MealPlan:
    """Build a MealPlan snapshot from a nested meal plan row."""
    return MealPlan(
        id=row["id"],
        user_id=row["user_id"],
        name=row.get("name"),
        start_date=row["start_date"],
        end_date=row["end_date"],
        assignments=[_parse_assignment(r) for r in row.get("recipes") or []],
    )


def _parse_assignment(row: dict[str, Any]) -> MealPlanRecipeAssignment:
    recipe_row = row["recipe"]
    return MealPlanRecipeAssignment(
        id=row.get("id"),
        date=row["date"],
        meal_type=row["meal_type"],
        servings=row["servings"],
        recipe=Recipe(
            id=recipe_row["id"],
            name=recipe_row.get("name"),
            servings=recipe_row["servings"],
            ingredients=[_parse_ingredient(i) for i in recipe_row.get("ingredients") or []],
        ),
    )


def _parse_ingredient(row: dict[str, Any]) -> RecipeIngredient:
    product_row = row["product"]
    amount = float(row.get("amount") or 0)
    unit = row.get("unit") or "g"

    # Rows without a stored gram amount are converted from the declared unit
    grams = row.get("amount_in_grams")
    if grams is None:
        grams = to_grams(amount, unit, product_row.get("grams_per_piece"))

    return RecipeIngredient(
        product_id=row["product_id"],
        product=_parse_product(product_row),
        amount=amount,
        unit=unit,
        amount_in_grams=float(grams),
        is_optional=bool(row.get("is_optional", False)),
        group_name=row.get("group_name"),
        preparation=row.get("preparation"),
        notes=row.get("notes"),
    )


def _parse_product(row: dict[str, Any]) -> Product:
    dietary = row.get("dietary_info")
    # One-to-one embeds come back as an object or a single-element list
    if isinstance(dietary, list):
        dietary = dietary[0] if dietary else None

    return Product(
        id=row.get("id"),
        name=row["name"],
        category=row.get("category") or "other",
        default_unit=row.get("default_unit") or "g",
        allergens=parse_allergen_tags(dietary.get("allergens") if dietary else None),
    )


def parse_product_meta(row: dict[str, Any]) -> ProductMeta:
    """Build package metadata from a product row."""
    return ProductMeta(
        id=row["id"],
        package_size=row.get("package_size"),
        is_always_owned=bool(row.get("is_always_owned", False)),
        grams_per_piece=row.get("grams_per_piece"),
    )
