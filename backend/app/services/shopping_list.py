"""
Shopping list generation service.

Builds shopping lists from one or several meal plans:
1. Aggregate non-optional ingredient grams per product
2. Round each total up to whole packages
3. Flag items containing the user's allergens
4. Sort and group by category

The builders are pure functions of their inputs. The generate_* coroutines
fetch those inputs from the plan store first.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Mapping, Optional, Type, TypeVar

from app.config import get_settings
from app.models.shopping import (
    ConsolidatedShoppingList,
    ConsolidatedShoppingListItem,
    MealPlan,
    MealPlanSummary,
    ProductMeta,
    ShoppingList,
    ShoppingListItem,
)
from app.services.aggregation import AggregatedQuantity, aggregate_meal_plans
from app.services.allergens import DEFAULT_EXCLUDE_REASON, classify
from app.services.categories import get_name_collator, group_by_category, sort_items
from app.services.errors import NotFoundError
from app.services.rounding import round_to_packages
from app.services.supabase import fetch_meal_plans, fetch_product_meta, fetch_user_allergens
from app.services.units import display_unit

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=ShoppingListItem)

DEFAULT_LOCALE = "ru"


# ============================================================================
# Item Building
# ============================================================================

def _positive(value: Optional[float]) -> Optional[float]:
    """Package metadata of zero or below means "unknown"."""
    return value if value and value > 0 else None


def _build_item(
    quantity: AggregatedQuantity,
    meta: Optional[ProductMeta],
    user_allergens: frozenset[str],
    exclude_reason: str,
    item_cls: Type[ItemT],
) -> ItemT:
    """Turn an aggregated quantity into a priced-out, flagged list item."""
    product = quantity.product

    package_size = _positive(meta.package_size) if meta else None
    grams_per_piece = _positive(meta.grams_per_piece) if meta else None
    is_always_owned = meta.is_always_owned if meta else False

    rounding = round_to_packages(quantity.total_grams, package_size)
    verdict = classify(product.allergens, user_allergens, reason=exclude_reason)

    fields = dict(
        product_id=quantity.product_id,
        product_name=product.name,
        category=product.category,
        unit=display_unit(product),
        total_grams=quantity.total_grams,
        rounded_grams=rounding.rounded_grams,
        packages_needed=rounding.packages_needed,
        package_size=package_size,
        grams_per_piece=grams_per_piece,
        is_always_owned=is_always_owned,
        is_checked=is_always_owned,
        is_excluded=verdict.is_excluded,
        exclude_reason=verdict.reason,
        allergens=list(product.allergens),
    )
    if issubclass(item_cls, ConsolidatedShoppingListItem):
        fields["from_plans"] = list(quantity.from_plans)

    return item_cls(**fields)


def _build_items(
    plans: Iterable[MealPlan],
    user_allergens: Iterable[str],
    product_meta: Mapping[str, ProductMeta],
    locale: str,
    exclude_reason: str,
    item_cls: Type[ItemT],
) -> list[ItemT]:
    needs = aggregate_meal_plans(plans)
    allergens = frozenset(user_allergens)

    items = [
        _build_item(quantity, product_meta.get(product_id), allergens, exclude_reason, item_cls)
        for product_id, quantity in needs.items()
    ]
    return sort_items(items, get_name_collator(locale))


# ============================================================================
# Builders
# ============================================================================

def build_shopping_list(
    plan: MealPlan,
    user_allergens: Iterable[str],
    product_meta: Mapping[str, ProductMeta],
    locale: str = DEFAULT_LOCALE,
    exclude_reason: str = DEFAULT_EXCLUDE_REASON,
) -> ShoppingList:
    """Build the shopping list for a single meal plan.

    Allergen-excluded items stay in the list, flagged, and are counted in
    both total_items and excluded_items.
    """
    items = _build_items(
        [plan], user_allergens, product_meta, locale, exclude_reason, ShoppingListItem
    )
    excluded = sum(1 for item in items if item.is_excluded)

    logger.info(f"Built shopping list for plan {plan.id}: {len(items)} items, {excluded} excluded")

    return ShoppingList(
        meal_plan_id=plan.id,
        meal_plan_name=plan.name,
        start_date=plan.start_date,
        end_date=plan.end_date,
        total_items=len(items),
        excluded_items=excluded,
        items=items,
        grouped_by_category=group_by_category(items),
    )


def build_consolidated_shopping_list(
    plans: Iterable[MealPlan],
    user_allergens: Iterable[str],
    product_meta: Mapping[str, ProductMeta],
    requested_ids: Optional[list[str]] = None,
    locale: str = DEFAULT_LOCALE,
    exclude_reason: str = DEFAULT_EXCLUDE_REASON,
) -> ConsolidatedShoppingList:
    """Build one shopping list jointly over several meal plans.

    `plans` must already be filtered to the requesting user's plans; any
    requested ID missing from it is treated as nonexistent. A plan listed
    twice is counted once.

    Raises:
        NotFoundError: If no plans remain.
    """
    unique: dict[str, MealPlan] = {}
    for plan in plans:
        unique.setdefault(plan.id, plan)
    found = list(unique.values())

    if not found:
        raise NotFoundError("Meal plans", requested_ids)

    if requested_ids:
        missing = [pid for pid in requested_ids if pid not in unique]
        if missing:
            logger.info(f"Ignoring {len(missing)} meal plans not available to the user")

    items = _build_items(
        found, user_allergens, product_meta, locale, exclude_reason,
        ConsolidatedShoppingListItem,
    )
    excluded = sum(1 for item in items if item.is_excluded)

    logger.info(
        f"Built consolidated shopping list over {len(found)} plans: "
        f"{len(items)} items, {excluded} excluded"
    )

    return ConsolidatedShoppingList(
        meal_plan_ids=[plan.id for plan in found],
        meal_plans=[
            MealPlanSummary(
                id=plan.id,
                name=plan.name,
                start_date=plan.start_date,
                end_date=plan.end_date,
            )
            for plan in found
        ],
        start_date=min(plan.start_date for plan in found),
        end_date=max(plan.end_date for plan in found),
        total_items=len(items),
        excluded_items=excluded,
        items=items,
        grouped_by_category=group_by_category(items),
    )


# ============================================================================
# Generation (plan store + builders)
# ============================================================================

async def generate_shopping_list(plan_id: str, user_id: str) -> ShoppingList:
    """Fetch a user's meal plan and build its shopping list.

    Raises:
        NotFoundError: If the plan does not exist or is not the user's.
        ValidationError: If the plan's recipes hold invalid quantities.
    """
    settings = get_settings()

    plans, product_meta, user_allergens = await asyncio.gather(
        fetch_meal_plans([plan_id], user_id),
        fetch_product_meta(),
        fetch_user_allergens(user_id),
    )
    if not plans:
        raise NotFoundError("Meal plan", [plan_id])

    return build_shopping_list(
        plans[0],
        user_allergens,
        product_meta,
        locale=settings.shopping_locale,
        exclude_reason=settings.allergy_exclude_reason,
    )


async def generate_consolidated_shopping_list(
    plan_ids: list[str],
    user_id: str,
) -> ConsolidatedShoppingList:
    """Fetch several of a user's meal plans and build one joint list.

    Raises:
        NotFoundError: If none of the plans belong to the user.
        ValidationError: If any plan's recipes hold invalid quantities.
    """
    settings = get_settings()

    plans, product_meta, user_allergens = await asyncio.gather(
        fetch_meal_plans(plan_ids, user_id),
        fetch_product_meta(),
        fetch_user_allergens(user_id),
    )

    return build_consolidated_shopping_list(
        plans,
        user_allergens,
        product_meta,
        requested_ids=plan_ids,
        locale=settings.shopping_locale,
        exclude_reason=settings.allergy_exclude_reason,
    )
