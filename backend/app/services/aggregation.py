"""
Quantity aggregation across meal plans.

Walks (plan, assignment, ingredient) tuples and sums the grams each
product needs, scaled by serving ratio. Aggregation is keyed by product
alone, so the same product used on different days, in different meals or
in different plans collapses into one running total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from app.models.shopping import MealPlan, MealPlanRecipeAssignment, Product
from app.services.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class AggregatedQuantity:
    """Running total for one product within an aggregation scope."""

    product_id: str
    product: Product  # first-seen snapshot
    total_grams: float = 0.0
    from_plans: list[str] = field(default_factory=list)


def serving_ratio(assignment: MealPlanRecipeAssignment) -> float:
    """Scale factor from a recipe's authored servings to the servings planned.

    Raises:
        ValidationError: If either serving count is not positive.
    """
    recipe = assignment.recipe
    if recipe.servings <= 0:
        raise ValidationError(
            f"recipe servings must be positive (recipe {recipe.id} has {recipe.servings})"
        )
    if assignment.servings <= 0:
        raise ValidationError(
            f"planned servings must be positive (recipe {recipe.id} planned "
            f"for {assignment.servings})"
        )
    return assignment.servings / recipe.servings


def aggregate_meal_plans(plans: Iterable[MealPlan]) -> dict[str, AggregatedQuantity]:
    """Sum non-optional ingredient grams per product over all plans.

    Raw totals are never rounded here; rounding happens once per item
    afterwards. The first ingredient seen for a product supplies its
    presentation snapshot (name, category, unit, allergens); later
    snapshots are ignored.

    Returns:
        Mapping of product_id to its aggregated quantity, in first-seen order.

    Raises:
        ValidationError: On non-positive servings or negative ingredient grams.
            The whole aggregation fails rather than dropping the offender.
    """
    needs: dict[str, AggregatedQuantity] = {}

    for plan in plans:
        for assignment in plan.assignments:
            ratio = serving_ratio(assignment)

            for ingredient in assignment.recipe.ingredients:
                if ingredient.is_optional:
                    continue
                if ingredient.amount_in_grams < 0:
                    raise ValidationError(
                        f"ingredient grams must not be negative "
                        f"(product {ingredient.product_id} in recipe {assignment.recipe.id})"
                    )

                grams_needed = ingredient.amount_in_grams * ratio
                entry = needs.get(ingredient.product_id)

                if entry is None:
                    entry = AggregatedQuantity(
                        product_id=ingredient.product_id,
                        product=ingredient.product,
                    )
                    needs[ingredient.product_id] = entry
                elif entry.product != ingredient.product:
                    logger.warning(
                        f"Product {ingredient.product_id} has differing snapshots across "
                        f"recipes; keeping the first ({entry.product.name!r})"
                    )

                entry.total_grams += grams_needed
                if plan.id not in entry.from_plans:
                    entry.from_plans.append(plan.id)

    return needs
