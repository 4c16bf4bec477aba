"""
Unit/quantity normalization.

Recipes declare ingredient amounts in the author's unit of choice; the
shopping list works on a single mass basis (grams). This module converts
declared amounts to grams and renders gram totals back for display.
"""

from __future__ import annotations

import math
from typing import Optional

from app.models.shopping import Product, ProductMeta, ProductUnit, RecipeIngredient
from app.services.errors import ValidationError

# Grams per unit for fixed-ratio units. Liquids are treated as water (1 ml == 1 g).
GRAMS_PER_UNIT: dict[str, float] = {
    ProductUnit.GRAM.value: 1.0,
    ProductUnit.MILLILITER.value: 1.0,
    ProductUnit.TABLESPOON.value: 15.0,
    ProductUnit.TEASPOON.value: 5.0,
}


def to_grams(amount: float, unit: str, grams_per_piece: Optional[float] = None) -> float:
    """Convert a declared ingredient amount to grams.

    Pieces use the product's piece weight when known; without one the
    amount is taken as grams, since a missing piece weight is ordinary
    catalog data rather than an error.

    Raises:
        ValidationError: If the amount is negative or the unit is unknown.
    """
    if amount < 0:
        raise ValidationError(f"ingredient amount must not be negative, got {amount}")

    unit = unit.lower().strip()
    if unit == ProductUnit.PIECE.value:
        if grams_per_piece and grams_per_piece > 0:
            return amount * grams_per_piece
        return float(amount)

    ratio = GRAMS_PER_UNIT.get(unit)
    if ratio is None:
        raise ValidationError(f"unknown ingredient unit: {unit!r}")
    return amount * ratio


def normalize_ingredient(
    ingredient: RecipeIngredient,
    meta: Optional[ProductMeta] = None,
) -> RecipeIngredient:
    """Return a copy of the ingredient with amount_in_grams recomputed."""
    grams_per_piece = meta.grams_per_piece if meta else None
    grams = to_grams(ingredient.amount, ingredient.unit, grams_per_piece)
    return ingredient.model_copy(update={"amount_in_grams": grams})


def format_amount(grams: float, unit: str, grams_per_piece: Optional[float] = None) -> str:
    """Format a gram quantity for display.

    >= 1000 renders in kg/l with one decimal; below that whole g/ml.
    Piece products with a known piece weight render as a piece count.
    """
    if unit == ProductUnit.PIECE.value and grams_per_piece and grams_per_piece > 0:
        pieces = math.ceil(grams / grams_per_piece)
        return f"{pieces} шт"
    if unit == ProductUnit.MILLILITER.value:
        if grams >= 1000:
            return f"{grams / 1000:.1f} л"
        return f"{_round_half_up(grams)} мл"
    if grams >= 1000:
        return f"{grams / 1000:.1f} кг"
    return f"{_round_half_up(grams)} г"


def _round_half_up(value: float) -> int:
    """Round to the nearest whole number, halves away from zero."""
    return int(math.floor(value + 0.5))


def display_unit(product: Product) -> str:
    """Unit a product is listed in on the shopping list."""
    return product.default_unit or ProductUnit.GRAM.value
