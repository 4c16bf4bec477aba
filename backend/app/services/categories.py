"""
Category ordering and grouping for shopping lists.

Items are ordered by a fixed aisle-like category sequence, then by product
name using a locale-aware collation key. Unknown categories go last.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from functools import lru_cache
from typing import Callable, Iterable, Sequence, TypeVar

from pyuca import Collator

from app.models.shopping import ShoppingListItem

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=ShoppingListItem)
SortKey = Callable[[str], object]


# ============================================================================
# Category Tables
# ============================================================================

CATEGORY_ORDER: tuple[str, ...] = (
    "vegetables",
    "fruits",
    "meat",
    "fish",
    "seafood",
    "dairy",
    "grains",
    "legumes",
    "oils",
    "spices",
    "herbs",
    "sauces",
    "canned",
    "baking",
    "sweeteners",
    "nuts",
    "seeds",
    "dried_fruits",
)

_CATEGORY_RANK = {category: rank for rank, category in enumerate(CATEGORY_ORDER)}
UNKNOWN_CATEGORY_RANK = len(CATEGORY_ORDER)

CATEGORY_LABELS: dict[str, str] = {
    "vegetables": "Овощи",
    "fruits": "Фрукты",
    "meat": "Мясо",
    "fish": "Рыба",
    "seafood": "Морепродукты",
    "dairy": "Молочные продукты",
    "grains": "Крупы и злаки",
    "legumes": "Бобовые",
    "oils": "Масла",
    "spices": "Специи",
    "herbs": "Зелень",
    "sauces": "Соусы",
    "canned": "Консервы",
    "baking": "Для выпечки",
    "sweeteners": "Сладкое",
    "nuts": "Орехи",
    "seeds": "Семена",
    "dried_fruits": "Сухофрукты",
    "condiments": "Приправы",
    "liquids": "Жидкости",
    "dairy_alternatives": "Растительные альтернативы",
    "protein": "Белок",
    "sweets": "Сладости",
}


def category_rank(category: str) -> int:
    """Position of a category in the shopping order; unknowns sort last."""
    return _CATEGORY_RANK.get(category, UNKNOWN_CATEGORY_RANK)


def category_label(category: str) -> str:
    """Localized label for a category, or the raw key when none is known."""
    return CATEGORY_LABELS.get(category, category)


# ============================================================================
# Name Collation
# ============================================================================

# Locales compared by raw code point instead of the Unicode Collation Algorithm
BINARY_LOCALES = {"c", "posix", "binary"}


@lru_cache
def _uca_collator() -> Collator:
    """Load the DUCET table once per process."""
    logger.info("Loading Unicode collation table")
    return Collator()


@lru_cache
def get_name_collator(locale: str) -> SortKey:
    """Sort-key function for product names in the given locale.

    Real locales use UCA keys, which order Cyrillic (including "ё" next
    to "е") and Latin alphabets naturally and ignore case at the primary
    level. "C"/"binary" fall back to case-folded code-point order.
    """
    if locale.lower() in BINARY_LOCALES:
        return str.casefold
    return _uca_collator().sort_key


# ============================================================================
# Sorting & Grouping
# ============================================================================


def sort_items(items: Iterable[ItemT], name_key: SortKey) -> list[ItemT]:
    """Sort items by category rank, then product name.

    The sort is stable, so the result depends only on the input order.
    """
    return sorted(
        items,
        key=lambda item: (category_rank(item.category), name_key(item.product_name)),
    )


def group_by_category(items: Sequence[ItemT]) -> dict[str, list[ItemT]]:
    """Group already-sorted items by category, keeping their order."""
    grouped: dict[str, list[ItemT]] = defaultdict(list)
    for item in items:
        grouped[item.category].append(item)
    return dict(grouped)
