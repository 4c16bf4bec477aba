"""
Shopping list export.

Serializes a built shopping list as plain text (for messaging apps), CSV
or JSON. Every export leaves out allergen-excluded items and household
staples the user always has.
"""

from __future__ import annotations

from typing import Any

from app.models.shopping import ShoppingList, ShoppingListItem
from app.services.categories import category_label, group_by_category
from app.services.units import format_amount

CSV_HEADER = "Продукт,Категория,Количество,Единица,Упаковок"
DEFAULT_LIST_TITLE = "План питания"


def items_to_buy(shopping_list: ShoppingList) -> list[ShoppingListItem]:
    """Items the user actually has to purchase, in list order."""
    return [
        item for item in shopping_list.items
        if not item.is_excluded and not item.is_always_owned
    ]


def export_text(shopping_list: ShoppingList) -> str:
    """Plain-text list grouped under localized category headings."""
    lines = [f"Список покупок: {shopping_list.meal_plan_name or DEFAULT_LIST_TITLE}", ""]

    for category, items in group_by_category(items_to_buy(shopping_list)).items():
        lines.append(f"{category_label(category)}:")
        for item in items:
            amount = format_amount(item.rounded_grams, item.unit, item.grams_per_piece)
            package_info = f" ({item.packages_needed} уп.)" if item.packages_needed else ""
            lines.append(f"  - {item.product_name}: {amount}{package_info}")
        lines.append("")

    return "\n".join(lines)


def export_csv(shopping_list: ShoppingList) -> str:
    """CSV with one quoted row per item to buy."""
    lines = [CSV_HEADER]
    for item in items_to_buy(shopping_list):
        lines.append(",".join([
            _quote(item.product_name),
            _quote(category_label(item.category)),
            _format_number(item.rounded_grams),
            item.unit,
            str(item.packages_needed) if item.packages_needed else "",
        ]))
    return "\n".join(lines)


def export_json(shopping_list: ShoppingList) -> dict[str, Any]:
    """JSON-ready dict with flat and grouped items, without product IDs."""
    items = items_to_buy(shopping_list)

    def dump(item: ShoppingListItem) -> dict[str, Any]:
        return item.model_dump(mode="json", by_alias=True, exclude={"product_id"})

    return {
        "mealPlanName": shopping_list.meal_plan_name,
        "startDate": shopping_list.start_date.isoformat(),
        "endDate": shopping_list.end_date.isoformat(),
        "items": [dump(item) for item in items],
        "groupedByCategory": {
            category: [dump(item) for item in group]
            for category, group in group_by_category(items).items()
        },
    }


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _format_number(value: float) -> str:
    """Whole numbers without a trailing .0."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
