"""
Unit tests for the Supabase plan store loaders and row parsing.
"""

from datetime import date
from unittest.mock import patch

import pytest

from app.models.shopping import MealType
from app.services.errors import ValidationError
from app.services.supabase import (
    fetch_meal_plans,
    fetch_product_meta,
    fetch_user_allergens,
    parse_meal_plan,
    parse_product_meta,
)


@pytest.fixture
def meal_plan_row(test_user_id):
    """Nested meal plan row as returned by the embedded select."""
    return {
        "id": "plan-1",
        "user_id": test_user_id,
        "name": "План",
        "start_date": "2024-01-01",
        "end_date": "2024-01-07",
        "recipes": [
            {
                "id": "mpr-1",
                "date": "2024-01-02",
                "meal_type": "lunch",
                "servings": 3,
                "recipe": {
                    "id": "recipe-1",
                    "name": "Сырники",
                    "servings": 2,
                    "ingredients": [
                        {
                            "product_id": "product-1",
                            "amount": 2,
                            "unit": "pcs",
                            "amount_in_grams": 110,
                            "is_optional": False,
                            "product": {
                                "id": "product-1",
                                "name": "Яйцо",
                                "category": "dairy",
                                "default_unit": "pcs",
                                "dietary_info": {"allergens": '["eggs"]'},
                            },
                        },
                        {
                            "product_id": "product-2",
                            "amount_in_grams": 300,
                            "product": {
                                "id": "product-2",
                                "name": "Творог",
                                "category": "dairy",
                                "dietary_info": [],
                            },
                        },
                    ],
                },
            }
        ],
    }


class TestParsing:
    """Tests for row -> snapshot parsing."""

    @pytest.mark.unit
    def test_parse_meal_plan(self, meal_plan_row, test_user_id):
        plan = parse_meal_plan(meal_plan_row)

        assert plan.id == "plan-1"
        assert plan.user_id == test_user_id
        assert plan.start_date == date(2024, 1, 1)
        assert len(plan.assignments) == 1

        assignment = plan.assignments[0]
        assert assignment.meal_type == MealType.LUNCH
        assert assignment.servings == 3
        assert assignment.recipe.servings == 2

        egg, curd = assignment.recipe.ingredients
        assert egg.amount_in_grams == 110
        assert egg.product.allergens == ("eggs",)
        assert egg.product.default_unit == "pcs"
        assert curd.product.allergens == ()
        assert curd.unit == "g"
        assert curd.is_optional is False

    @pytest.mark.unit
    def test_dietary_info_as_list(self, meal_plan_row):
        product = meal_plan_row["recipes"][0]["recipe"]["ingredients"][1]["product"]
        product["dietary_info"] = [{"allergens": '["milk"]'}]

        plan = parse_meal_plan(meal_plan_row)

        assert plan.assignments[0].recipe.ingredients[1].product.allergens == ("milk",)

    @pytest.mark.unit
    def test_plan_without_recipes(self, meal_plan_row):
        meal_plan_row["recipes"] = None
        assert parse_meal_plan(meal_plan_row).assignments == ()

    @pytest.mark.unit
    def test_missing_gram_amount_converted_from_unit(self, meal_plan_row):
        egg = meal_plan_row["recipes"][0]["recipe"]["ingredients"][0]
        del egg["amount_in_grams"]
        egg["product"]["grams_per_piece"] = 55

        plan = parse_meal_plan(meal_plan_row)

        assert plan.assignments[0].recipe.ingredients[0].amount_in_grams == 110

    @pytest.mark.unit
    def test_missing_gram_amount_with_unknown_unit(self, meal_plan_row):
        egg = meal_plan_row["recipes"][0]["recipe"]["ingredients"][0]
        egg["amount_in_grams"] = None
        egg["unit"] = "cup"

        with pytest.raises(ValidationError, match="unknown ingredient unit"):
            parse_meal_plan(meal_plan_row)

    @pytest.mark.unit
    def test_parse_product_meta(self):
        meta = parse_product_meta({"id": "p", "package_size": 900, "is_always_owned": None})
        assert meta.package_size == 900
        assert meta.is_always_owned is False
        assert meta.grams_per_piece is None


class TestLoaders:
    """Tests for the async loaders against a mocked client."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fetch_meal_plans_filters_by_owner(
        self, mock_supabase, meal_plan_row, test_user_id
    ):
        query = mock_supabase.table.return_value.select.return_value.in_.return_value
        query.eq.return_value.eq.return_value.execute.return_value.data = [meal_plan_row]

        with patch("app.services.supabase.get_supabase_client", return_value=mock_supabase):
            plans = await fetch_meal_plans(["plan-1"], test_user_id)

        assert [p.id for p in plans] == ["plan-1"]
        mock_supabase.table.assert_called_with("meal_plans")
        mock_supabase.table.return_value.select.return_value.in_.assert_called_with(
            "id", ["plan-1"]
        )
        query.eq.assert_called_with("user_id", test_user_id)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fetch_meal_plans_none_found(self, mock_supabase, test_user_id):
        query = mock_supabase.table.return_value.select.return_value.in_.return_value
        query.eq.return_value.eq.return_value.execute.return_value.data = None

        with patch("app.services.supabase.get_supabase_client", return_value=mock_supabase):
            assert await fetch_meal_plans(["other-users-plan"], test_user_id) == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fetch_product_meta(self, mock_supabase):
        mock_supabase.table.return_value.select.return_value.execute.return_value.data = [
            {"id": "p1", "package_size": 1000, "is_always_owned": False, "grams_per_piece": None},
            {"id": "p2", "package_size": None, "is_always_owned": True, "grams_per_piece": 50},
        ]

        with patch("app.services.supabase.get_supabase_client", return_value=mock_supabase):
            meta = await fetch_product_meta()

        assert meta["p1"].package_size == 1000
        assert meta["p2"].is_always_owned is True
        assert meta["p2"].grams_per_piece == 50

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_fetch_user_allergens(self, mock_supabase, test_user_id):
        query = mock_supabase.table.return_value.select.return_value
        query.eq.return_value.execute.return_value.data = [
            {"allergen": "peanuts"},
            {"allergen": "milk"},
        ]

        with patch("app.services.supabase.get_supabase_client", return_value=mock_supabase):
            allergens = await fetch_user_allergens(test_user_id)

        assert allergens == {"peanuts", "milk"}
