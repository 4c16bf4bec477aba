"""
Pytest configuration and shared fixtures.

Fixtures defined here are available to all tests.
"""

import os
import sys
import pytest
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

# Add backend to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment
os.environ["TESTING"] = "true"


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def app():
    """FastAPI test application."""
    from app.main import app
    return app


@pytest.fixture
def client(app):
    """Sync test client for API tests."""
    from fastapi.testclient import TestClient
    return TestClient(app)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def mock_supabase():
    """Mock Supabase client for plan store tests."""
    mock = MagicMock()
    mock.table.return_value.select.return_value.execute.return_value.data = []
    return mock


@pytest.fixture
def test_user_id():
    """Test user ID for plan ownership."""
    return "test-user-00000000-0000-0000-0000-000000000000"


# =============================================================================
# Sample Data Factories
# =============================================================================


@pytest.fixture
def make_product():
    """Build a product snapshot."""
    from app.models.shopping import Product

    def _make(name, category="other", unit="g", allergens=(), product_id=None):
        return Product(
            id=product_id,
            name=name,
            category=category,
            default_unit=unit,
            allergens=tuple(allergens),
        )
    return _make


@pytest.fixture
def make_ingredient(make_product):
    """Build a recipe ingredient; without `product`, one is made from the kwargs."""
    from app.models.shopping import RecipeIngredient

    def _make(product_id, grams, product=None, optional=False, **product_kwargs):
        if product is None:
            product = make_product(product_kwargs.pop("name", product_id), **product_kwargs)
        return RecipeIngredient(
            product_id=product_id,
            product=product,
            amount=grams,
            unit="g",
            amount_in_grams=grams,
            is_optional=optional,
        )
    return _make


@pytest.fixture
def make_assignment():
    """Build a meal plan assignment of a recipe."""
    from app.models.shopping import MealPlanRecipeAssignment, Recipe

    def _make(ingredients, servings=2, recipe_servings=2, recipe_id="recipe-1",
              day=date(2024, 1, 1), meal_type="dinner"):
        return MealPlanRecipeAssignment(
            date=day,
            meal_type=meal_type,
            servings=servings,
            recipe=Recipe(id=recipe_id, servings=recipe_servings, ingredients=ingredients),
        )
    return _make


@pytest.fixture
def make_plan(test_user_id):
    """Build a meal plan owned by the test user."""
    from app.models.shopping import MealPlan

    def _make(assignments, plan_id="plan-1", name="Тестовый план",
              start=date(2024, 1, 1), end=date(2024, 1, 7), user_id=None):
        return MealPlan(
            id=plan_id,
            user_id=user_id or test_user_id,
            name=name,
            start_date=start,
            end_date=end,
            assignments=assignments,
        )
    return _make


@pytest.fixture
def milk(make_product):
    return make_product("Молоко", category="dairy", unit="ml", product_id="product-1")


@pytest.fixture
def flour(make_product):
    return make_product("Мука", category="grains", unit="g", product_id="product-2")


@pytest.fixture
def sample_plan(make_plan, make_assignment, make_ingredient, milk, flour):
    """Plan needing 200 ml milk + 100 g flour at 2/2 and 150 ml milk at 4/2."""
    return make_plan([
        make_assignment(
            [
                make_ingredient("product-1", 200, product=milk),
                make_ingredient("product-2", 100, product=flour),
            ],
            servings=2,
            recipe_servings=2,
            recipe_id="recipe-1",
        ),
        make_assignment(
            [make_ingredient("product-1", 150, product=milk)],
            servings=4,
            recipe_servings=2,
            recipe_id="recipe-2",
            day=date(2024, 1, 2),
        ),
    ])


@pytest.fixture
def sample_product_meta():
    """Package metadata matching sample_plan."""
    from app.models.shopping import ProductMeta
    return {
        "product-1": ProductMeta(id="product-1"),
        "product-2": ProductMeta(id="product-2", package_size=1000),
    }
