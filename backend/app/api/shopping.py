"""
Shopping list API endpoints.

Provides single-plan and consolidated shopping lists plus exports.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from app.api.deps import get_current_user_id
from app.models.shopping import (
    ConsolidatedShoppingList,
    ConsolidatedShoppingListRequest,
    ExportFormat,
    ShoppingList,
)
from app.services.errors import NotFoundError, ValidationError
from app.services.export import export_csv, export_json, export_text
from app.services.shopping_list import (
    generate_consolidated_shopping_list,
    generate_shopping_list,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["shopping"])


@router.get("/meal-plans/{plan_id}/shopping-list", response_model=ShoppingList)
async def get_shopping_list(
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
) -> ShoppingList:
    """Get the shopping list for one meal plan.

    Ingredients are summed per product, rounded up to whole packages and
    sorted by category. Items with the user's allergens stay in the list
    but are flagged as excluded.
    """
    try:
        return await generate_shopping_list(plan_id, user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Meal plan not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception(f"Error generating shopping list for plan {plan_id}")
        raise HTTPException(status_code=500, detail="Failed to generate shopping list")


@router.get("/meal-plans/{plan_id}/shopping-list/export")
async def export_shopping_list(
    plan_id: str,
    export_format: ExportFormat = Query(ExportFormat.TEXT, alias="format"),
    user_id: str = Depends(get_current_user_id),
) -> Response:
    """Export a meal plan's shopping list as text, CSV or JSON.

    Excluded items and always-owned staples are left out.
    """
    try:
        shopping_list = await generate_shopping_list(plan_id, user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Meal plan not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception(f"Error exporting shopping list for plan {plan_id}")
        raise HTTPException(status_code=500, detail="Failed to export shopping list")

    if export_format == ExportFormat.JSON:
        return JSONResponse(export_json(shopping_list))

    if export_format == ExportFormat.CSV:
        return Response(
            content=export_csv(shopping_list),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": 'attachment; filename="shopping-list.csv"'},
        )

    return PlainTextResponse(export_text(shopping_list))


@router.post("/shopping-list/consolidated", response_model=ConsolidatedShoppingList)
async def get_consolidated_shopping_list(
    request: ConsolidatedShoppingListRequest,
    user_id: str = Depends(get_current_user_id),
) -> ConsolidatedShoppingList:
    """Build one shopping list across several of the user's meal plans.

    Each item lists the plans that needed it in `fromPlans`. Plans the
    user does not own are ignored.
    """
    try:
        return await generate_consolidated_shopping_list(request.meal_plan_ids, user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="No meal plans found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Error generating consolidated shopping list")
        raise HTTPException(status_code=500, detail="Failed to generate shopping list")
