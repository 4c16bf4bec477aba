"""
Meal planner backend: FastAPI service for shopping lists.

Run with: uvicorn app.main:app --reload

Architecture:
- The web frontend handles sessions, pages and catalog CRUD
- This service turns meal plans into aggregated, allergen-aware,
  package-rounded shopping lists and exports them
- Plans, products and allergies are read from Supabase per request
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.api import health
from app.api import shopping as shopping_api

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting meal planner backend...")

    if not settings.plan_store_configured:
        logger.warning("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not set - shopping lists unavailable")

    yield

    logger.info("Shutting down meal planner backend...")


app = FastAPI(
    title="meal-planner",
    description="Shopping lists from weekly meal plans",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS - allow frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(shopping_api.router)  # /api/meal-plans, /api/shopping-list


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "meal-planner",
        "version": "0.1.0",
        "description": "Shopping lists from weekly meal plans",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "shopping_list": "/api/meal-plans/{plan_id}/shopping-list",
            "export": "/api/meal-plans/{plan_id}/shopping-list/export",
            "consolidated": "/api/shopping-list/consolidated",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=not settings.is_production,
    )
