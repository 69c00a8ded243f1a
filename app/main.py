# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Meal Planner API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    MealPlannerException,
    mealplanner_exception_handler,
    validation_exception_handler,
)
from app.routers import health, profiles, tasks
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs startup configuration and shutdown.
    """
    logger.info(f"Starting Meal Planner API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down Meal Planner API")


# Create FastAPI application
app = FastAPI(
    title="Meal Planner API",
    description="""
## Family Meal Planning API

Accounts sign in, then pick one of their family's profiles - like the
profile picker of a streaming service. App content is available once a
session and a selected profile both exist.

### Flow

1. **Sign up** - `POST /api/v1/auth/signup` creates the account; a background
   task creates its family and first profile
2. **Sign in** - `POST /api/v1/auth/login` returns a Bearer token
3. **Pick a profile** - `GET /api/v1/profiles`, then
   `POST /api/v1/profiles/{id}/select`
4. **Check the gate** - `GET /api/v1/auth/state` reports `ready`
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Sign-in, sign-up, sign-out and the current account",
        },
        {
            "name": "Profiles",
            "description": "List, select and manage the family's profiles",
        },
        {
            "name": "Tasks",
            "description": "Track account setup progress",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(MealPlannerException)
async def handle_mealplanner_exception(request: Request, exc: MealPlannerException):
    """Handle custom Meal Planner exceptions."""
    return await mealplanner_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request body/path validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions. Details stay in the logs."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

app.include_router(
    profiles.router,
    prefix="/api/v1/profiles",
    tags=["Profiles"]
)

app.include_router(
    tasks.router,
    prefix="/api/v1/tasks",
    tags=["Tasks"]
)

app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Meal Planner API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
