# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the LoopCard API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.config import settings
from app.exceptions import (
    LoopCardException,
    loopcard_exception_handler,
    validation_exception_handler,
)
from app.routers import health, cards, analytics, suggestions, assets, public
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

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

    Logs the effective configuration on startup and marks shutdown.
    """
    logger.info(f"Starting LoopCard API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Public card links use origin {settings.APP_ORIGIN}")

    yield

    logger.info("Shutting down LoopCard API")


# Create FastAPI application
app = FastAPI(
    title="LoopCard API",
    description="""
## Digital Business Card API

LoopCard lets professionals publish shareable digital business cards with a QR code,
track how visitors interact with them, and (on Pro) get AI-generated insights.

### How It Works

1. **Sign Up** - Create an account and pick a plan
2. **Create a Card** - Name, photos, contact details and social links
3. **Share** - Every card gets a public link and a QR code
4. **Track** - Visitor clicks on contact buttons and social icons are recorded
5. **Analyze** - See clicks per action and per day; Pro adds AI insights

### Plans

| Plan | Cards | Gallery | Advanced analytics | AI features |
|------|-------|---------|--------------------|-------------|
| **Free** | 2 | - | - | - |
| **Pro** | 5 | yes | yes | yes |
| **Small Business** | 5 | yes | - | - |
| **Enterprise** | 5 | yes | - | - |

### Quick Start

```bash
# 1. Sign in
curl -X POST http://localhost:8000/api/v1/auth/login \\
  -H "Content-Type: application/json" \\
  -d '{"email": "ada@example.com", "password": "secret123"}'

# 2. Create a card
curl -X POST http://localhost:8000/api/v1/cards \\
  -H "Authorization: Bearer $TOKEN" \\
  -H "Content-Type: application/json" \\
  -d '{"full_name": "Ada Lovelace", "role": "Engineer"}'

# 3. View it as a visitor
curl http://localhost:8000/api/v1/public/cards/{id}
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Sign-up, sign-in, plan changes and token checks",
        },
        {
            "name": "Cards",
            "description": "Create, edit, share and delete business cards",
        },
        {
            "name": "Analytics",
            "description": "Click analytics and AI insights per card",
        },
        {
            "name": "Suggestions",
            "description": "AI username suggestions for social links",
        },
        {
            "name": "Assets",
            "description": "Upload card images",
        },
        {
            "name": "Public",
            "description": "Public card view, vCard download and click tracking",
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

# CORS middleware - allows cross-origin requests
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

@app.exception_handler(LoopCardException)
async def handle_loopcard_exception(request: Request, exc: LoopCardException):
    """Handle custom LoopCard exceptions."""
    return await loopcard_exception_handler(request, exc)


@app.exception_handler(ValidationError)
async def handle_validation_error(request: Request, exc: ValidationError):
    """Handle model validation failures raised inside handlers."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_error(request: Request, exc: SupabaseClientError):
    """Database and storage failures; the store's state is left as it was."""
    logger.error(f"Supabase error on {request.url.path}: {exc}")
    content = {
        "detail": exc.message,
        "code": exc.code,
    }
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=502, content=content)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
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

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Card management endpoints
app.include_router(
    cards.router,
    prefix="/api/v1/cards",
    tags=["Cards"]
)

# Analytics endpoints
app.include_router(
    analytics.router,
    prefix="/api/v1/cards",
    tags=["Analytics"]
)

# Username suggestion endpoints
app.include_router(
    suggestions.router,
    prefix="/api/v1/suggestions",
    tags=["Suggestions"]
)

# Image upload endpoints
app.include_router(
    assets.router,
    prefix="/api/v1/assets",
    tags=["Assets"]
)

# Public card endpoints (no auth)
app.include_router(
    public.router,
    prefix="/api/v1/public/cards",
    tags=["Public"]
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
        "name": "LoopCard API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
