# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Interplast catalog API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.exceptions import (
    CatalogException,
    catalog_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.middleware import request_logging_middleware, security_headers_middleware
from app.rate_limit import api_rate_limit_middleware
from app.routers import brands, categories, contacts, health, products, stats
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

    Logs the effective configuration on startup. The data-store client is
    created lazily on first use.
    """
    logger.info(f"Starting Interplast Catalog API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if settings.LOGIN_ATTEMPTS_BACKEND == "memory":
        logger.info("Login lockout counters are process-local")

    yield

    logger.info("Shutting down Interplast Catalog API")


# Create FastAPI application
app = FastAPI(
    title="Interplast Catalog API",
    description="""
## Product catalog backend

Public catalog reads (products, categories, brands), a rate-limited contact
form, and an admin area behind bearer-token authentication.

### Admin access

1. `POST /api/admin/login` with `{"email", "password"}`
2. Send the returned token as `Authorization: Bearer <token>`
""",
    version="1.0.0",
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Catalog", "description": "Public product, category and brand listings"},
        {"name": "Contact", "description": "Public contact form"},
        {"name": "Auth", "description": "Admin login, profile and password"},
        {"name": "Admin", "description": "Catalog management (token required)"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================
# Registered innermost first: the last one added wraps all the others.

app.middleware("http")(api_rate_limit_middleware)
app.middleware("http")(request_logging_middleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.middleware("http")(security_headers_middleware)

# CORS middleware - allow-list plus preview deployments
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(CatalogException, catalog_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    return await unhandled_exception_handler(request, exc)


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(health.router, tags=["Health"])

# Public catalog
app.include_router(products.router, prefix="/api", tags=["Catalog"])
app.include_router(categories.router, prefix="/api", tags=["Catalog"])
app.include_router(brands.router, prefix="/api", tags=["Catalog"])
app.include_router(contacts.router, prefix="/api", tags=["Contact"])

# Admin authentication
app.include_router(auth_routes.router, prefix="/api/admin", tags=["Auth"])

# Admin management
app.include_router(products.admin_router, prefix="/api/admin", tags=["Admin"])
app.include_router(categories.admin_router, prefix="/api/admin", tags=["Admin"])
app.include_router(brands.admin_router, prefix="/api/admin", tags=["Admin"])
app.include_router(contacts.admin_router, prefix="/api/admin", tags=["Admin"])
app.include_router(stats.admin_router, prefix="/api/admin", tags=["Admin"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Interplast Catalog API",
        "version": "1.0.0",
        "health": "/health",
    }
