# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Book Review API.
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
from jose import JWTError
from postgrest.exceptions import APIError as PostgrestAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.exceptions import (
    ApiError,
    api_error_handler,
    http_exception_handler,
    jwt_error_handler,
    request_validation_handler,
    store_error_handler,
    unhandled_exception_handler,
)
from app.responses import success_response
from app.routers import books, health, users

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
    logger.info(f"Starting Book Review API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down Book Review API")


# Create FastAPI application
app = FastAPI(
    title="Book Review API",
    description="""
## Book Review API

Register, log in, add books and review them.

### Authentication

`POST /api/v1/users/login` returns an access token and a refresh token, both
in the body and as http-only cookies. Send the access token as the
`accessToken` cookie or an `Authorization: Bearer` header.
`POST /api/v1/users/refresh-token` rotates the pair; an old refresh token
stops working once it has been used.

### Responses

Every response has the same envelope:

```json
{"statusCode": 200, "success": true, "message": "...", "data": {}, "error": null, "meta": {}}
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Users",
            "description": "Registration, login, token refresh and account management",
        },
        {
            "name": "Books",
            "description": "Book catalog and reviews",
        },
        {
            "name": "Health",
            "description": "API and database health checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - credentials are allowed so auth cookies cross origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================
# Every failure ends up in exactly one of these and leaves as an envelope.

app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(PostgrestAPIError, store_error_handler)
app.add_exception_handler(JWTError, jwt_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    return await unhandled_exception_handler(request, exc)


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# User account endpoints
app.include_router(
    users.router,
    prefix="/api/v1/users",
    tags=["Users"]
)

# Book and review endpoints
app.include_router(
    books.router,
    prefix="/api/v1/books",
    tags=["Books"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return success_response(
        "Book Review API",
        {
            "name": "Book Review API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/api/v1/health",
        },
    )
