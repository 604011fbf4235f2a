"""LexVault Backend - Main FastAPI Application

Document portal for a legal office

This module creates and configures the main FastAPI application, including:
- All API routers (documents, permissions, assignments, groups, activity, ...)
- Middleware (request ID correlation, CORS)
- Exception handlers for the domain error taxonomy
- Health and observability endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .config import get_settings
from .errors import DependencyFailureError, LexVaultError

# Observability
from .observability.logging_config import configure_logging
from .observability.middleware import RequestIDMiddleware
from .observability.router import router as observability_router

# Domain Routers
from .documents.router import router as documents_router
from .permissions.router import router as permissions_router
from .comments.router import router as comments_router
from .assignments.router import router as assignments_router
from .assignments.router import document_router as document_assignments_router
from .groups.router import router as groups_router
from .notifications.router import router as notifications_router
from .audit.router import router as activity_router
from .users.router import router as users_router

settings = get_settings()

# Configure logging
configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Handles startup and shutdown events for the application.
    """
    # Startup
    logger.info("LexVault API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    yield

    # Shutdown
    logger.info("LexVault API shutting down...")


# Create FastAPI application
app = FastAPI(
    title="LexVault API",
    description="Document lifecycle, sharing and assignment portal for legal offices",
    version="0.1.0",
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

# Request ID Middleware (must be first for proper correlation)
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(LexVaultError)
async def domain_exception_handler(
    request: Request,
    exc: LexVaultError
) -> JSONResponse:
    """Render domain errors with their own status and error code.

    403 (request access), 404 (refresh the list) and 409 (pick a valid
    transition) stay distinct so clients can show a specific message.
    """
    logger.info(
        f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}",
        extra={"status_code": exc.status_code, "method": request.method, "path": request.url.path}
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Returns a structured error response with field-level details.
    """
    logger.warning(f"Validation error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """Handle database errors.

    The request's transaction is discarded when the session closes, so the
    operation is reported as failed. Logs the full error but returns a
    generic message to prevent information leakage.
    """
    logger.error(
        f"Database error on {request.method} {request.url.path}",
        exc_info=exc
    )
    error = DependencyFailureError("A database error occurred. Please try again later.")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle uncaught exceptions.

    Full details are logged but not exposed to the client.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

# Observability (health, metrics, ready)
app.include_router(observability_router)

# Users
app.include_router(users_router, prefix="/api/v1")

# Documents & lifecycle
app.include_router(documents_router, prefix="/api/v1")
app.include_router(permissions_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")

# Assignments
app.include_router(assignments_router, prefix="/api/v1")
app.include_router(document_assignments_router, prefix="/api/v1")

# Groups
app.include_router(groups_router, prefix="/api/v1")

# Notifications
app.include_router(notifications_router, prefix="/api/v1")

# Activity (audit log read side)
app.include_router(activity_router, prefix="/api/v1")


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    """Root endpoint - API information."""
    return {
        "name": "LexVault API",
        "version": "0.1.0",
        "status": "running",
        "docs": None if settings.is_production else "/docs",
    }


@app.get("/api/v1", include_in_schema=False)
async def api_root() -> dict[str, Any]:
    """API v1 root endpoint."""
    return {
        "version": "v1",
        "status": "active",
        "endpoints": {
            "users": "/api/v1/users",
            "documents": "/api/v1/documents",
            "assignments": "/api/v1/assignments",
            "groups": "/api/v1/groups",
            "notifications": "/api/v1/notifications",
            "activity": "/api/v1/activity",
        }
    }


# =============================================================================
# APPLICATION FACTORY (for testing)
# =============================================================================

def create_app() -> FastAPI:
    """Application factory for creating test instances.

    Returns the configured FastAPI application instance.
    """
    return app


# =============================================================================
# DEVELOPMENT SERVER
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lexvault.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
