# pyright: reportMissingTypeStubs=false
"""
Patient Records Backend API

A FastAPI application exposing patient and address management with
soft delete, audit stamping and bearer-token authentication.

Features:
- Patient CRUD with embedded address handling
- Soft delete, restore and permanent delete for administrators
- Username/password login issuing signed JWT bearer tokens
- PostgreSQL database with SQLAlchemy ORM
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import auth, patients
from api.responses import ErrorResponse
from core.config import CORS_ALLOWED_ORIGINS
from services.jwt_service import jwt_service
from services.patient_service import PatientStorageError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAIL = "An internal error occurred. Please try again later."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    logger.info("🚀 Starting Patient Records API")

    # Refuse to start with a signing key too short for HS256
    jwt_service.validate_secret_key()

    # Seed the administrator account
    try:
        from core.database import get_db_context
        from services.auth_service import AuthService
        with get_db_context() as db:
            AuthService.ensure_admin_user(db)
        logger.info("✅ Administrator account ready")
    except Exception as e:
        logger.exception(f"❌ Failed to seed administrator account: {e}")

    yield

    logger.info("🛑 Shutting down Patient Records API")


# Create FastAPI application
app = FastAPI(
    title="Patient Records API",
    description="Patient and address management with soft delete and audit trail",
    version="1.0.0",
    docs_url="/docs",  # Swagger UI
    redoc_url="/redoc",  # ReDoc
    lifespan=lifespan,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(
    auth.router,
    prefix="/api/auth",
    tags=["authentication"],
    responses={
        400: {"description": "Bad request"},
        401: {"description": "Unauthorized"},
        500: {"description": "Internal server error"},
    },
)
app.include_router(
    patients.router,
    prefix="/api/patients",
    tags=["patients"],
    responses={
        400: {"description": "Bad request"},
        401: {"description": "Unauthorized"},
        404: {"description": "Resource not found"},
        500: {"description": "Internal server error"},
    },
)


@app.get(
    "/",
    summary="Root endpoint",
    description="Returns basic API information",
)
async def root() -> dict[str, str]:
    """Get API information."""
    return {
        "message": "Patient Records API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get(
    "/health",
    summary="Health check",
    description="Returns the health status of the API",
)
async def health_check() -> dict[str, str]:
    """Check if the API is healthy and responding."""
    return {"status": "healthy"}


# Global exception handlers
# Details are logged server-side only; callers get a generic message
@app.exception_handler(PatientStorageError)
async def storage_error_handler(request: Request, exc: PatientStorageError):
    """Handle storage failures reported by the service layer."""
    logger.error(f"Storage error on {request.method} {request.url.path}: {exc.operation}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(detail=GENERIC_ERROR_DETAIL, type="internal_error").model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions globally."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(detail=GENERIC_ERROR_DETAIL, type="internal_error").model_dump(),
    )
