"""
POS Sales Backend API - Main Application.

FastAPI application with CORS enabled for frontend communication.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import __version__
from api.dependencies import get_settings
from api.logging_config import configure_logging
from domain.time import InvalidDateRangeError
from repositories.errors import PersistenceError
from services.errors import NotFoundError

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="POS Sales Backend API",
    description="REST API for recording point-of-sale transactions against the product catalog",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"error": error, "message": message}},
    )


@app.exception_handler(NotFoundError)
def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(404, "NOT_FOUND", str(exc))


@app.exception_handler(InvalidDateRangeError)
def handle_invalid_date_range(request: Request, exc: InvalidDateRangeError) -> JSONResponse:
    return _error(400, "VALIDATION_FAILURE", str(exc))


@app.exception_handler(PersistenceError)
def handle_persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error(
        f"Persistence failure on {request.method} {request.url.path}",
        extra={"error": str(exc)},
    )
    return _error(500, "TRANSACTION_FAILURE", str(exc))


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "pos-sales-backend-api",
        "storage_backend": settings.storage_backend,
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "POS Sales Backend API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import sales

app.include_router(sales.router, prefix="/api/v1", tags=["Sales"])
