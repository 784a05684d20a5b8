"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

from fastapi import FastAPI

from app.core.config import settings
from app.core.logging import configure_logging
from app.api.v1.router import api_router
from app.db.init_db import init_db

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Personal training log with spreadsheet sync, KPIs and daily series.",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json")

# Include API router
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def create_tables() -> None:
    init_db()


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {
        "message": "Training Log API",
        "version": settings.VERSION,
        "status": "healthy"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "service": "training-log-api",
        "version": settings.VERSION,
        "sync_configured": bool(settings.SYNC_ENDPOINT),
    }
