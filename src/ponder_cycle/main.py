# src/ponder_cycle/main.py
"""Main entry point for the Ponder cycle application."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from ponder_cycle.api.v1 import cycle_router, system_router
from ponder_cycle.core.settings import settings

# Initialize FastAPI app
app = FastAPI(
    title="Ponder Cycle API",
    description="Daily posting/viewing cycle, prompt windows and notification triggers",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(cycle_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Ponder Cycle API",
        "version": settings.app_version,
        "description": "Daily posting/viewing cycle, prompt windows and notification triggers",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("ponder_cycle.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
