"""
CASPER FastAPI Backend

This is the main entry point for the API server that exposes the
priority engine to the dashboard frontend.

Architecture:
- FastAPI handles HTTP routing and request/response validation
- Pydantic schemas ensure type safety
- PriorityEngine does all scoring and selection (pure, no I/O)
- The caller supplies already-fetched collections; nothing is persisted

Run with:
    uvicorn backend.main:app --reload --port 8000

Or:
    python -m backend.main
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.routers import priority_router
from backend.dependencies import get_config, get_cors_origins, get_priority_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Runs startup and shutdown tasks:
    - Startup: Load config and validate priority weights
    - Shutdown: Nothing to clean up
    """
    # Startup
    try:
        config = get_config()
        get_priority_config()
        logger.info(f"Config loaded from: {config.config_dir}")
    except ValueError as e:
        logger.error(f"Invalid priority configuration: {e}")
        # Allow app to start; /health reports the problem

    yield

    # Shutdown
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="CASPER API",
    description="""
    Priority scoring and selection for the CASPER dashboard.

    ## Features

    - **Priority**: Rank tasks, inbox, calendar, companies, reading items,
      habits and commitments into one explainable "what next" list
    - **Config**: Inspect the active weights and thresholds
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend access (settings.json "cors_origins")
try:
    cors_origins = get_cors_origins()
except (OSError, ValueError) as e:
    logger.error(f"Could not read CORS origins, cross-origin requests disabled: {e}")
    cors_origins = []

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(priority_router)


@app.get("/")
async def root():
    """API root - returns basic info and available endpoints."""
    return {
        "name": "CASPER API",
        "version": "0.1.0",
        "docs": "/docs",
        "endpoints": {
            "priority": "/priority/items",
            "config": "/priority/config",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    try:
        priority_config = get_priority_config()
        return {"status": "healthy", "max_items": priority_config.max_items}
    except (OSError, ValueError) as e:
        return {"status": "unhealthy", "error": str(e)}


# Allow running directly with: python -m backend.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
