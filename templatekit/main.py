"""
Main Application Entry Point - templatekit/main.py

Configures FastAPI application, middleware, and routers.
"""

from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from templatekit import __version__
from templatekit.api import templates
from templatekit.core.config import settings

app = FastAPI(
    title="Template Builder",
    description="WhatsApp message template validation and preview",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Check Endpoints
# =============================================================================


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint. Returns 200 if running."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }


# =============================================================================
# Register API Routers
# =============================================================================

app.include_router(templates.router, prefix="/api")
