"""
Health Routes - System health and status endpoints.
"""

import time
from typing import Any

from fastapi import APIRouter

from globalbuddy import __version__

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "globalbuddy", "timestamp": int(time.time() * 1000)}


@router.get("/api")
async def api_info() -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "GlobalBuddy API",
        "version": __version__,
        "description": "Community platform for students studying abroad",
        "docs": "/docs",
    }
