"""Service health endpoints."""

from __future__ import annotations

import time

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from blogonspot.api.dependencies import SessionDep
from blogonspot.core.settings import settings

router = APIRouter(tags=["system"])


@router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "API up",
        "docs": "/docs",
    }


@router.get("/health")
async def health_check(db: SessionDep) -> dict[str, object]:
    """Report service status and database connectivity.

    Args:
        db: Database session

    Returns:
        Dictionary with overall status, database status and version info
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        db_status = f"unhealthy: {e}"

    return {
        "status": "ok" if db_status == "healthy" else "degraded",
        "timestamp": int(time.time()),
        "components": {
            "database": db_status,
            "ai": "configured" if settings.ai_enabled else "disabled",
        },
        "version": settings.app_version,
    }
