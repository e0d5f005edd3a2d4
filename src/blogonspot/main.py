# src/blogonspot/main.py
"""Main entry point for the BlogOnSpot application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from blogonspot.api.endpoints import (
    admin_router,
    plagiarism_router,
    posts_router,
    subscription_router,
    summarize_router,
    system_router,
    user_router,
    users_router,
)
from blogonspot.core.errors import register_exception_handlers
from blogonspot.core.logging import setup_logging
from blogonspot.core.settings import settings
from blogonspot.services.ai import get_ai_client

setup_logging(settings.effective_log_level)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Blogging platform with creator subscriptions",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
    expose_headers=["Content-Type", "Authorization"],
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(system_router)
app.include_router(user_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(posts_router, prefix="/api")
app.include_router(subscription_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(plagiarism_router, prefix="/api")
app.include_router(summarize_router, prefix="/api")


@app.on_event("startup")
async def on_startup() -> None:
    logger.info(
        "Starting %s %s (AI helpers %s)",
        settings.app_name,
        settings.app_version,
        "enabled" if settings.ai_enabled else "disabled",
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_ai_client().aclose()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("blogonspot.main:app", host="0.0.0.0", port=5000, reload=settings.debug)
