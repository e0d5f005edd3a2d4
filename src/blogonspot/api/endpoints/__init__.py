# src/blogonspot/api/endpoints/__init__.py
"""API endpoint modules."""

from .admin import router as admin_router
from .ai import plagiarism_router, summarize_router
from .posts import router as posts_router
from .subscription import router as subscription_router
from .system import router as system_router
from .user import router as user_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "plagiarism_router",
    "posts_router",
    "subscription_router",
    "summarize_router",
    "system_router",
    "user_router",
    "users_router",
]
