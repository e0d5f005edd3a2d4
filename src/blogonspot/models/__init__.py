# src/blogonspot/models/__init__.py
"""SQLAlchemy models for the BlogOnSpot application."""

from .post import Comment, Post, PostLike, PostTag, Visibility
from .relations import Bookmark, Follow, Subscription
from .user import ROLE_ADMIN, ROLE_USER, User

__all__ = [
    "Bookmark",
    "Comment",
    "Follow",
    "Post", "PostLike", "PostTag", "Visibility",
    "Subscription",
    "User", "ROLE_ADMIN", "ROLE_USER",
]
