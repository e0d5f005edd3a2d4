"""Moderation and reporting operations reserved for admins."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.orm import Session

from blogonspot.models import Post, Subscription, User
from blogonspot.services.access import can_delete_post
from blogonspot.services.errors import ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


@dataclass(frozen=True)
class DashboardSnapshot:
    """Aggregate counts plus the most recent accounts and posts."""

    total_users: int
    total_blogs: int
    published_blogs: int
    unpublished_blogs: int
    total_subscriptions: int
    recent_users: list[User]
    recent_blogs: list[Post]


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_all_users(db: Session) -> Sequence[User]:
    """Return every account, newest first, including disabled ones."""
    return db.query(User).order_by(User.since.desc(), User.id.desc()).all()


def set_user_active(db: Session, admin: User, user_id: int, *, active: bool) -> User:
    """Ban (`active=False`) or unban an account.

    Banned users cannot log in and their existing tokens stop working because
    the account is re-checked on every authenticated request.
    """
    user = _get_user(db, user_id)
    user.is_active = active
    db.commit()
    db.refresh(user)
    logger.info(
        "Admin %s %s user %s", admin.id, "unbanned" if active else "banned", user.id
    )
    return user


def delete_post(db: Session, admin: User, post_id: int) -> int:
    """Delete a post together with its comments, likes and bookmarks.

    Everything is removed in one transaction; the author's post list is a
    view over the post table, so no stale reference remains.
    """
    if not can_delete_post(admin):
        raise ForbiddenError("Access denied. Admins only.")
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")

    db.delete(post)
    db.commit()
    logger.info("Admin %s deleted post %s", admin.id, post_id)
    return post_id


def dashboard(db: Session) -> DashboardSnapshot:
    """Collect the admin dashboard counts and recent activity."""
    total_users = db.query(User).count()
    total_blogs = db.query(Post).count()
    published_blogs = db.query(Post).filter(Post.is_published.is_(True)).count()
    total_subscriptions = (
        db.query(Subscription).filter(Subscription.is_active.is_(True)).count()
    )
    recent_users = (
        db.query(User).order_by(User.since.desc(), User.id.desc()).limit(RECENT_LIMIT).all()
    )
    recent_blogs = (
        db.query(Post).order_by(Post.created_at.desc(), Post.id.desc()).limit(RECENT_LIMIT).all()
    )
    return DashboardSnapshot(
        total_users=total_users,
        total_blogs=total_blogs,
        published_blogs=published_blogs,
        unpublished_blogs=total_blogs - published_blogs,
        total_subscriptions=total_subscriptions,
        recent_users=recent_users,
        recent_blogs=recent_blogs,
    )


def set_creator_verified(db: Session, admin: User, user_id: int, *, verified: bool) -> User:
    """Mark or unmark an account as a verified creator."""
    user = _get_user(db, user_id)
    user.is_verified_creator = verified
    db.commit()
    db.refresh(user)
    logger.info(
        "Admin %s %s creator %s", admin.id, "verified" if verified else "unverified", user.id
    )
    return user
