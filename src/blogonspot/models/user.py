# src/blogonspot/models/user.py
"""SQLAlchemy models for user accounts."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogonspot.db.session import Base
from blogonspot.db.time import utcnow

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .post import Post

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(Base):
    """Account record.

    Relationship sets (following, followers, subscriptions, subscribers,
    bookmarks, posts) are read-only views over their own tables, so each side
    of a pair is always derived from the same row.
    """

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar: Mapped[str] = mapped_column(Text, nullable=False, default="")
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=ROLE_USER)
    since: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_login: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Creator profile
    creator_bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    creator_category: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    is_verified_creator: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    posts: Mapped[list[Post]] = relationship(
        "Post",
        order_by="Post.created_at",
        viewonly=True,
    )
    following: Mapped[list[User]] = relationship(
        "User",
        secondary="follow",
        primaryjoin="User.id == Follow.follower_id",
        secondaryjoin="User.id == Follow.followee_id",
        viewonly=True,
    )
    followers: Mapped[list[User]] = relationship(
        "User",
        secondary="follow",
        primaryjoin="User.id == Follow.followee_id",
        secondaryjoin="User.id == Follow.follower_id",
        viewonly=True,
    )
    subscriptions: Mapped[list[User]] = relationship(
        "User",
        secondary="subscription",
        primaryjoin="and_(User.id == Subscription.subscriber_id, Subscription.is_active.is_(True))",
        secondaryjoin="User.id == Subscription.creator_id",
        viewonly=True,
    )
    subscribers: Mapped[list[User]] = relationship(
        "User",
        secondary="subscription",
        primaryjoin="and_(User.id == Subscription.creator_id, Subscription.is_active.is_(True))",
        secondaryjoin="User.id == Subscription.subscriber_id",
        viewonly=True,
    )
    bookmarks: Mapped[list[Post]] = relationship(
        "Post",
        secondary="bookmark",
        viewonly=True,
    )

    @property
    def is_admin(self) -> bool:
        """Return True when the account carries the admin role."""
        return self.role == ROLE_ADMIN
