# src/blogonspot/models/relations.py
"""Relationship tables between users and between users and posts.

Each row is the only record of its relation; the list attributes on `User`
are read-only views over these tables.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogonspot.db.session import Base
from blogonspot.db.time import utcnow

from .user import User


class Follow(Base):
    """`follower` follows `followee`."""

    __tablename__ = "follow"
    __table_args__ = (Index("ix_follow_followee_id", "followee_id"),)

    follower_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    followee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Subscription(Base):
    """Subscriber/creator pair.

    At most one row exists per pair for all time; unsubscribing clears
    `is_active` instead of deleting the row.
    """

    __tablename__ = "subscription"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "creator_id", name="uq_subscription_pair"),
        Index("ix_subscription_creator_active", "creator_id", "is_active"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subscriber_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    creator_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    creator: Mapped[User] = relationship("User", foreign_keys=[creator_id], viewonly=True)
    subscriber: Mapped[User] = relationship("User", foreign_keys=[subscriber_id], viewonly=True)


class Bookmark(Base):
    """A user's bookmark on a post."""

    __tablename__ = "bookmark"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
