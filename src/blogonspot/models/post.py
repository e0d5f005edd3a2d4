# src/blogonspot/models/post.py
"""SQLAlchemy models for posts, their tags, comments and likes."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blogonspot.db.session import Base
from blogonspot.db.time import utcnow

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .relations import Bookmark
    from .user import User


class Visibility(str, enum.Enum):
    """Visibility state derived from the published/public flags."""

    DRAFT = "draft"
    PUBLIC = "public"
    SUBSCRIBERS = "subscribers"


class Post(Base):
    """Blog post written by a user (or an admin)."""

    __tablename__ = "post"
    __table_args__ = (
        Index("ix_post_published_created", "is_published", "created_at"),
        Index("ix_post_author_id", "author_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=True,
    )
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # False means subscribers-only.
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    author: Mapped[User | None] = relationship("User")
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.id",
    )
    likes: Mapped[list[PostLike]] = relationship(
        "PostLike",
        cascade="all, delete-orphan",
        order_by="PostLike.created_at",
    )
    bookmark_rows: Mapped[list[Bookmark]] = relationship(
        "Bookmark",
        cascade="all, delete-orphan",
    )
    tag_rows: Mapped[list[PostTag]] = relationship(
        "PostTag",
        cascade="all, delete-orphan",
        order_by="PostTag.position",
        collection_class=ordering_list("position"),
    )
    # Distinct tags, in order of first appearance.
    tags: AssociationProxy[list[str]] = association_proxy(
        "tag_rows", "tag", creator=lambda tag: PostTag(tag=tag)
    )

    @property
    def visibility(self) -> Visibility:
        """Return the enumerated visibility state of the post."""
        if not self.is_published:
            return Visibility.DRAFT
        return Visibility.PUBLIC if self.is_public else Visibility.SUBSCRIBERS

    @property
    def like_user_ids(self) -> list[int]:
        """Return the ids of users who liked the post."""
        return [like.user_id for like in self.likes]


class PostTag(Base):
    """One tag on a post, stored as its own row so it can be searched by value."""

    __tablename__ = "post_tag"
    __table_args__ = (
        UniqueConstraint("post_id", "tag", name="uq_post_tag_value"),
        Index("ix_post_tag_tag", "tag"),
    )

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    tag: Mapped[str] = mapped_column(Text, nullable=False)


class Comment(Base):
    """Comment attached to a post."""

    __tablename__ = "post_comment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=True,
    )
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    post: Mapped[Post] = relationship("Post", back_populates="comments")
    user: Mapped[User | None] = relationship("User")


class PostLike(Base):
    """A user's like on a post."""

    __tablename__ = "post_like"

    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Composite primary key prevents duplicate likes from the same user.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

