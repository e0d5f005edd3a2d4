"""Post authoring, listings and comments."""
from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from blogonspot.db.search import LIKE_ESCAPE, contains_pattern, ilike_any
from blogonspot.models import ROLE_ADMIN, Bookmark, Comment, Post, PostTag, User
from blogonspot.services.access import (
    active_subscription_ids,
    can_delete_comment,
    ensure_can_read,
    feed_posts_clause,
    public_posts_clause,
    visible_posts_clause,
)
from blogonspot.services.errors import ForbiddenError, NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)

LIST_LIMIT = 100
SEARCH_LIMIT = 50
FEED_DEFAULT_LIMIT = 10
FEED_MAX_LIMIT = 50


@dataclass(frozen=True)
class FeedPage:
    """One page of the personalized feed."""

    posts: list[Post]
    current_page: int
    total_pages: int
    total_posts: int
    has_next: bool
    has_prev: bool


def normalize_tags(tags: Iterable[str] | None) -> list[str]:
    """Drop blanks and duplicates, keeping the order of first appearance."""
    seen: dict[str, None] = {}
    for tag in tags or ():
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def _text_match(term: str) -> ColumnElement[bool]:
    return or_(
        ilike_any((Post.title, Post.content), term),
        Post.tag_rows.any(PostTag.tag.ilike(contains_pattern(term), escape=LIKE_ESCAPE)),
    )


def _require_text(title: str | None, content: str | None, message: str) -> None:
    if not title or not title.strip() or not content or not content.strip():
        raise ValidationFailedError(message)


def create_post(
    db: Session,
    author: User,
    *,
    title: str | None,
    content: str | None,
    tags: Iterable[str] | None = None,
    is_public: bool | None = None,
    is_published: bool | None = None,
) -> Post:
    """Create a post for `author`.

    Posts are published unless `is_published` is explicitly False, and public
    unless `is_public` is explicitly False.
    """
    _require_text(title, content, "title and content required")
    post = Post(
        title=title,
        content=content,
        author_id=author.id,
        tags=normalize_tags(tags),
        is_public=True if is_public is None else is_public,
        is_published=True if is_published is None else is_published,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("User %s created post %s (%s)", author.id, post.id, post.visibility.value)
    return post


def create_admin_content(
    db: Session,
    admin: User,
    *,
    title: str | None,
    content: str | None,
    tags: Iterable[str] | None = None,
    is_public: bool | None = None,
) -> Post:
    """Create admin-authored content, which is always published."""
    _require_text(title, content, "Title and content are required")
    post = Post(
        title=title,
        content=content,
        author_id=admin.id,
        tags=normalize_tags(tags),
        is_public=True if is_public is None else is_public,
        is_published=True,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("Admin %s created content %s", admin.id, post.id)
    return post


def get_post(db: Session, viewer: User | None, post_id: int) -> Post:
    """Fetch a single post, applying the read policy."""
    post = db.get(Post, post_id)
    return ensure_can_read(viewer, post, active_subscription_ids(db, viewer))


def list_posts(
    db: Session,
    *,
    author_id: int | None = None,
    search: str | None = None,
    limit: int = LIST_LIMIT,
) -> Sequence[Post]:
    """List published public posts, newest first."""
    query = db.query(Post).filter(public_posts_clause())
    if author_id is not None:
        query = query.filter(Post.author_id == author_id)
    term = (search or "").strip()
    if term:
        query = query.filter(_text_match(term))
    return query.order_by(Post.created_at.desc(), Post.id.desc()).limit(limit).all()


def search_posts(db: Session, term: str | None, limit: int = SEARCH_LIMIT) -> Sequence[Post]:
    """Search published public posts by title, content or tag."""
    cleaned = (term or "").strip()
    if not cleaned:
        return []
    return (
        db.query(Post)
        .filter(public_posts_clause(), _text_match(cleaned))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(limit)
        .all()
    )


def subscription_feed(
    db: Session,
    viewer: User,
    page: int = 1,
    limit: int = FEED_DEFAULT_LIMIT,
) -> FeedPage:
    """Return one page of the viewer's personalized feed.

    The feed holds every published public post plus the published
    subscribers-only posts of creators the viewer actively subscribes to.
    """
    page = max(page, 1)
    limit = min(max(limit, 1), FEED_MAX_LIMIT)
    clause = feed_posts_clause(active_subscription_ids(db, viewer))

    total = db.query(Post).filter(clause).count()
    posts = (
        db.query(Post)
        .filter(clause)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return FeedPage(
        posts=posts,
        current_page=page,
        total_pages=math.ceil(total / limit),
        total_posts=total,
        has_next=page * limit < total,
        has_prev=page > 1,
    )


def creator_content(db: Session, viewer: User, creator_id: int) -> tuple[list[Post], bool]:
    """Return the creator's posts visible to `viewer` and whether they subscribe."""
    subscribed = active_subscription_ids(db, viewer)
    posts = (
        db.query(Post)
        .filter(
            Post.author_id == creator_id,
            visible_posts_clause(viewer, subscribed),
        )
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )
    return posts, creator_id in subscribed


def list_admin_content(db: Session, viewer: User | None) -> Sequence[Post]:
    """List published posts authored by admins that `viewer` may read."""
    subscribed = active_subscription_ids(db, viewer)
    return (
        db.query(Post)
        .join(User, Post.author_id == User.id)
        .filter(User.role == ROLE_ADMIN, visible_posts_clause(viewer, subscribed))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )


def bookmarked_posts(db: Session, user: User) -> Sequence[Post]:
    """Return the user's bookmarked posts that are still readable, oldest bookmark first."""
    subscribed = active_subscription_ids(db, user)
    return (
        db.query(Post)
        .join(Bookmark, Bookmark.post_id == Post.id)
        .filter(Bookmark.user_id == user.id, visible_posts_clause(user, subscribed))
        .order_by(Bookmark.created_at, Post.id)
        .all()
    )


def add_comment(db: Session, actor: User, post_id: int, text: str | None) -> Post:
    """Append a comment to a post the actor may read."""
    if not text or not text.strip():
        raise ValidationFailedError("comment text required")
    post = get_post(db, actor, post_id)
    db.add(Comment(post_id=post.id, user_id=actor.id, comment=text))
    db.commit()
    db.refresh(post)
    return post


def delete_comment(db: Session, actor: User, post_id: int, comment_id: int) -> Post:
    """Delete a comment; allowed for its author and for admins."""
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    comment = db.get(Comment, comment_id)
    if comment is None or comment.post_id != post.id:
        raise NotFoundError("Comment not found")
    if not can_delete_comment(actor, comment):
        raise ForbiddenError("You are not authorized to delete this comment")

    db.delete(comment)
    db.commit()
    db.refresh(post)
    logger.info("User %s deleted comment %s on post %s", actor.id, comment_id, post_id)
    return post
