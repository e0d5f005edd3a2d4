"""Follow, subscribe, bookmark and like operations.

Each relation is a single row in its own table, so both sides of a pair are
always derived from the same fact. Every operation commits on success and
rolls back on failure.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogonspot.db.time import utcnow
from blogonspot.models import Bookmark, Follow, Post, PostLike, Subscription, User
from blogonspot.services.access import ensure_not_self
from blogonspot.services.errors import ConflictError, NotFoundError
from blogonspot.services.posts import get_post

logger = logging.getLogger(__name__)

__all__ = [
    "follow",
    "unfollow",
    "subscribe",
    "unsubscribe",
    "add_bookmark",
    "remove_bookmark",
    "like_post",
    "unlike_post",
    "active_subscriptions",
]

ALREADY_SUBSCRIBED = "Already subscribed to this creator"


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def _subscription_row(db: Session, subscriber_id: int, creator_id: int) -> Subscription | None:
    return (
        db.query(Subscription)
        .filter(
            Subscription.subscriber_id == subscriber_id,
            Subscription.creator_id == creator_id,
        )
        .first()
    )


def follow(db: Session, actor: User, target_id: int) -> Follow:
    """Record that `actor` follows `target_id`."""
    ensure_not_self(actor.id, target_id, "Cannot follow yourself")
    _get_user(db, target_id)

    existing = db.get(Follow, (actor.id, target_id))
    if existing is not None:
        raise ConflictError("Already following")

    row = Follow(follower_id=actor.id, followee_id=target_id)
    db.add(row)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Concurrent follow %s -> %s rejected by the store", actor.id, target_id)
        raise ConflictError("Already following") from exc

    logger.info("User %s followed user %s", actor.id, target_id)
    return row


def unfollow(db: Session, actor: User, target_id: int) -> None:
    """Remove the follow relation if present."""
    _get_user(db, target_id)
    row = db.get(Follow, (actor.id, target_id))
    if row is None:
        return
    db.delete(row)
    db.commit()
    logger.info("User %s unfollowed user %s", actor.id, target_id)


def subscribe(db: Session, actor: User, creator_id: int) -> Subscription:
    """Create or reactivate the subscription of `actor` to `creator_id`.

    Raises:
        SelfRelationError: When subscribing to oneself.
        NotFoundError: When the creator is missing or inactive.
        ConflictError: When an active subscription already exists, including
            the case where a concurrent request inserted it first.
    """
    ensure_not_self(actor.id, creator_id, "Cannot subscribe to yourself")
    creator = db.get(User, creator_id)
    if creator is None or not creator.is_active:
        raise NotFoundError("Creator not found or inactive")

    row = _subscription_row(db, actor.id, creator_id)
    if row is not None and row.is_active:
        raise ConflictError(ALREADY_SUBSCRIBED)

    if row is None:
        row = Subscription(subscriber_id=actor.id, creator_id=creator_id, is_active=True)
        db.add(row)
    else:
        row.is_active = True
        row.start_date = utcnow()

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(
            "Concurrent subscribe %s -> %s rejected by the store", actor.id, creator_id
        )
        raise ConflictError(ALREADY_SUBSCRIBED) from exc

    db.refresh(row)
    logger.info("User %s subscribed to creator %s", actor.id, creator_id)
    return row


def unsubscribe(db: Session, actor: User, creator_id: int) -> Subscription:
    """Deactivate the active subscription of `actor` to `creator_id`."""
    row = _subscription_row(db, actor.id, creator_id)
    if row is None or not row.is_active:
        raise NotFoundError("Subscription not found")

    row.is_active = False
    db.commit()
    logger.info("User %s unsubscribed from creator %s", actor.id, creator_id)
    return row


def active_subscriptions(db: Session, user: User) -> Sequence[Subscription]:
    """Return the user's active subscriptions, most recently started first."""
    return (
        db.query(Subscription)
        .filter(Subscription.subscriber_id == user.id, Subscription.is_active.is_(True))
        .order_by(Subscription.start_date.desc())
        .all()
    )


def add_bookmark(db: Session, actor: User, post_id: int) -> list[int]:
    """Bookmark a readable post; adding twice leaves one bookmark."""
    get_post(db, actor, post_id)
    if db.get(Bookmark, (actor.id, post_id)) is None:
        db.add(Bookmark(user_id=actor.id, post_id=post_id))
        try:
            db.commit()
        except IntegrityError:
            # A concurrent request stored the same bookmark.
            db.rollback()
    return bookmarked_post_ids(db, actor)


def remove_bookmark(db: Session, actor: User, post_id: int) -> list[int]:
    """Remove a bookmark; absent bookmarks are ignored."""
    row = db.get(Bookmark, (actor.id, post_id))
    if row is not None:
        db.delete(row)
        db.commit()
    return bookmarked_post_ids(db, actor)


def bookmarked_post_ids(db: Session, user: User) -> list[int]:
    """Return the ids of posts bookmarked by `user`, oldest bookmark first."""
    rows = (
        db.query(Bookmark.post_id)
        .filter(Bookmark.user_id == user.id)
        .order_by(Bookmark.created_at, Bookmark.post_id)
        .all()
    )
    return [post_id for (post_id,) in rows]


def like_post(db: Session, actor: User, post_id: int) -> Post:
    """Like a readable post once.

    Raises:
        ConflictError: When the user already likes the post.
    """
    post = get_post(db, actor, post_id)
    if db.get(PostLike, (post_id, actor.id)) is not None:
        raise ConflictError("You have already liked this post")

    db.add(PostLike(post_id=post_id, user_id=actor.id))
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Concurrent like on post %s by %s rejected by the store", post_id, actor.id)
        raise ConflictError("You have already liked this post") from exc

    db.refresh(post)
    return post


def unlike_post(db: Session, actor: User, post_id: int) -> Post:
    """Remove the caller's like; absent likes are ignored."""
    post = get_post(db, actor, post_id)
    row = db.get(PostLike, (post_id, actor.id))
    if row is not None:
        db.delete(row)
        db.commit()
        db.refresh(post)
    return post
