"""Content access policy.

Decides which posts a viewer may read and which mutations an actor may
perform. Read decisions depend only on the post's visibility state, the
viewer's identity and role, and the set of creators the viewer holds an
active subscription to.
"""
from __future__ import annotations

import enum
from collections.abc import Collection

from sqlalchemy import and_, false, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from blogonspot.models import Comment, Post, Subscription, User, Visibility
from blogonspot.services.errors import ForbiddenError, NotFoundError, SelfRelationError

SUBSCRIBER_ONLY_MESSAGE = "This post is subscriber-only"


class AccessDecision(enum.Enum):
    """Outcome of a single-post read check."""

    ALLOWED = "allowed"
    # Drafts are not exposed at all.
    NOT_FOUND = "not_found"
    # Existence is acknowledged, content withheld.
    FORBIDDEN = "forbidden"


def post_visibility(post: Post) -> Visibility:
    """Return the enumerated visibility state of `post`."""
    return post.visibility


def evaluate_post_access(
    viewer: User | None,
    post: Post,
    subscribed_creator_ids: Collection[int],
) -> AccessDecision:
    """Decide whether `viewer` may read `post`.

    Args:
        viewer: Authenticated user, or None for anonymous callers.
        post: Post being read.
        subscribed_creator_ids: Creator ids the viewer actively subscribes to.

    Returns:
        The access decision for a direct read of the post.
    """
    visibility = post_visibility(post)
    if visibility is Visibility.DRAFT:
        return AccessDecision.NOT_FOUND
    if visibility is Visibility.PUBLIC:
        return AccessDecision.ALLOWED
    if viewer is None:
        return AccessDecision.FORBIDDEN
    if viewer.is_admin or viewer.id == post.author_id:
        return AccessDecision.ALLOWED
    if post.author_id is not None and post.author_id in subscribed_creator_ids:
        return AccessDecision.ALLOWED
    return AccessDecision.FORBIDDEN


def ensure_can_read(
    viewer: User | None,
    post: Post | None,
    subscribed_creator_ids: Collection[int],
) -> Post:
    """Return `post` if readable, otherwise raise the matching service error."""
    if post is None:
        raise NotFoundError("Post not found")
    decision = evaluate_post_access(viewer, post, subscribed_creator_ids)
    if decision is AccessDecision.NOT_FOUND:
        raise NotFoundError("Post not found")
    if decision is AccessDecision.FORBIDDEN:
        raise ForbiddenError(SUBSCRIBER_ONLY_MESSAGE)
    return post


def active_subscription_ids(db: Session, viewer: User | None) -> set[int]:
    """Return the ids of creators `viewer` holds an active subscription to."""
    if viewer is None:
        return set()
    rows = db.execute(
        select(Subscription.creator_id).where(
            Subscription.subscriber_id == viewer.id,
            Subscription.is_active.is_(True),
        )
    )
    return {creator_id for (creator_id,) in rows}


def public_posts_clause() -> ColumnElement[bool]:
    """Filter for listings open to everyone: published and public."""
    return and_(Post.is_published.is_(True), Post.is_public.is_(True))


def feed_posts_clause(subscribed_creator_ids: Collection[int]) -> ColumnElement[bool]:
    """Filter for the personalized feed.

    Published public posts plus published subscribers-only posts from creators
    the viewer subscribes to.
    """
    restricted = (
        and_(
            Post.is_public.is_(False),
            Post.author_id.in_(list(subscribed_creator_ids)),
        )
        if subscribed_creator_ids
        else false()
    )
    return and_(
        Post.is_published.is_(True),
        or_(Post.is_public.is_(True), restricted),
    )


def visible_posts_clause(
    viewer: User | None,
    subscribed_creator_ids: Collection[int],
) -> ColumnElement[bool]:
    """Filter selecting every post `viewer` could read directly."""
    if viewer is None:
        return public_posts_clause()
    if viewer.is_admin:
        return Post.is_published.is_(True)
    return or_(
        feed_posts_clause(subscribed_creator_ids),
        and_(Post.is_published.is_(True), Post.author_id == viewer.id),
    )


def can_delete_comment(actor: User, comment: Comment) -> bool:
    """Comment owners and admins may delete a comment."""
    return actor.is_admin or (comment.user_id is not None and comment.user_id == actor.id)


def can_delete_post(actor: User) -> bool:
    """Only admins may delete posts."""
    return actor.is_admin


def can_edit_profile(actor: User, target_user_id: int) -> bool:
    """Profiles are editable by their owner and by admins."""
    return actor.is_admin or actor.id == target_user_id


def ensure_not_self(actor_id: int, target_id: int, message: str) -> None:
    """Reject relations from a user to themselves."""
    if actor_id == target_id:
        raise SelfRelationError(message)
