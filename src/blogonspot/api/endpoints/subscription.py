# src/blogonspot/api/endpoints/subscription.py
"""Creator subscription endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from blogonspot.api.dependencies import CurrentUserDep, SessionDep
from blogonspot.schemas.common import MessageResponse
from blogonspot.schemas.post import CreatorContentResponse, FeedResponse, Pagination, PostResponse
from blogonspot.schemas.subscription import (
    MySubscriptionEntry,
    SubscribeResponse,
    SubscriptionResponse,
)
from blogonspot.schemas.user import (
    CreatorEntry,
    CreatorProfileUpdateRequest,
    ProfileUpdateResponse,
    UserProfile,
)
from blogonspot.services import accounts, posts, relationships
from blogonspot.services.errors import ServiceError, to_http_exception
from blogonspot.services.posts import FEED_DEFAULT_LIMIT

router = APIRouter(prefix="/subscription", tags=["subscription"])


@router.get("/creators", response_model=list[CreatorEntry])
async def list_creators(
    db: SessionDep,
    search: str | None = Query(None, description="Match name, email, category or bio"),
) -> list[CreatorEntry]:
    """List active creators with their subscriber counts."""
    return [CreatorEntry.model_validate(user) for user in accounts.list_creators(db, search)]


@router.post(
    "/subscribe/{creator_id}",
    response_model=SubscribeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def subscribe(
    creator_id: int, current_user: CurrentUserDep, db: SessionDep
) -> SubscribeResponse:
    """Subscribe to a creator, reactivating a previous subscription if any."""
    try:
        subscription = relationships.subscribe(db, current_user, creator_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return SubscribeResponse(
        message="Successfully subscribed to creator",
        subscription=SubscriptionResponse.model_validate(subscription),
    )


@router.delete("/unsubscribe/{creator_id}", response_model=MessageResponse)
async def unsubscribe(
    creator_id: int, current_user: CurrentUserDep, db: SessionDep
) -> MessageResponse:
    """Deactivate the caller's subscription to a creator."""
    try:
        relationships.unsubscribe(db, current_user, creator_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return MessageResponse(message="Successfully unsubscribed from creator")


@router.get("/my-subscriptions", response_model=list[MySubscriptionEntry])
async def my_subscriptions(current_user: CurrentUserDep, db: SessionDep) -> list[MySubscriptionEntry]:
    """List the caller's active subscriptions with creator details."""
    return [
        MySubscriptionEntry.model_validate(row)
        for row in relationships.active_subscriptions(db, current_user)
    ]


@router.get("/content", response_model=FeedResponse)
async def subscription_content(
    current_user: CurrentUserDep,
    db: SessionDep,
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(FEED_DEFAULT_LIMIT, description="Page size, capped at 50"),
) -> FeedResponse:
    """Personalized feed: public posts plus subscribed creators' restricted posts."""
    feed = posts.subscription_feed(db, current_user, page=page, limit=limit)
    return FeedResponse(
        posts=[PostResponse.model_validate(post) for post in feed.posts],
        pagination=Pagination(
            current_page=feed.current_page,
            total_pages=feed.total_pages,
            total_posts=feed.total_posts,
            has_next=feed.has_next,
            has_prev=feed.has_prev,
        ),
    )


@router.put("/update-creator-profile", response_model=ProfileUpdateResponse)
async def update_creator_profile(
    payload: CreatorProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileUpdateResponse:
    """Set the caller's creator bio and category."""
    try:
        user = accounts.update_creator_profile(
            db,
            current_user,
            creator_bio=payload.creator_bio,
            creator_category=payload.creator_category,
        )
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return ProfileUpdateResponse(
        message="Creator profile updated successfully",
        user=UserProfile.model_validate(user),
    )


@router.get("/creator/{creator_id}/content", response_model=CreatorContentResponse)
async def creator_content(
    creator_id: int, current_user: CurrentUserDep, db: SessionDep
) -> CreatorContentResponse:
    """A creator's posts; restricted posts only when the caller may read them."""
    creator_posts, is_subscribed = posts.creator_content(db, current_user, creator_id)
    return CreatorContentResponse(
        posts=[PostResponse.model_validate(post) for post in creator_posts],
        is_subscribed=is_subscribed,
    )
