# src/blogonspot/api/endpoints/admin.py
"""Admin console endpoints: moderation, dashboard and admin content."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from blogonspot.api.dependencies import AdminDep, OptionalUserDep, SessionDep
from blogonspot.schemas.admin import DashboardResponse, DashboardStats, RecentUser, UserActionResponse
from blogonspot.schemas.post import (
    AdminContentCreate,
    DeletedPostResponse,
    PostActionResponse,
    PostListResponse,
    PostResponse,
)
from blogonspot.schemas.user import AdminCreatorEntry, UserProfile
from blogonspot.services import accounts, admin, posts
from blogonspot.services.errors import ServiceError, to_http_exception

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[UserProfile])
async def list_users(_admin: AdminDep, db: SessionDep) -> list[UserProfile]:
    """List every account, including disabled ones."""
    return [UserProfile.model_validate(user) for user in admin.list_all_users(db)]


@router.put("/users/{user_id}/ban", response_model=UserActionResponse)
async def ban_user(user_id: int, current_admin: AdminDep, db: SessionDep) -> UserActionResponse:
    """Disable an account."""
    try:
        user = admin.set_user_active(db, current_admin, user_id, active=False)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return UserActionResponse(message="User banned", user=UserProfile.model_validate(user))


@router.put("/users/{user_id}/unban", response_model=UserActionResponse)
async def unban_user(user_id: int, current_admin: AdminDep, db: SessionDep) -> UserActionResponse:
    """Re-enable an account."""
    try:
        user = admin.set_user_active(db, current_admin, user_id, active=True)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return UserActionResponse(message="User unbanned", user=UserProfile.model_validate(user))


@router.delete("/posts/{post_id}", response_model=DeletedPostResponse)
async def delete_post(post_id: int, current_admin: AdminDep, db: SessionDep) -> DeletedPostResponse:
    """Delete a post with its comments, likes and bookmarks."""
    try:
        deleted_id = admin.delete_post(db, current_admin, post_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return DeletedPostResponse(message="Post deleted", post_id=deleted_id)


@router.delete("/deletecomment/{post_id}/{comment_id}", response_model=PostActionResponse)
async def delete_comment(
    post_id: int,
    comment_id: int,
    current_admin: AdminDep,
    db: SessionDep,
) -> PostActionResponse:
    """Delete any comment."""
    try:
        post = posts.delete_comment(db, current_admin, post_id, comment_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return PostActionResponse(
        message="Comment deleted successfully",
        post=PostResponse.model_validate(post),
    )


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(_admin: AdminDep, db: SessionDep) -> DashboardResponse:
    """Aggregate counts plus the five newest accounts and posts."""
    snapshot = admin.dashboard(db)
    return DashboardResponse(
        stats=DashboardStats(
            total_users=snapshot.total_users,
            total_blogs=snapshot.total_blogs,
            published_blogs=snapshot.published_blogs,
            unpublished_blogs=snapshot.unpublished_blogs,
            total_subscriptions=snapshot.total_subscriptions,
        ),
        recent_users=[RecentUser.model_validate(user) for user in snapshot.recent_users],
        recent_blogs=[PostResponse.model_validate(post) for post in snapshot.recent_blogs],
    )


@router.get("/create-content", response_model=PostListResponse)
async def list_admin_content(db: SessionDep, viewer: OptionalUserDep) -> PostListResponse:
    """List published admin content readable by the caller."""
    return PostListResponse(
        posts=[PostResponse.model_validate(post) for post in posts.list_admin_content(db, viewer)]
    )


@router.post(
    "/create-content",
    response_model=PostActionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_admin_content(
    payload: AdminContentCreate,
    current_admin: AdminDep,
    db: SessionDep,
) -> PostActionResponse:
    """Publish admin content; public unless `isPublic` is false."""
    try:
        post = posts.create_admin_content(
            db,
            current_admin,
            title=payload.title,
            content=payload.content,
            tags=payload.tags,
            is_public=payload.is_public,
        )
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return PostActionResponse(
        message="Admin content created successfully",
        post=PostResponse.model_validate(post),
    )


@router.put("/verify-creator/{user_id}", response_model=UserActionResponse)
async def verify_creator(
    user_id: int, current_admin: AdminDep, db: SessionDep
) -> UserActionResponse:
    """Mark an account as a verified creator."""
    try:
        user = admin.set_creator_verified(db, current_admin, user_id, verified=True)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return UserActionResponse(
        message="Creator verified successfully", user=UserProfile.model_validate(user)
    )


@router.put("/unverify-creator/{user_id}", response_model=UserActionResponse)
async def unverify_creator(
    user_id: int, current_admin: AdminDep, db: SessionDep
) -> UserActionResponse:
    """Remove the verified-creator mark."""
    try:
        user = admin.set_creator_verified(db, current_admin, user_id, verified=False)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return UserActionResponse(
        message="Creator unverified successfully", user=UserProfile.model_validate(user)
    )


@router.get("/creators", response_model=list[AdminCreatorEntry])
async def list_creators(
    _admin: AdminDep,
    db: SessionDep,
    search: str | None = Query(None, description="Match username or email"),
) -> list[AdminCreatorEntry]:
    """List active creators with email and subscriber counts."""
    creators = accounts.list_creators(db, search, include_profile_fields=False, limit=None)
    return [AdminCreatorEntry.model_validate(user) for user in creators]
