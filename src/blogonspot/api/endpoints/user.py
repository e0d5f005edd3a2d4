# src/blogonspot/api/endpoints/user.py
"""Account, authoring and relationship endpoints under /api/user."""

from __future__ import annotations

from fastapi import APIRouter, status

from blogonspot.api.dependencies import CurrentUserDep, SessionDep
from blogonspot.schemas.common import MessageResponse
from blogonspot.schemas.post import (
    BookmarksResponse,
    CommentCreate,
    PostActionResponse,
    PostCreate,
    PostResponse,
)
from blogonspot.schemas.user import (
    LoginRequest,
    LoginResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    SignupRequest,
    SignupResponse,
    UserProfile,
)
from blogonspot.services import accounts, posts, relationships
from blogonspot.services.errors import ServiceError, to_http_exception

router = APIRouter(prefix="/user", tags=["user"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, db: SessionDep) -> SignupResponse:
    """Register a new account; admin accounts require the admin key."""
    try:
        user = accounts.signup(
            db,
            username=payload.username,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            admin_key=payload.admin_key,
        )
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return SignupResponse(
        message=f"User registered successfully as {user.role}",
        user_id=user.id,
    )


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: SessionDep) -> LoginResponse:
    """Exchange email and password for a bearer token."""
    try:
        user, token = accounts.login(db, email=payload.email, password=payload.password)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return LoginResponse(message="Login successful", token=token, user_id=user.id, role=user.role)


@router.get("/profile/{user_id}", response_model=UserProfile)
async def get_profile(user_id: int, db: SessionDep) -> UserProfile:
    """Fetch a public profile."""
    try:
        user = accounts.get_profile(db, user_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return UserProfile.model_validate(user)


@router.put("/edit/{user_id}", response_model=ProfileUpdateResponse)
async def edit_profile(
    user_id: int,
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileUpdateResponse:
    """Edit a profile; allowed for its owner and for admins."""
    try:
        user = accounts.edit_profile(
            db, current_user, user_id, payload.model_dump(exclude_unset=True)
        )
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=UserProfile.model_validate(user),
    )


@router.post("/post", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostResponse:
    """Create a post; `isPublic=false` makes it subscribers-only."""
    try:
        post = posts.create_post(
            db,
            current_user,
            title=payload.title,
            content=payload.content,
            tags=payload.tags,
            is_public=payload.is_public,
            is_published=payload.is_published,
        )
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return PostResponse.model_validate(post)


@router.post("/like/{post_id}", response_model=PostActionResponse)
async def like_post(post_id: int, current_user: CurrentUserDep, db: SessionDep) -> PostActionResponse:
    """Like a post once."""
    try:
        post = relationships.like_post(db, current_user, post_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return PostActionResponse(message="Like added", post=PostResponse.model_validate(post))


@router.delete("/like/{post_id}", response_model=PostActionResponse)
async def unlike_post(
    post_id: int, current_user: CurrentUserDep, db: SessionDep
) -> PostActionResponse:
    """Remove the caller's like, if any."""
    try:
        post = relationships.unlike_post(db, current_user, post_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return PostActionResponse(message="Like removed", post=PostResponse.model_validate(post))


@router.get("/bookmarks", response_model=list[PostResponse])
async def list_bookmarks(current_user: CurrentUserDep, db: SessionDep) -> list[PostResponse]:
    """List the caller's bookmarked posts."""
    return [PostResponse.model_validate(post) for post in posts.bookmarked_posts(db, current_user)]


@router.post("/bookmarks/{post_id}", response_model=BookmarksResponse)
async def add_bookmark(
    post_id: int, current_user: CurrentUserDep, db: SessionDep
) -> BookmarksResponse:
    """Bookmark a post."""
    try:
        bookmarks = relationships.add_bookmark(db, current_user, post_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return BookmarksResponse(message="Bookmarked", bookmarks=bookmarks)


@router.delete("/bookmarks/{post_id}", response_model=BookmarksResponse)
async def remove_bookmark(
    post_id: int, current_user: CurrentUserDep, db: SessionDep
) -> BookmarksResponse:
    """Remove a bookmark."""
    bookmarks = relationships.remove_bookmark(db, current_user, post_id)
    return BookmarksResponse(message="Bookmark removed", bookmarks=bookmarks)


@router.post("/comment/{post_id}", response_model=PostActionResponse)
async def add_comment(
    post_id: int,
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostActionResponse:
    """Comment on a post the caller may read."""
    try:
        post = posts.add_comment(db, current_user, post_id, payload.comment)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return PostActionResponse(message="Comment added", post=PostResponse.model_validate(post))


@router.delete("/comment/{post_id}/{comment_id}", response_model=PostActionResponse)
async def delete_comment(
    post_id: int,
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostActionResponse:
    """Delete one of the caller's comments (admins may delete any)."""
    try:
        post = posts.delete_comment(db, current_user, post_id, comment_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return PostActionResponse(message="Comment deleted", post=PostResponse.model_validate(post))


@router.post("/follow/{target_user_id}", response_model=MessageResponse)
async def follow_user(
    target_user_id: int, current_user: CurrentUserDep, db: SessionDep
) -> MessageResponse:
    """Follow another user."""
    try:
        relationships.follow(db, current_user, target_user_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return MessageResponse(message="Followed user successfully")


@router.post("/unfollow/{target_user_id}", response_model=MessageResponse)
async def unfollow_user(
    target_user_id: int, current_user: CurrentUserDep, db: SessionDep
) -> MessageResponse:
    """Stop following a user."""
    try:
        relationships.unfollow(db, current_user, target_user_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return MessageResponse(message="Unfollowed user successfully")
