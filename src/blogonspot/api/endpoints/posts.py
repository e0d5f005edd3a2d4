# src/blogonspot/api/endpoints/posts.py
"""Public post listings and single-post reads."""

from __future__ import annotations

from fastapi import APIRouter, Query

from blogonspot.api.dependencies import OptionalUserDep, SessionDep
from blogonspot.schemas.post import PostResponse
from blogonspot.services import posts
from blogonspot.services.errors import ServiceError, to_http_exception

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=list[PostResponse])
async def list_posts(
    db: SessionDep,
    author: int | None = Query(None, description="Restrict to one author"),
    search: str | None = Query(None, description="Match title, content or tags"),
) -> list[PostResponse]:
    """List published public posts, newest first."""
    return [
        PostResponse.model_validate(post)
        for post in posts.list_posts(db, author_id=author, search=search)
    ]


@router.get("/search", response_model=list[PostResponse])
async def search_posts(
    db: SessionDep,
    q: str | None = Query(None, description="Search term"),
) -> list[PostResponse]:
    """Search published public posts; an empty term returns nothing."""
    return [PostResponse.model_validate(post) for post in posts.search_posts(db, q)]


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: SessionDep, viewer: OptionalUserDep) -> PostResponse:
    """Fetch one post.

    Drafts answer 404; subscribers-only posts answer 403 unless the caller is
    the author, an admin or an active subscriber of the author.
    """
    try:
        post = posts.get_post(db, viewer, post_id)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return PostResponse.model_validate(post)
