# src/blogonspot/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from blogonspot.models import Visibility

from .common import APIModel
from .user import UserSummary


class PostCreate(APIModel):
    """Schema for creating a new post.

    `title` and `content` are required; they are checked by the post service
    so blank strings are rejected too.
    """

    title: str | None = Field(None, max_length=300)
    content: str | None = None
    tags: list[str] | None = Field(None, description="Free-form tags; duplicates are dropped")
    is_public: bool | None = Field(None, description="False makes the post subscribers-only")
    is_published: bool | None = Field(None, description="False stores the post as a draft")


class AdminContentCreate(APIModel):
    """Schema for admin-authored content; always published."""

    title: str | None = Field(None, max_length=300)
    content: str | None = None
    tags: list[str] | None = None
    is_public: bool | None = None


class CommentCreate(APIModel):
    """Schema for adding a comment."""

    comment: str | None = None


def _author_summary(author: Any) -> dict[str, Any] | None:
    if author is None:
        return None
    return {"id": author.id, "username": author.username, "avatar": author.avatar}


class CommentResponse(APIModel):
    """Comment as returned by the API."""

    id: int
    user: int | None
    username: str | None = None
    comment: str
    timestamp: datetime

    @model_validator(mode="before")
    @classmethod
    def _from_orm(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return data
        return {
            "id": data.id,
            "user": data.user_id,
            "username": data.user.username if data.user is not None else None,
            "comment": data.comment,
            "timestamp": data.timestamp,
        }


class PostResponse(APIModel):
    """Schema for post information returned by the API."""

    id: int
    title: str
    content: str
    author: UserSummary | None
    tags: list[str]
    comments: list[CommentResponse] = Field(default_factory=list)
    likes: list[int] = Field(default_factory=list)
    is_published: bool
    is_public: bool
    visibility: Visibility
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="before")
    @classmethod
    def _from_orm(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return data
        return {
            "id": data.id,
            "title": data.title,
            "content": data.content,
            "author": _author_summary(data.author),
            "tags": list(data.tags or []),
            "comments": list(data.comments),
            "likes": data.like_user_ids,
            "is_published": data.is_published,
            "is_public": data.is_public,
            "visibility": data.visibility,
            "created_at": data.created_at,
            "updated_at": data.updated_at,
        }


class PostActionResponse(APIModel):
    """Acknowledgement carrying the affected post."""

    message: str
    post: PostResponse


class PostListResponse(APIModel):
    """A list of posts wrapped in an object."""

    posts: list[PostResponse]


class BookmarksResponse(APIModel):
    """The caller's bookmark set after a change."""

    message: str
    bookmarks: list[int]


class Pagination(APIModel):
    """Page metadata for the personalized feed."""

    current_page: int
    total_pages: int
    total_posts: int
    has_next: bool
    has_prev: bool


class FeedResponse(APIModel):
    """A page of the personalized feed."""

    posts: list[PostResponse]
    pagination: Pagination


class CreatorContentResponse(APIModel):
    """A creator's posts as visible to the caller."""

    posts: list[PostResponse]
    is_subscribed: bool


class DeletedPostResponse(APIModel):
    """Acknowledgement of a post deletion."""

    message: str
    post_id: int
