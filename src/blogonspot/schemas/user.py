# src/blogonspot/schemas/user.py
"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from .common import APIModel


class SignupRequest(APIModel):
    """Account registration payload.

    Required fields are checked by the account service so that blank strings
    are rejected with the same message as missing ones.
    """

    username: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = Field(None, description="'user' (default) or 'admin'")
    admin_key: str | None = Field(None, description="Shared secret required for role=admin")


class SignupResponse(APIModel):
    """Registration acknowledgement."""

    message: str
    user_id: int


class LoginRequest(APIModel):
    """Credentials presented at login."""

    email: str | None = None
    password: str | None = None


class LoginResponse(BaseModel):
    """Response returned after successful login.

    Keys are snake_case on the wire for compatibility with existing clients.
    """

    message: str
    token: str = Field(..., description="Bearer token (JWT)")
    user_id: int
    role: str


class UserSummary(APIModel):
    """Minimal author information embedded in posts."""

    id: int
    username: str
    avatar: str = ""


class UserProfile(APIModel):
    """Public profile; never carries the password hash."""

    id: int
    username: str
    email: str
    avatar: str
    role: str
    since: datetime
    last_login: datetime
    is_active: bool
    bio: str
    creator_bio: str
    creator_category: str
    is_verified_creator: bool
    following: list[int] = Field(default_factory=list)
    followers: list[int] = Field(default_factory=list)
    subscriptions: list[int] = Field(default_factory=list)
    subscribers: list[int] = Field(default_factory=list)
    bookmarks: list[int] = Field(default_factory=list)
    posts: list[int] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _flatten_relations(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return data
        extracted: dict[str, Any] = {}
        for field_name in cls.model_fields:
            value = getattr(data, field_name, None)
            if isinstance(value, list):
                value = [item.id for item in value]
            extracted[field_name] = value
        return extracted


class ProfileUpdateRequest(APIModel):
    """Editable profile fields; only the fields present are applied."""

    username: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, min_length=3, max_length=255)
    password: str | None = None
    avatar: str | None = None
    bio: str | None = None


class ProfileUpdateResponse(APIModel):
    """Result of a profile edit."""

    message: str
    user: UserProfile


class CreatorProfileUpdateRequest(APIModel):
    """Creator bio and category; both are required."""

    creator_bio: str | None = None
    creator_category: str | None = None


class UserDirectoryEntry(APIModel):
    """Entry in the public user directory."""

    id: int
    username: str
    avatar: str
    creator_bio: str
    creator_category: str
    is_verified_creator: bool
    since: datetime


class CreatorEntry(APIModel):
    """Creator listing entry with subscriber information."""

    id: int
    username: str
    avatar: str
    creator_bio: str
    creator_category: str
    is_verified_creator: bool
    since: datetime
    subscribers: list[int] = Field(default_factory=list)
    subscriber_count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _count_subscribers(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return data
        subscriber_ids = [user.id for user in data.subscribers]
        extracted = {
            "id": data.id,
            "username": data.username,
            "avatar": data.avatar,
            "creator_bio": data.creator_bio,
            "creator_category": data.creator_category,
            "is_verified_creator": data.is_verified_creator,
            "since": data.since,
            "subscribers": subscriber_ids,
            "subscriber_count": len(subscriber_ids),
        }
        if "email" in cls.model_fields:
            extracted["email"] = data.email
        return extracted


class AdminCreatorEntry(CreatorEntry):
    """Creator listing entry for admins, including the email address."""

    email: str = ""
