"""Schemas for the admin console."""

from datetime import datetime

from .common import APIModel
from .post import PostResponse
from .user import UserProfile


class DashboardStats(APIModel):
    """Aggregate counts shown on the admin dashboard."""

    total_users: int
    total_blogs: int
    published_blogs: int
    unpublished_blogs: int
    total_subscriptions: int


class RecentUser(APIModel):
    """Recently registered account."""

    id: int
    username: str
    email: str
    since: datetime


class DashboardResponse(APIModel):
    """Admin dashboard payload."""

    stats: DashboardStats
    recent_users: list[RecentUser]
    recent_blogs: list[PostResponse]


class UserActionResponse(APIModel):
    """Acknowledgement of an admin action on a user."""

    message: str
    user: UserProfile
