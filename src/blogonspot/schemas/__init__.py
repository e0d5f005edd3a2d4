# src/blogonspot/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
JSON keys are camelCase; requests also accept snake_case.
"""

from .admin import DashboardResponse, DashboardStats, UserActionResponse
from .common import APIModel, MessageResponse
from .plagiarism import ContentRequest, OriginalityAssessmentResponse, SimilarityReportResponse
from .post import (
    AdminContentCreate,
    BookmarksResponse,
    CommentCreate,
    CreatorContentResponse,
    FeedResponse,
    PostActionResponse,
    PostCreate,
    PostListResponse,
    PostResponse,
)
from .subscription import MySubscriptionEntry, SubscribeResponse, SubscriptionResponse
from .summarize import SummarizeRequest, SummarizeResponse
from .user import (
    AdminCreatorEntry,
    CreatorEntry,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    UserDirectoryEntry,
    UserProfile,
)

__all__ = [
    "APIModel", "MessageResponse",
    "DashboardResponse", "DashboardStats", "UserActionResponse",
    "ContentRequest", "OriginalityAssessmentResponse", "SimilarityReportResponse",
    "AdminContentCreate", "BookmarksResponse", "CommentCreate", "CreatorContentResponse",
    "FeedResponse", "PostActionResponse", "PostCreate", "PostListResponse", "PostResponse",
    "MySubscriptionEntry", "SubscribeResponse", "SubscriptionResponse",
    "SummarizeRequest", "SummarizeResponse",
    "AdminCreatorEntry", "CreatorEntry", "LoginRequest", "LoginResponse",
    "SignupRequest", "SignupResponse", "UserDirectoryEntry", "UserProfile",
]
