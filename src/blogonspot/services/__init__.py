# src/blogonspot/services/__init__.py
"""Business logic services for the BlogOnSpot application."""

from .ai import GenerativeAIClient, GenerativeAIError, get_ai_client
from .errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    SelfRelationError,
    ServiceError,
    ValidationFailedError,
)

__all__ = [
    "GenerativeAIClient", "GenerativeAIError", "get_ai_client",
    "ConflictError", "ForbiddenError", "NotFoundError",
    "SelfRelationError", "ServiceError", "ValidationFailedError",
]
