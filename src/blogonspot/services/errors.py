"""Domain errors raised by the service layer.

Endpoints translate these into HTTP responses with `to_http_exception`.
"""
from __future__ import annotations

from fastapi import HTTPException, status


class ServiceError(RuntimeError):
    """Base class for failures the caller can act on."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationFailedError(ServiceError):
    """Input is missing or malformed."""


class ConflictError(ServiceError):
    """The relation or record already exists (duplicate follow, like, subscribe, email)."""


class SelfRelationError(ServiceError):
    """A user tried to follow or subscribe to themselves."""


class NotFoundError(ServiceError):
    """A referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(ServiceError):
    """The caller is authenticated but not allowed to perform the action."""

    status_code = status.HTTP_403_FORBIDDEN


def to_http_exception(err: ServiceError) -> HTTPException:
    """Map a service error onto an `HTTPException` with the same message."""
    return HTTPException(status_code=err.status_code, detail=err.message)
