# src/blogonspot/api/endpoints/users.py
"""Public user directory."""

from __future__ import annotations

from fastapi import APIRouter, Query

from blogonspot.api.dependencies import SessionDep
from blogonspot.schemas.user import UserDirectoryEntry
from blogonspot.services import accounts

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserDirectoryEntry])
async def list_users(
    db: SessionDep,
    search: str | None = Query(None, description="Match against username or email"),
) -> list[UserDirectoryEntry]:
    """List active users, newest first."""
    return [UserDirectoryEntry.model_validate(user) for user in accounts.list_users(db, search)]
