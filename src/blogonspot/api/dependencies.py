"""Shared API dependencies for authentication and common functionality."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from blogonspot.core.security import decode_access_token
from blogonspot.db.session import get_db
from blogonspot.models import User

logger = logging.getLogger(__name__)

# HTTP Bearer scheme; missing credentials are reported by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_user_id(token: str) -> int:
    """Extract the user id from a signed token.

    Raises:
        HTTPException: If the token is malformed, forged or expired.
    """
    try:
        payload = decode_access_token(token)
    except JWTError as err:
        raise _unauthorized("Invalid or expired token") from err

    subject = payload.get("sub", payload.get("id"))
    try:
        return int(subject)
    except (TypeError, ValueError) as err:
        raise _unauthorized("Invalid token payload") from err


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Get the current authenticated user from the bearer token.

    The account is re-loaded on every request, so deleted or disabled accounts
    are rejected even while their tokens are still unexpired.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: 401 if the token is missing or invalid or the user no
            longer exists, 403 if the account is disabled.
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("No token provided")

    user_id = _decode_user_id(credentials.credentials)
    user = db.get(User, user_id)
    if user is None:
        raise _unauthorized("User not found")
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )
    return user


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Resolve the caller if a valid token is presented, else treat as anonymous."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return get_current_user(credentials, db)
    except HTTPException as exc:
        logger.debug("Ignoring unusable credentials on optional route: %s", exc.detail)
        return None


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def require_admin(current_user: CurrentUserDep) -> User:
    """Allow only admin accounts through."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admins only.",
        )
    return current_user


AdminDep = Annotated[User, Depends(require_admin)]
