"""Account registration, login and profile management."""
from __future__ import annotations

import logging
import secrets
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogonspot.core import security
from blogonspot.core.settings import settings
from blogonspot.db.search import ilike_any
from blogonspot.db.time import utcnow
from blogonspot.models import ROLE_ADMIN, ROLE_USER, User
from blogonspot.services.access import can_edit_profile
from blogonspot.services.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

__all__ = [
    "signup",
    "login",
    "get_profile",
    "edit_profile",
    "update_creator_profile",
    "list_users",
    "list_creators",
]

DIRECTORY_LIMIT = 50
EDITABLE_PROFILE_FIELDS = ("username", "email", "password", "avatar", "bio")


def _email_taken(db: Session, email: str, *, exclude_id: int | None = None) -> bool:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def signup(
    db: Session,
    *,
    username: str | None,
    email: str | None,
    password: str | None,
    role: str | None = None,
    admin_key: str | None = None,
) -> User:
    """Register a new account.

    Args:
        db: Database session.
        username: Display name.
        email: Login identifier; must be unique.
        password: Plain-text password, stored as a bcrypt hash.
        role: "admin" requests an admin account; anything else makes a user.
        admin_key: Shared secret that must match the configured admin key
            when `role` is "admin".

    Returns:
        The persisted user.

    Raises:
        ValidationFailedError: If a required field is missing.
        ConflictError: If the email is already registered.
        ForbiddenError: If an admin account is requested with a wrong key.
    """
    if not username or not email or not password:
        raise ValidationFailedError("username, email and password are required")
    if _email_taken(db, email):
        raise ConflictError("Email already registered")

    final_role = ROLE_USER
    if role == ROLE_ADMIN:
        if not admin_key or not secrets.compare_digest(admin_key, settings.admin_key):
            raise ForbiddenError("Invalid admin key")
        final_role = ROLE_ADMIN

    user = User(
        username=username,
        email=email,
        password_hash=security.hash_password(password),
        role=final_role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Email already registered") from exc

    db.refresh(user)
    logger.info("Registered user %s as %s", user.id, final_role)
    return user


def login(db: Session, *, email: str | None, password: str | None) -> tuple[User, str]:
    """Verify credentials and issue an access token.

    The password is checked before the account state so that a disabled
    account is only revealed to someone holding its credentials.
    """
    if not email or not password:
        raise ValidationFailedError("email and password required")

    user = db.query(User).filter(User.email == email).first()
    if user is None or not security.verify_password(password, user.password_hash):
        raise ValidationFailedError("Invalid email or password")
    if not user.is_active:
        raise ForbiddenError("Account is disabled")

    user.last_login = utcnow()
    db.commit()
    db.refresh(user)

    token = security.create_access_token(user.id, user.role)
    logger.info("User %s logged in", user.id)
    return user, token


def get_profile(db: Session, user_id: int) -> User:
    """Return a user by id or raise `NotFoundError`."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def edit_profile(
    db: Session,
    actor: User,
    user_id: int,
    updates: Mapping[str, Any],
) -> User:
    """Apply profile edits; the owner or an admin may edit.

    Only username, email, password, avatar and bio are editable. An empty
    password leaves the stored hash untouched.
    """
    if not can_edit_profile(actor, user_id):
        raise ForbiddenError("Unauthorized")
    user = get_profile(db, user_id)

    for key in EDITABLE_PROFILE_FIELDS:
        if key not in updates or updates[key] is None:
            continue
        value = updates[key]
        if key == "password":
            if value:
                user.password_hash = security.hash_password(value)
            continue
        if key == "email" and value != user.email and _email_taken(db, value, exclude_id=user.id):
            raise ConflictError("Email already registered")
        setattr(user, key, value)

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Email already registered") from exc

    db.refresh(user)
    logger.info("User %s updated profile of %s", actor.id, user.id)
    return user


def update_creator_profile(
    db: Session,
    actor: User,
    *,
    creator_bio: str | None,
    creator_category: str | None,
) -> User:
    """Set the caller's creator bio and category."""
    if not creator_bio or not creator_category:
        raise ValidationFailedError("Creator bio and category are required")
    actor.creator_bio = creator_bio
    actor.creator_category = creator_category
    db.commit()
    db.refresh(actor)
    return actor


def list_users(db: Session, search: str | None = None) -> Sequence[User]:
    """Public user directory: active users, newest first."""
    query = db.query(User).filter(User.is_active.is_(True))
    term = (search or "").strip()
    if term:
        query = query.filter(ilike_any((User.username, User.email), term))
    return query.order_by(User.since.desc(), User.id.desc()).limit(DIRECTORY_LIMIT).all()


def list_creators(
    db: Session,
    search: str | None = None,
    *,
    include_profile_fields: bool = True,
    limit: int | None = DIRECTORY_LIMIT,
) -> Sequence[User]:
    """List active accounts as potential creators, newest first.

    The public listing also matches the search term against the creator bio
    and category; the admin listing only matches username and email.
    """
    query = db.query(User).filter(User.is_active.is_(True))
    term = (search or "").strip()
    if term:
        columns = [User.username, User.email]
        if include_profile_fields:
            columns += [User.creator_category, User.creator_bio]
        query = query.filter(ilike_any(columns, term))
    query = query.order_by(User.since.desc(), User.id.desc())
    if limit is not None:
        query = query.limit(limit)
    return query.all()
