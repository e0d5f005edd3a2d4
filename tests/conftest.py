# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from typing import Any

import httpx
import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_KEY", "test-admin-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.pop("GEMINI_API_KEY", None)
os.environ.pop("GOOGLE_API_KEY", None)

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from blogonspot.api.endpoints import ai as ai_endpoints  # noqa: E402
from blogonspot.core.security import create_access_token, hash_password  # noqa: E402
from blogonspot.db.session import Base  # noqa: E402
from blogonspot.db.session import get_db as app_get_session  # noqa: E402
from blogonspot.main import app as fastapi_app  # noqa: E402
from blogonspot.models import ROLE_ADMIN, Post, Subscription, User  # noqa: E402
from blogonspot.services.ai import GenerativeAIClient  # noqa: E402

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct horse battery staple"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Service-level commits release a savepoint; the outer transaction is
    # rolled back after each test.
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _make_user(
    db_session: Session,
    *,
    username: str,
    email: str,
    role: str = "user",
    is_active: bool = True,
) -> User:
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
        is_active=is_active,
    )
    db_session.add(user)
    db_session.flush()
    db_session.refresh(user)
    return user


@pytest.fixture()
def test_password() -> str:
    """Plain-text password shared by every fixture account."""
    return TEST_PASSWORD


def _headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture()
def user_factory(db_session: Session) -> Callable[..., User]:
    """Return a helper that persists additional users."""

    def _factory(username: str, **kwargs: Any) -> User:
        return _make_user(
            db_session,
            username=username,
            email=kwargs.pop("email", f"{username}@example.com"),
            **kwargs,
        )

    return _factory


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted author account."""
    return _make_user(db_session, username="author", email="author@example.com")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted account with no subscriptions."""
    return _make_user(db_session, username="reader", email="reader@example.com")


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    """Create and return a persisted admin account."""
    return _make_user(db_session, username="admin", email="admin@example.com", role=ROLE_ADMIN)


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return _headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return _headers(other_user)


@pytest.fixture()
def admin_auth_token(admin_user: User) -> dict[str, str]:
    """Return authorization headers for the admin account."""
    return _headers(admin_user)


@pytest.fixture()
def post_factory(db_session: Session, test_user: User) -> Callable[..., Post]:
    """Return a helper that persists posts (by default authored by `test_user`)."""

    def _factory(**kwargs: Any) -> Post:
        post = Post(
            title=kwargs.pop("title", "A post"),
            content=kwargs.pop("content", "Some interesting content about gardening."),
            author_id=kwargs.pop("author_id", test_user.id),
            tags=kwargs.pop("tags", []),
            is_published=kwargs.pop("is_published", True),
            is_public=kwargs.pop("is_public", True),
        )
        db_session.add(post)
        db_session.flush()
        db_session.refresh(post)
        return post

    return _factory


@pytest.fixture()
def public_post(post_factory: Callable[..., Post]) -> Post:
    """A published public post by `test_user`."""
    return post_factory(title="Public post", content="Open to everyone who visits.")


@pytest.fixture()
def restricted_post(post_factory: Callable[..., Post]) -> Post:
    """A published subscribers-only post by `test_user`."""
    return post_factory(title="T", content="C", is_public=False)


@pytest.fixture()
def draft_post(post_factory: Callable[..., Post]) -> Post:
    """An unpublished post by `test_user`."""
    return post_factory(title="Draft", content="Work in progress.", is_published=False)


@pytest.fixture()
def subscribe(db_session: Session) -> Callable[[User, User], Subscription]:
    """Return a helper that stores an active subscription directly."""

    def _subscribe(subscriber: User, creator: User) -> Subscription:
        row = Subscription(subscriber_id=subscriber.id, creator_id=creator.id, is_active=True)
        db_session.add(row)
        db_session.flush()
        return row

    return _subscribe


@pytest.fixture()
def hide_from_get(db_session: Session, monkeypatch: pytest.MonkeyPatch) -> Callable[[type], None]:
    """Return a helper that makes `db_session.get` miss stored rows of a model.

    Mimics a concurrent request inserting the row between the existence
    check and the commit. The identity map is cleared so the session holds
    no copy of the hidden rows.
    """

    def _hide(model: type) -> None:
        real_get = db_session.get

        def _get(entity: Any, ident: Any, *args: Any, **kwargs: Any) -> Any:
            if entity is model:
                return None
            return real_get(entity, ident, *args, **kwargs)

        db_session.expunge_all()
        monkeypatch.setattr(db_session, "get", _get)

    return _hide


@pytest.fixture()
def ai_responses() -> list[httpx.Response]:
    """Queue of canned provider responses consumed by `fake_ai_client`."""
    return []


@pytest.fixture()
def ai_requests() -> list[httpx.Request]:
    """Requests seen by the mock provider."""
    return []


@pytest.fixture()
def fake_ai_client(
    app: FastAPI,
    ai_responses: list[httpx.Response],
    ai_requests: list[httpx.Request],
) -> Iterator[GenerativeAIClient]:
    """Install an AI client whose HTTP transport replays `ai_responses`."""

    def handler(request: httpx.Request) -> httpx.Response:
        ai_requests.append(request)
        if not ai_responses:
            return httpx.Response(500, json={"error": {"message": "no canned response"}})
        return ai_responses.pop(0)

    ai_client = GenerativeAIClient(
        api_key="test-key",
        base_url="https://ai.test/v1beta",
        models=["model-a", "model-b"],
        timeout_seconds=5,
        transport=httpx.MockTransport(handler),
    )
    app.dependency_overrides[ai_endpoints.get_ai_client_dep] = lambda: ai_client
    try:
        yield ai_client
    finally:
        app.dependency_overrides.pop(ai_endpoints.get_ai_client_dep, None)
