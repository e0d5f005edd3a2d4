# tests/test_health.py
from typing import Any

from fastapi import status


def test_root_responds(client: Any) -> None:
    """The root endpoint describes the API."""
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["name"] == "BlogOnSpot"
    assert body["status"] == "API up"


def test_health_reports_database(client: Any) -> None:
    """The health check touches the database and reports AI as disabled without a key."""
    r = client.get("/health")
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["status"] == "ok"
    assert body["components"] == {"database": "healthy", "ai": "disabled"}


def test_unknown_route_uses_message_shape(client: Any) -> None:
    r = client.get("/api/nope")
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert "message" in r.json()


def test_malformed_body_is_400(client: Any, auth_token: dict[str, str]) -> None:
    r = client.post(
        "/api/user/post",
        content="{not json",
        headers={**auth_token, "Content-Type": "application/json"},
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert "message" in r.json()
