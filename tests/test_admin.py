# mypy: ignore-errors
"""Admin console: moderation, dashboard and admin content."""

from fastapi import status

from blogonspot.models import Bookmark, Comment, Post, PostLike


def test_admin_routes_reject_regular_users(client, auth_token):
    for method, path in [
        ("get", "/api/admin/users"),
        ("get", "/api/admin/dashboard"),
        ("get", "/api/admin/creators"),
        ("put", "/api/admin/users/1/ban"),
        ("delete", "/api/admin/posts/1"),
    ]:
        response = client.request(method.upper(), path, headers=auth_token)
        assert response.status_code == status.HTTP_403_FORBIDDEN, path
        assert response.json()["message"] == "Access denied. Admins only."


def test_admin_routes_require_token(client):
    response = client.get("/api/admin/dashboard")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_list_users_includes_disabled(client, admin_auth_token, test_user, user_factory):
    user_factory("ghost", is_active=False)
    response = client.get("/api/admin/users", headers=admin_auth_token)
    assert response.status_code == status.HTTP_200_OK
    names = {entry["username"] for entry in response.json()}
    assert names == {"admin", "author", "ghost"}


def test_ban_blocks_login_and_existing_tokens(
    client, admin_auth_token, test_user, auth_token, test_password
):
    banned = client.put(f"/api/admin/users/{test_user.id}/ban", headers=admin_auth_token)
    assert banned.status_code == status.HTTP_200_OK
    assert banned.json()["message"] == "User banned"
    assert banned.json()["user"]["isActive"] is False

    login = client.post("/api/user/login", json={"email": test_user.email, "password": test_password})
    assert login.status_code == status.HTTP_403_FORBIDDEN

    stale = client.get("/api/user/bookmarks", headers=auth_token)
    assert stale.status_code == status.HTTP_403_FORBIDDEN
    assert stale.json()["message"] == "Account is disabled"

    unbanned = client.put(f"/api/admin/users/{test_user.id}/unban", headers=admin_auth_token)
    assert unbanned.json()["message"] == "User unbanned"
    assert client.get("/api/user/bookmarks", headers=auth_token).status_code == status.HTTP_200_OK


def test_ban_unknown_user(client, admin_auth_token):
    response = client.put("/api/admin/users/5555/ban", headers=admin_auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["message"] == "User not found"


def test_delete_post_removes_dependents(
    client, db_session, admin_auth_token, public_post, test_user, other_auth_token
):
    client.post(f"/api/user/like/{public_post.id}", headers=other_auth_token)
    client.post(f"/api/user/bookmarks/{public_post.id}", headers=other_auth_token)
    client.post(
        f"/api/user/comment/{public_post.id}", json={"comment": "bye"}, headers=other_auth_token
    )
    post_id = public_post.id

    response = client.delete(f"/api/admin/posts/{post_id}", headers=admin_auth_token)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Post deleted", "postId": post_id}

    assert db_session.get(Post, post_id) is None
    assert db_session.query(Comment).filter(Comment.post_id == post_id).count() == 0
    assert db_session.query(PostLike).filter(PostLike.post_id == post_id).count() == 0
    assert db_session.query(Bookmark).filter(Bookmark.post_id == post_id).count() == 0

    assert client.get(f"/api/posts/{post_id}").status_code == status.HTTP_404_NOT_FOUND
    assert client.get(f"/api/user/profile/{test_user.id}").json()["posts"] == []
    assert client.get("/api/user/bookmarks", headers=other_auth_token).json() == []


def test_delete_missing_post(client, admin_auth_token):
    response = client.delete("/api/admin/posts/8080", headers=admin_auth_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["message"] == "Post not found"


def test_dashboard(client, admin_auth_token, test_user, other_user, post_factory, subscribe):
    post_factory(title="live")
    post_factory(title="draft", is_published=False)
    subscribe(other_user, test_user)

    response = client.get("/api/admin/dashboard", headers=admin_auth_token)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["stats"] == {
        "totalUsers": 3,
        "totalBlogs": 2,
        "publishedBlogs": 1,
        "unpublishedBlogs": 1,
        "totalSubscriptions": 1,
    }
    assert len(body["recentUsers"]) == 3
    assert [blog["title"] for blog in body["recentBlogs"]] == ["draft", "live"]


def test_admin_content_is_published(client, admin_auth_token, admin_user):
    response = client.post(
        "/api/admin/create-content",
        json={"title": "Announcement", "content": "Welcome!"},
        headers=admin_auth_token,
    )
    assert response.status_code == status.HTTP_201_CREATED
    post = response.json()["post"]
    assert post["isPublished"] is True
    assert post["isPublic"] is True
    assert post["author"]["id"] == admin_user.id

    listed = client.get("/api/admin/create-content").json()
    assert [item["title"] for item in listed["posts"]] == ["Announcement"]


def test_admin_content_requires_fields(client, admin_auth_token):
    response = client.post(
        "/api/admin/create-content", json={"title": "No body"}, headers=admin_auth_token
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Title and content are required"


def test_restricted_admin_content_hidden_from_anonymous(client, admin_auth_token, auth_token):
    client.post(
        "/api/admin/create-content",
        json={"title": "Members", "content": "Only", "isPublic": False},
        headers=admin_auth_token,
    )
    assert client.get("/api/admin/create-content").json()["posts"] == []
    assert client.get("/api/admin/create-content", headers=auth_token).json()["posts"] == []
    admin_view = client.get("/api/admin/create-content", headers=admin_auth_token).json()
    assert [item["title"] for item in admin_view["posts"]] == ["Members"]


def test_verify_and_unverify_creator(client, admin_auth_token, test_user):
    verified = client.put(f"/api/admin/verify-creator/{test_user.id}", headers=admin_auth_token)
    assert verified.status_code == status.HTTP_200_OK
    assert verified.json()["message"] == "Creator verified successfully"
    assert verified.json()["user"]["isVerifiedCreator"] is True

    unverified = client.put(f"/api/admin/unverify-creator/{test_user.id}", headers=admin_auth_token)
    assert unverified.json()["user"]["isVerifiedCreator"] is False


def test_admin_creator_listing_includes_email(client, admin_auth_token, test_user):
    response = client.get(
        "/api/admin/creators", params={"search": "author@"}, headers=admin_auth_token
    )
    assert response.status_code == status.HTTP_200_OK
    entries = response.json()
    assert [entry["email"] for entry in entries] == [test_user.email]
    assert entries[0]["subscriberCount"] == 0
