"""User Routes — list/detail/create/update/delete and relation queries.

Tests cover:
    - POST /api/users creates a user with initial posts in one go (201)
    - duplicate email → 409; unknown id → 404; non-positive id → 400
    - GET /api/users is paginated with meta
    - GET /api/users/{id}/posts hides drafts from everyone but the owner
    - PATCH/DELETE require auth (401) and ownership (403)
    - DELETE cascades to the user's posts and comments
"""

from sqlalchemy import func, select

from blog_api.models import Comment, Post, User


async def test_create_user_with_initial_posts(client):
    res = await client.post("/api/users", json={
        "email": "writer@example.com",
        "password": "password123",
        "name": "Writer",
        "posts": [
            {"title": "First", "content": "hello", "published": True},
            {"title": "Second"},
        ],
    })
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["email"] == "writer@example.com"
    assert data["post_count"] == 2
    assert "password" not in data

    posts = await client.get(f"/api/users/{data['id']}/posts")
    assert [p["title"] for p in posts.json()["data"]] == ["First"]


async def test_create_user_duplicate_email_returns_409(client, alice):
    res = await client.post("/api/users", json={
        "email": "alice@example.com", "password": "password123",
    })
    assert res.status_code == 409


async def test_create_user_with_invalid_post_creates_nothing(client, test_db):
    res = await client.post("/api/users", json={
        "email": "broken@example.com",
        "password": "password123",
        "posts": [{"title": "ok"}, {"title": "   "}],
    })
    assert res.status_code == 400
    count = await test_db.scalar(select(func.count()).select_from(User))
    assert count == 0


async def test_get_user_returns_post_count(client, alice):
    c, user = alice
    await c.post("/api/posts", json={"title": "One"})
    await c.post("/api/posts", json={"title": "Two"})

    res = await client.get(f"/api/users/{user['id']}")
    assert res.status_code == 200
    assert res.json()["data"]["post_count"] == 2


async def test_get_missing_user_returns_404(client):
    res = await client.get("/api/users/9999")
    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "User with id 9999 not found"}


async def test_get_user_with_non_positive_id_returns_400(client):
    res = await client.get("/api/users/0")
    assert res.status_code == 400


async def test_user_ids_beyond_integer_range_return_400(alice):
    c, _ = alice
    too_big = 2**63
    checks = [
        await c.get(f"/api/users/{too_big}"),
        await c.get(f"/api/users/{too_big}/posts"),
        await c.patch(f"/api/users/{too_big}", json={"name": "x"}),
        await c.delete(f"/api/users/{too_big}"),
        await c.get("/api/users", params={"page": too_big}),
    ]
    assert [r.status_code for r in checks] == [400] * len(checks)


async def test_list_users_is_paginated(client, register_user, client_factory):
    for i in range(5):
        await register_user(client_factory(), f"user{i}@example.com")

    res = await client.get("/api/users", params={"page": 2, "limit": 2})
    assert res.status_code == 200
    body = res.json()
    assert len(body["data"]) == 2
    assert body["meta"] == {
        "page": 2, "limit": 2, "total": 5, "total_pages": 3,
        "has_next": True, "has_prev": True,
    }


async def test_user_posts_show_drafts_only_to_owner(client, alice):
    c, user = alice
    await c.post("/api/posts", json={"title": "Public", "published": True})
    await c.post("/api/posts", json={"title": "Draft"})

    public_view = await client.get(f"/api/users/{user['id']}/posts")
    owner_view = await c.get(f"/api/users/{user['id']}/posts")
    assert [p["title"] for p in public_view.json()["data"]] == ["Public"]
    assert {p["title"] for p in owner_view.json()["data"]} == {"Public", "Draft"}


async def test_update_user_requires_auth(client, alice):
    _, user = alice
    res = await client.patch(f"/api/users/{user['id']}", json={"name": "X"})
    assert res.status_code == 401


async def test_update_other_user_returns_403(alice, bob):
    c, _ = alice
    _, bob_user = bob
    res = await c.patch(f"/api/users/{bob_user['id']}", json={"name": "Hacked"})
    assert res.status_code == 403


async def test_update_own_user(alice):
    c, user = alice
    res = await c.patch(f"/api/users/{user['id']}", json={"name": "Alice B."})
    assert res.status_code == 200
    assert res.json()["data"]["name"] == "Alice B."


async def test_update_email_to_taken_one_returns_409(alice, bob):
    c, user = alice
    res = await c.patch(f"/api/users/{user['id']}", json={"email": "bob@example.com"})
    assert res.status_code == 409


async def test_update_password_allows_login_with_new_one(client, alice):
    c, user = alice
    res = await c.patch(f"/api/users/{user['id']}", json={"password": "newpass456"})
    assert res.status_code == 200

    login = await client.post(
        "/api/auth/login",
        json={"email": "alice@example.com", "password": "newpass456"},
    )
    assert login.status_code == 200


async def test_update_user_with_empty_body_returns_400(alice):
    c, user = alice
    res = await c.patch(f"/api/users/{user['id']}", json={})
    assert res.status_code == 400


async def test_delete_user_cascades_posts_and_comments(alice, bob, test_db):
    alice_client, alice_user = alice
    bob_client, _ = bob
    post = (await alice_client.post("/api/posts", json={"title": "Hello"})).json()["data"]
    await bob_client.post(f"/api/posts/{post['id']}/comments", json={"content": "hi"})
    await alice_client.post(f"/api/posts/{post['id']}/comments", json={"content": "thanks"})

    res = await alice_client.delete(f"/api/users/{alice_user['id']}")
    assert res.status_code == 204
    assert res.content == b""

    assert await test_db.get(User, alice_user["id"]) is None
    assert await test_db.scalar(select(func.count()).select_from(Post)) == 0
    assert await test_db.scalar(select(func.count()).select_from(Comment)) == 0


async def test_delete_other_user_returns_403(alice, bob):
    c, _ = alice
    _, bob_user = bob
    res = await c.delete(f"/api/users/{bob_user['id']}")
    assert res.status_code == 403
