"""Auth Routes — register/login/refresh/logout/me over httponly cookies.

Tests cover:
    - register returns 201, sets both cookies, never returns the password
    - duplicate email → 409 (case-insensitive)
    - login with wrong password / unknown email → same 401
    - /me requires the access cookie; Bearer header is accepted too
    - refresh issues new cookies from the refresh cookie; access token is rejected as refresh
    - logout clears both cookies
    - password hashing and checking happen in the threadpool
"""

import threading

from blog_api.core import security
from blog_api.core.cookies import ACCESS_COOKIE_NAME, REFRESH_COOKIE_NAME
from blog_api.core.security import create_access_token


async def test_register_sets_cookies_and_hides_password(client):
    res = await client.post(
        "/api/auth/register",
        json={"email": "New@Example.com", "password": "password123", "name": "New"},
    )
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    user = body["data"]["user"]
    assert user["email"] == "new@example.com"
    assert "password" not in user

    set_cookie = res.headers.get_list("set-cookie")
    access = next(c for c in set_cookie if c.startswith(f"{ACCESS_COOKIE_NAME}="))
    refresh = next(c for c in set_cookie if c.startswith(f"{REFRESH_COOKIE_NAME}="))
    assert "HttpOnly" in access and "Max-Age=900" in access
    assert "HttpOnly" in refresh and "Max-Age=604800" in refresh
    assert "Path=/api/auth" in refresh


async def test_register_duplicate_email_returns_409(client, register_user):
    await register_user(client, "dup@example.com")
    res = await client.post(
        "/api/auth/register",
        json={"email": "DUP@example.com", "password": "password123"},
    )
    assert res.status_code == 409
    assert res.json() == {"success": False, "message": "Email is already registered"}


async def test_register_rejects_weak_password(client):
    res = await client.post(
        "/api/auth/register",
        json={"email": "weak@example.com", "password": "onlyletters"},
    )
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation failed"
    assert body["details"][0]["field"] == "password"


async def test_login_success_sets_cookies(client_factory, register_user):
    await register_user(client_factory(), "login@example.com")
    c = client_factory()
    res = await c.post(
        "/api/auth/login",
        json={"email": "login@example.com", "password": "password123"},
    )
    assert res.status_code == 200
    assert res.json()["data"]["user"]["email"] == "login@example.com"
    assert c.cookies.get(ACCESS_COOKIE_NAME)

    me = await c.get("/api/auth/me")
    assert me.status_code == 200


async def test_login_wrong_password_and_unknown_email_look_the_same(client, register_user):
    await register_user(client, "carol@example.com")
    wrong = await client.post(
        "/api/auth/login",
        json={"email": "carol@example.com", "password": "wrongpass1"},
    )
    unknown = await client.post(
        "/api/auth/login",
        json={"email": "nobody@example.com", "password": "password123"},
    )
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json()
    assert wrong.json()["message"] == "Invalid email or password"


async def test_me_without_cookie_returns_401(client):
    res = await client.get("/api/auth/me")
    assert res.status_code == 401
    assert res.json()["message"] == "Authentication required"


async def test_me_with_garbage_cookie_returns_401(client):
    client.cookies.set(ACCESS_COOKIE_NAME, "not-a-jwt")
    res = await client.get("/api/auth/me")
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid or expired token"


async def test_me_accepts_bearer_header(client_factory, alice):
    _, user = alice
    token = create_access_token(user["id"])
    res = await client_factory().get(
        "/api/auth/me", headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 200
    assert res.json()["data"]["user"]["id"] == user["id"]


async def test_refresh_issues_new_cookies(alice):
    c, user = alice
    res = await c.post("/api/auth/refresh")
    assert res.status_code == 200
    assert res.json()["data"]["user"]["id"] == user["id"]
    cookies = res.headers.get_list("set-cookie")
    assert any(h.startswith(f"{ACCESS_COOKIE_NAME}=") for h in cookies)
    assert any(h.startswith(f"{REFRESH_COOKIE_NAME}=") for h in cookies)


async def test_refresh_without_cookie_returns_401(client):
    res = await client.post("/api/auth/refresh")
    assert res.status_code == 401
    assert res.json()["message"] == "Refresh token required"


async def test_refresh_rejects_access_token(client_factory, alice):
    _, user = alice
    c = client_factory()
    c.cookies.set(REFRESH_COOKIE_NAME, create_access_token(user["id"]), path="/api/auth")
    res = await c.post("/api/auth/refresh")
    assert res.status_code == 401


async def test_logout_clears_cookies(alice):
    c, _ = alice
    res = await c.post("/api/auth/logout")
    assert res.status_code == 200
    assert res.json()["success"] is True
    cleared = res.headers.get_list("set-cookie")
    assert any(h.startswith(f'{ACCESS_COOKIE_NAME}=""') for h in cleared)
    assert any(h.startswith(f'{REFRESH_COOKIE_NAME}=""') for h in cleared)

    me = await c.get("/api/auth/me")
    assert me.status_code == 401


async def test_bcrypt_runs_off_the_event_loop(client, register_user, monkeypatch):
    loop_thread = threading.get_ident()
    seen: dict[str, int] = {}
    real_hash, real_verify = security.hash_password, security.verify_password

    def hash_password(plain):
        seen["hash"] = threading.get_ident()
        return real_hash(plain)

    def verify_password(plain, hashed):
        seen["verify"] = threading.get_ident()
        return real_verify(plain, hashed)

    monkeypatch.setattr(security, "hash_password", hash_password)
    monkeypatch.setattr(security, "verify_password", verify_password)

    await register_user(client, "threads@example.com")
    res = await client.post(
        "/api/auth/login",
        json={"email": "threads@example.com", "password": "password123"},
    )

    assert res.status_code == 200
    assert seen["hash"] != loop_thread
    assert seen["verify"] != loop_thread
