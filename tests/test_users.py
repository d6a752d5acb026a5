"""
User and profile endpoint tests: registration, login, the current user and
follows.
"""
import pytest
from httpx import AsyncClient


def _auth(user: dict, scheme: str = "Token") -> dict:
    return {"Authorization": f"{scheme} {user['token']}"}


# ---------------------------------------------------------------------------
# Registration / login
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_register(async_client: AsyncClient):
    resp = await async_client.post("/api/users", json={
        "user": {"username": "jake", "email": "jake@jake.jake", "password": "jakejake"},
    })
    assert resp.status_code == 201
    user = resp.json()["user"]
    assert user["username"] == "jake"
    assert user["email"] == "jake@jake.jake"
    assert user["token"]
    assert user["bio"] is None
    assert user["image"] is None
    assert "password" not in user


@pytest.mark.asyncio
async def test_register_duplicate_username_returns_409(async_client: AsyncClient, register):
    await register("dup_user", "dup1@example.com")
    resp = await async_client.post("/api/users", json={
        "user": {"username": "dup_user", "email": "dup2@example.com", "password": "pw"},
    })
    assert resp.status_code == 409
    assert resp.json() == {"errors": {"username": ["has already been taken"]}}


@pytest.mark.asyncio
async def test_register_duplicate_email_returns_409(async_client: AsyncClient, register):
    await register("emailuser1", "same@example.com")
    resp = await async_client.post("/api/users", json={
        "user": {"username": "emailuser2", "email": "same@example.com", "password": "pw"},
    })
    assert resp.status_code == 409
    assert "email" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_register_with_blank_username_returns_422(async_client: AsyncClient):
    resp = await async_client.post("/api/users", json={
        "user": {"username": "  ", "email": "blank@example.com", "password": "pw"},
    })
    assert resp.status_code == 422
    assert resp.json()["errors"]["username"] == ["can't be empty"]


@pytest.mark.asyncio
async def test_register_with_missing_field_returns_422(async_client: AsyncClient):
    resp = await async_client.post("/api/users", json={"user": {"username": "x"}})
    assert resp.status_code == 422
    errors = resp.json()["errors"]
    assert "email" in errors
    assert "password" in errors


@pytest.mark.asyncio
async def test_login(async_client: AsyncClient, register):
    await register("jake", "jake@jake.jake", password="jakejake")

    resp = await async_client.post("/api/users/login", json={
        "user": {"email": "jake@jake.jake", "password": "jakejake"},
    })
    assert resp.status_code == 200
    assert resp.json()["user"]["username"] == "jake"
    assert resp.json()["user"]["token"]


@pytest.mark.asyncio
async def test_login_with_wrong_password_returns_401(async_client: AsyncClient, register):
    await register("jake", "jake@jake.jake", password="jakejake")

    resp = await async_client.post("/api/users/login", json={
        "user": {"email": "jake@jake.jake", "password": "nope"},
    })
    assert resp.status_code == 401
    assert "errors" in resp.json()


# ---------------------------------------------------------------------------
# Current user
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_current_user(async_client: AsyncClient, register):
    jake = await register("jake")

    resp = await async_client.get("/api/user", headers=_auth(jake))
    assert resp.status_code == 200
    assert resp.json()["user"]["username"] == "jake"
    assert resp.json()["user"]["token"] == jake["token"]


@pytest.mark.asyncio
async def test_bearer_prefix_is_accepted(async_client: AsyncClient, register):
    jake = await register("jake")
    resp = await async_client.get("/api/user", headers=_auth(jake, "Bearer"))
    assert resp.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("header", [None, "Token", "Token garbage", "Basic abc"])
async def test_current_user_requires_a_valid_token(async_client: AsyncClient, header):
    headers = {"Authorization": header} if header else {}
    resp = await async_client.get("/api/user", headers=headers)
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Token"


@pytest.mark.asyncio
async def test_update_user(async_client: AsyncClient, register):
    jake = await register("jake")

    resp = await async_client.put("/api/user", headers=_auth(jake), json={
        "user": {"bio": "I like to skateboard", "image": "https://example.com/jake.png"},
    })
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["bio"] == "I like to skateboard"
    assert user["image"] == "https://example.com/jake.png"
    assert user["email"] == "jake@example.com"


@pytest.mark.asyncio
async def test_update_user_password_allows_new_login(async_client: AsyncClient, register):
    jake = await register("jake", password="old-password")

    resp = await async_client.put("/api/user", headers=_auth(jake), json={
        "user": {"password": "new-password"},
    })
    assert resp.status_code == 200

    resp = await async_client.post("/api/users/login", json={
        "user": {"email": "jake@example.com", "password": "new-password"},
    })
    assert resp.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["username", "password", "email"])
async def test_update_user_with_whitespace_field_returns_422(async_client: AsyncClient, register, field):
    jake = await register("jake")

    resp = await async_client.put("/api/user", headers=_auth(jake), json={
        "user": {field: "   "},
    })
    assert resp.status_code == 422
    assert field in resp.json()["errors"]

    resp = await async_client.get("/api/user", headers=_auth(jake))
    assert resp.json()["user"]["username"] == "jake"
    assert resp.json()["user"]["email"] == "jake@example.com"


@pytest.mark.asyncio
async def test_register_with_whitespace_password_returns_422(async_client: AsyncClient):
    resp = await async_client.post("/api/users", json={
        "user": {"username": "jake", "email": "jake@example.com", "password": "   "},
    })
    assert resp.status_code == 422
    assert "password" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_update_user_to_taken_email_returns_409(async_client: AsyncClient, register):
    await register("taken", "taken@example.com")
    jake = await register("jake")

    resp = await async_client.put("/api/user", headers=_auth(jake), json={
        "user": {"email": "taken@example.com"},
    })
    assert resp.status_code == 409


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_profile_anonymously(async_client: AsyncClient, register):
    await register("celeb")

    resp = await async_client.get("/api/profiles/celeb")
    assert resp.status_code == 200
    assert resp.json() == {
        "profile": {"username": "celeb", "bio": None, "image": None, "following": False},
    }


@pytest.mark.asyncio
async def test_get_unknown_profile_returns_404(async_client: AsyncClient):
    resp = await async_client.get("/api/profiles/ghost")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_follow_and_unfollow(async_client: AsyncClient, register):
    await register("celeb")
    fan = await register("fan")

    resp = await async_client.post("/api/profiles/celeb/follow", headers=_auth(fan))
    assert resp.status_code == 200
    assert resp.json()["profile"]["following"] is True

    resp = await async_client.get("/api/profiles/celeb", headers=_auth(fan))
    assert resp.json()["profile"]["following"] is True

    resp = await async_client.delete("/api/profiles/celeb/follow", headers=_auth(fan))
    assert resp.status_code == 200
    assert resp.json()["profile"]["following"] is False


@pytest.mark.asyncio
async def test_follow_requires_auth(async_client: AsyncClient, register):
    await register("celeb")
    resp = await async_client.post("/api/profiles/celeb/follow")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_follow_unknown_user_returns_404(async_client: AsyncClient, register):
    fan = await register("fan")
    resp = await async_client.post("/api/profiles/ghost/follow", headers=_auth(fan))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_follow_self_returns_422(async_client: AsyncClient, register):
    me = await register("me")
    resp = await async_client.post("/api/profiles/me/follow", headers=_auth(me))
    assert resp.status_code == 422
