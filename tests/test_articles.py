"""
Article endpoint tests: the CRUD lifecycle, listing filters, the feed,
favorites, tags and the diagnostic response headers.

Each test creates the users and articles it needs through the API, so test
order does not matter.
"""
import re

import pytest
from httpx import AsyncClient


def _auth(user: dict) -> dict:
    return {"Authorization": f"Token {user['token']}"}


async def _post_article(client: AsyncClient, user: dict, title: str = "How to train your dragon",
                        tags: list[str] | None = None) -> dict:
    resp = await client.post("/api/articles", headers=_auth(user), json={
        "article": {
            "title": title,
            "description": "Ever wonder how?",
            "body": "You have to believe",
            "tagList": tags if tags is not None else ["dragons", "training"],
        }
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["article"]


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert "hit_rate" in data["cache"]


@pytest.mark.asyncio
async def test_diagnostic_headers(async_client: AsyncClient, register):
    jake = await register("jake")
    await _post_article(async_client, jake)

    resp = await async_client.get("/api/articles")
    assert "x-response-time-ms" in resp.headers
    assert int(resp.headers["x-query-count"]) > 0


@pytest.mark.asyncio
async def test_cors_does_not_allow_credentials_with_wildcard(async_client: AsyncClient):
    resp = await async_client.options("/api/articles", headers={
        "Origin": "http://example.com",
        "Access-Control-Request-Method": "GET",
    })
    assert resp.headers.get("access-control-allow-origin") == "*"
    assert resp.headers.get("access-control-allow-credentials") != "true"


# ---------------------------------------------------------------------------
# Create / read
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_and_get_article(async_client: AsyncClient, register):
    jake = await register("jake")
    article = await _post_article(async_client, jake)

    assert re.match(r"^how-to-train-your-dragon-[0-9a-f]{6}$", article["slug"])
    assert article["tagList"] == ["dragons", "training"]
    assert article["createdAt"] == article["updatedAt"]
    assert article["createdAt"].endswith("Z")
    assert article["favorited"] is False
    assert article["favoritesCount"] == 0
    assert article["author"] == {"username": "jake", "bio": None, "image": None, "following": False}

    resp = await async_client.get(f"/api/articles/{article['slug']}")
    assert resp.status_code == 200
    assert resp.json()["article"] == article


@pytest.mark.asyncio
async def test_create_article_requires_auth(async_client: AsyncClient):
    resp = await async_client.post("/api/articles", json={
        "article": {"title": "t", "description": "d", "body": "b"},
    })
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_create_article_with_blank_title_returns_422(async_client: AsyncClient, register):
    jake = await register("jake")
    resp = await async_client.post("/api/articles", headers=_auth(jake), json={
        "article": {"title": "", "description": "d", "body": "b"},
    })
    assert resp.status_code == 422
    assert resp.json()["errors"]["title"] == ["can't be empty"]


@pytest.mark.asyncio
async def test_same_title_gives_distinct_slugs(async_client: AsyncClient, register):
    jake = await register("jake")
    first = await _post_article(async_client, jake, title="Same Title")
    second = await _post_article(async_client, jake, title="Same Title")
    assert first["slug"] != second["slug"]


@pytest.mark.asyncio
async def test_get_missing_article_returns_404(async_client: AsyncClient):
    resp = await async_client.get("/api/articles/does-not-exist")
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Update / delete
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_article(async_client: AsyncClient, register):
    jake = await register("jake")
    article = await _post_article(async_client, jake)

    resp = await async_client.put(f"/api/articles/{article['slug']}", headers=_auth(jake), json={
        "article": {"title": "Did you train your dragon?", "tagList": ["dragons"]},
    })
    assert resp.status_code == 200
    updated = resp.json()["article"]
    assert updated["title"] == "Did you train your dragon?"
    assert updated["slug"].startswith("did-you-train-your-dragon-")
    assert updated["body"] == "You have to believe"
    assert updated["tagList"] == ["dragons"]
    assert updated["createdAt"] == article["createdAt"]

    assert (await async_client.get(f"/api/articles/{article['slug']}")).status_code == 404
    assert (await async_client.get(f"/api/articles/{updated['slug']}")).status_code == 200


@pytest.mark.asyncio
async def test_update_by_someone_else_returns_403(async_client: AsyncClient, register):
    jake = await register("jake")
    other = await register("other")
    article = await _post_article(async_client, jake)

    resp = await async_client.put(f"/api/articles/{article['slug']}", headers=_auth(other), json={
        "article": {"body": "hijacked"},
    })
    assert resp.status_code == 403

    resp = await async_client.delete(f"/api/articles/{article['slug']}", headers=_auth(other))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_missing_article_returns_404(async_client: AsyncClient, register):
    jake = await register("jake")
    resp = await async_client.put("/api/articles/nope", headers=_auth(jake), json={
        "article": {"body": "x"},
    })
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_article(async_client: AsyncClient, register):
    jake = await register("jake")
    article = await _post_article(async_client, jake)

    resp = await async_client.delete(f"/api/articles/{article['slug']}", headers=_auth(jake))
    assert resp.status_code == 200

    resp = await async_client.get(f"/api/articles/{article['slug']}")
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_articles_empty(async_client: AsyncClient):
    resp = await async_client.get("/api/articles")
    assert resp.status_code == 200
    assert resp.json() == {"articles": [], "articlesCount": 0}


@pytest.mark.asyncio
async def test_list_is_newest_first_and_paginated(async_client: AsyncClient, register):
    jake = await register("jake")
    for i in range(5):
        await _post_article(async_client, jake, title=f"Article {i}")

    resp = await async_client.get("/api/articles", params={"limit": 2, "offset": 1})
    data = resp.json()
    assert data["articlesCount"] == 5
    assert [a["title"] for a in data["articles"]] == ["Article 3", "Article 2"]


@pytest.mark.asyncio
async def test_list_limit_is_validated(async_client: AsyncClient):
    resp = await async_client.get("/api/articles", params={"limit": 0})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_list_filters(async_client: AsyncClient, register):
    jake = await register("jake")
    anne = await register("anne")
    await _post_article(async_client, jake, title="Jake on Java", tags=["java"])
    annes = await _post_article(async_client, anne, title="Anne on Python", tags=["python"])
    await async_client.post(f"/api/articles/{annes['slug']}/favorite", headers=_auth(jake))

    by_tag = (await async_client.get("/api/articles", params={"tag": "java"})).json()
    assert [a["title"] for a in by_tag["articles"]] == ["Jake on Java"]

    by_author = (await async_client.get("/api/articles", params={"author": "anne"})).json()
    assert [a["title"] for a in by_author["articles"]] == ["Anne on Python"]
    assert by_author["articlesCount"] == 1

    by_fan = (await async_client.get("/api/articles", params={"favorited": "jake"})).json()
    assert [a["title"] for a in by_fan["articles"]] == ["Anne on Python"]

    nothing = (await async_client.get("/api/articles", params={"tag": "cobol"})).json()
    assert nothing == {"articles": [], "articlesCount": 0}


@pytest.mark.asyncio
async def test_feed_shows_followed_authors_only(async_client: AsyncClient, register):
    celeb = await register("celeb")
    other = await register("other")
    fan = await register("fan")
    await _post_article(async_client, celeb, title="From celeb")
    await _post_article(async_client, other, title="From other")
    await async_client.post("/api/profiles/celeb/follow", headers=_auth(fan))

    resp = await async_client.get("/api/articles/feed", headers=_auth(fan))
    assert resp.status_code == 200
    data = resp.json()
    assert data["articlesCount"] == 1
    assert data["articles"][0]["title"] == "From celeb"
    assert data["articles"][0]["author"]["following"] is True


@pytest.mark.asyncio
async def test_feed_requires_auth(async_client: AsyncClient):
    resp = await async_client.get("/api/articles/feed")
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_favorite_and_unfavorite(async_client: AsyncClient, register):
    jake = await register("jake")
    fan = await register("fan")
    article = await _post_article(async_client, jake)
    slug = article["slug"]

    resp = await async_client.post(f"/api/articles/{slug}/favorite", headers=_auth(fan))
    assert resp.status_code == 200
    assert resp.json()["article"]["favorited"] is True
    assert resp.json()["article"]["favoritesCount"] == 1

    # Favoriting twice counts once
    resp = await async_client.post(f"/api/articles/{slug}/favorite", headers=_auth(fan))
    assert resp.json()["article"]["favoritesCount"] == 1

    anonymous = (await async_client.get(f"/api/articles/{slug}")).json()["article"]
    assert anonymous["favorited"] is False
    assert anonymous["favoritesCount"] == 1

    resp = await async_client.delete(f"/api/articles/{slug}/favorite", headers=_auth(fan))
    assert resp.json()["article"]["favorited"] is False
    assert resp.json()["article"]["favoritesCount"] == 0


@pytest.mark.asyncio
async def test_favorite_missing_article_returns_404(async_client: AsyncClient, register):
    fan = await register("fan")
    resp = await async_client.post("/api/articles/nope/favorite", headers=_auth(fan))
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_tags(async_client: AsyncClient, register):
    jake = await register("jake")
    await _post_article(async_client, jake, tags=["reactjs", "angularjs"])
    await _post_article(async_client, jake, tags=["reactjs", "dragons"])

    resp = await async_client.get("/api/tags")
    assert resp.status_code == 200
    assert resp.json() == {"tags": ["angularjs", "dragons", "reactjs"]}
