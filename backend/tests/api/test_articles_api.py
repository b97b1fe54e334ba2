"""Article Routes - CRUD, listing, feed and favorites against the SQL store.

Tests cover:
    - create 201 with slug, tagList order and favoritesCount 0
    - favorite/unfavorite "how-to-train-your-dragon": count 0 -> 1 -> 0
    - list filters (tag, author, favorited), articlesCount, newest first
    - feed shows followed authors only
    - update/delete permissions and 404s
"""

ARTICLE = {
    "title": "How to train your dragon",
    "description": "Ever wonder how?",
    "body": "You have to believe",
    "tagList": ["dragons", "training"],
}


async def _create(client, headers, **overrides):
    payload = {**ARTICLE, **overrides}
    response = await client.post("/api/articles", headers=headers, json={"article": payload})
    assert response.status_code == 201, response.text
    return response.json()["article"]


async def test_create_article(client, register):
    _, jake = await register("jake")
    article = await _create(client, jake)
    assert article["slug"] == "how-to-train-your-dragon"
    assert article["tagList"] == ["dragons", "training"]
    assert article["favorited"] is False
    assert article["favoritesCount"] == 0
    assert article["author"]["username"] == "jake"
    assert "createdAt" in article and "updatedAt" in article


async def test_create_requires_token(client):
    response = await client.post("/api/articles", json={"article": ARTICLE})
    assert response.status_code == 401


async def test_duplicate_slug(client, register):
    _, jake = await register("jake")
    await _create(client, jake)
    response = await client.post("/api/articles", headers=jake, json={"article": ARTICLE})
    assert response.status_code == 422
    assert response.json() == {"errors": {"slug": ["has already been taken"]}}


async def test_favorite_unfavorite_scenario(client, register):
    _, jake = await register("jake")
    _, reader = await register("reader")
    await _create(client, jake)

    favorited = await client.post(
        "/api/articles/how-to-train-your-dragon/favorite", headers=reader,
    )
    assert favorited.status_code == 200
    assert favorited.json()["article"]["favorited"] is True
    assert favorited.json()["article"]["favoritesCount"] == 1

    again = await client.post(
        "/api/articles/how-to-train-your-dragon/favorite", headers=reader,
    )
    assert again.json()["article"]["favoritesCount"] == 1

    unfavorited = await client.delete(
        "/api/articles/how-to-train-your-dragon/favorite", headers=reader,
    )
    assert unfavorited.json()["article"]["favorited"] is False
    assert unfavorited.json()["article"]["favoritesCount"] == 0

    tolerated = await client.delete(
        "/api/articles/how-to-train-your-dragon/favorite", headers=reader,
    )
    assert tolerated.status_code == 200
    assert tolerated.json()["article"]["favoritesCount"] == 0


async def test_favorite_missing_article(client, register):
    _, reader = await register("reader")
    response = await client.post("/api/articles/nope/favorite", headers=reader)
    assert response.status_code == 404


async def test_anonymous_sees_count_not_flag(client, register):
    _, jake = await register("jake")
    _, reader = await register("reader")
    await _create(client, jake)
    await client.post("/api/articles/how-to-train-your-dragon/favorite", headers=reader)

    response = await client.get("/api/articles/how-to-train-your-dragon")

    article = response.json()["article"]
    assert article["favorited"] is False
    assert article["favoritesCount"] == 1


async def test_list_articles_filters(client, register):
    _, jake = await register("jake")
    _, alice = await register("alice")
    await _create(client, jake, title="First", tagList=["dragons"])
    await _create(client, alice, title="Second", tagList=["training"])
    await _create(client, jake, title="Third", tagList=["dragons"])
    await client.post("/api/articles/second/favorite", headers=jake)

    everything = (await client.get("/api/articles")).json()
    assert everything["articlesCount"] == 3
    assert [a["slug"] for a in everything["articles"]] == ["third", "second", "first"]

    by_tag = (await client.get("/api/articles", params={"tag": "dragons"})).json()
    assert {a["slug"] for a in by_tag["articles"]} == {"first", "third"}

    by_author = (await client.get("/api/articles", params={"author": "alice"})).json()
    assert [a["slug"] for a in by_author["articles"]] == ["second"]

    by_fan = (await client.get(
        "/api/articles", params={"favorited": "jake"}, headers=jake,
    )).json()
    assert [a["slug"] for a in by_fan["articles"]] == ["second"]
    assert by_fan["articles"][0]["favorited"] is True

    paged = (await client.get("/api/articles", params={"limit": 1, "offset": 1})).json()
    assert len(paged["articles"]) == 1
    assert paged["articlesCount"] == 3


async def test_list_rejects_bad_params(client):
    response = await client.get("/api/articles", params={"limit": 0})
    assert response.status_code == 422
    assert "limit" in response.json()["errors"]


async def test_feed(client, register):
    _, jake = await register("jake")
    _, bob = await register("bob")
    _, alice = await register("alice")
    await _create(client, jake, title="By jake")
    await _create(client, bob, title="By bob")
    await client.post("/api/profiles/jake/follow", headers=alice)

    feed = await client.get("/api/articles/feed", headers=alice)

    assert feed.status_code == 200
    body = feed.json()
    assert [a["slug"] for a in body["articles"]] == ["by-jake"]
    assert body["articlesCount"] == 1
    assert body["articles"][0]["author"]["following"] is True


async def test_feed_requires_token(client):
    assert (await client.get("/api/articles/feed")).status_code == 401


async def test_update_article(client, register):
    _, jake = await register("jake")
    _, alice = await register("alice")
    await _create(client, jake)

    forbidden = await client.put(
        "/api/articles/how-to-train-your-dragon",
        headers=alice, json={"article": {"body": "mine"}},
    )
    assert forbidden.status_code == 403

    updated = await client.put(
        "/api/articles/how-to-train-your-dragon",
        headers=jake, json={"article": {"title": "Did you train your dragon?"}},
    )
    assert updated.status_code == 200
    assert updated.json()["article"]["slug"] == "did-you-train-your-dragon"
    assert updated.json()["article"]["tagList"] == ["dragons", "training"]


async def test_delete_article(client, register):
    _, jake = await register("jake")
    _, alice = await register("alice")
    await _create(client, jake)
    await client.post("/api/articles/how-to-train-your-dragon/favorite", headers=alice)
    await client.post(
        "/api/articles/how-to-train-your-dragon/comments",
        headers=alice, json={"comment": {"body": "Nice"}},
    )

    forbidden = await client.delete("/api/articles/how-to-train-your-dragon", headers=alice)
    assert forbidden.status_code == 403

    deleted = await client.delete("/api/articles/how-to-train-your-dragon", headers=jake)
    assert deleted.status_code == 204
    missing = await client.get("/api/articles/how-to-train-your-dragon")
    assert missing.status_code == 404
    assert (await client.get("/api/articles")).json()["articlesCount"] == 0
