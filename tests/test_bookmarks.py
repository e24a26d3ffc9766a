"""Bookmark CRUD, filtering, stats and caching tests."""

import pytest
from httpx import AsyncClient

from wannago.core.cache import TTLCache
from wannago.services.bookmarks import bookmarks_cache_key


async def _bootstrap(client: AsyncClient, name: str = "Bookmark Crew") -> str:
    """Helper: create a group and return its id."""
    resp = await client.post("/v1/groups", json={"name": name})
    assert resp.status_code == 201
    return resp.json()["id"]


async def _add(client: AsyncClient, group_id: str, **fields) -> dict:
    payload = {
        "title": "Ramen Ichiban",
        "url": "https://example.com/ramen",
        "category": "restaurant",
        **fields,
    }
    resp = await client.post(f"/v1/groups/{group_id}/bookmarks", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_create_and_get_bookmark(client: AsyncClient):
    group_id = await _bootstrap(client)

    bm = await _add(
        client,
        group_id,
        title="  Fushimi Inari  ",
        url="https://inari.jp/",
        category="sightseeing",
        memo="  go early ",
        address="",
        priority=5,
        latitude=34.9671,
        longitude=135.7727,
        auto_site_name="Inari",
    )
    assert bm["title"] == "Fushimi Inari"
    assert bm["memo"] == "go early"
    assert bm["address"] is None
    assert bm["priority"] == 5
    assert bm["visited"] is False
    assert bm["visited_at"] is None
    assert bm["auto_site_name"] == "Inari"
    assert bm["themes"] == []

    resp = await client.get(f"/v1/groups/{group_id}/bookmarks/{bm['id']}")
    assert resp.status_code == 200
    assert resp.json()["latitude"] == 34.9671


@pytest.mark.asyncio
async def test_create_bookmark_defaults_priority(client: AsyncClient):
    group_id = await _bootstrap(client)
    bm = await _add(client, group_id)
    assert bm["priority"] == 3


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "override",
    [
        {"url": "not a url"},
        {"title": "   "},
        {"title": "x" * 201},
        {"priority": 0},
        {"priority": 6},
        {"category": "museum"},
        {"latitude": 91},
    ],
)
async def test_create_bookmark_validation(client: AsyncClient, override: dict):
    group_id = await _bootstrap(client)
    payload = {
        "title": "Place",
        "url": "https://example.com",
        "category": "other",
        **override,
    }
    resp = await client.post(f"/v1/groups/{group_id}/bookmarks", json=payload)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_bookmark_in_missing_group_is_404(client: AsyncClient):
    resp = await client.post("/v1/groups/zzzzzzzz/bookmarks", json={
        "title": "Nowhere",
        "url": "https://example.com",
        "category": "other",
    })
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_group_isolation(client: AsyncClient):
    group_a = await _bootstrap(client, "A")
    group_b = await _bootstrap(client, "B")
    bm = await _add(client, group_a)

    resp = await client.get(f"/v1/groups/{group_b}/bookmarks/{bm['id']}")
    assert resp.status_code == 404

    resp = await client.get(f"/v1/groups/{group_b}/bookmarks")
    assert resp.json()["bookmarks"] == []


@pytest.mark.asyncio
async def test_list_orders_by_priority_then_newest(client: AsyncClient):
    group_id = await _bootstrap(client)
    await _add(client, group_id, title="Low", priority=1)
    await _add(client, group_id, title="High", priority=5)
    await _add(client, group_id, title="Mid", priority=3)

    resp = await client.get(f"/v1/groups/{group_id}/bookmarks")
    assert resp.status_code == 200
    titles = [b["title"] for b in resp.json()["bookmarks"]]
    assert titles == ["High", "Mid", "Low"]


@pytest.mark.asyncio
async def test_list_filters(client: AsyncClient):
    group_id = await _bootstrap(client)
    await _add(client, group_id, title="Sushi Bar", category="restaurant", memo="omakase")
    museum = await _add(client, group_id, title="Museum", category="sightseeing")
    await _add(client, group_id, title="Mall", category="shopping", address="Shibuya 1-2")
    await client.post(
        f"/v1/groups/{group_id}/bookmarks/{museum['id']}/visited", json={"visited": True}
    )

    base = f"/v1/groups/{group_id}/bookmarks"

    resp = await client.get(base, params={"category": "restaurant"})
    assert [b["title"] for b in resp.json()["bookmarks"]] == ["Sushi Bar"]

    resp = await client.get(base, params={"category": "all"})
    assert resp.json()["total"] == 3

    resp = await client.get(base, params={"visited": "true"})
    assert [b["title"] for b in resp.json()["bookmarks"]] == ["Museum"]

    resp = await client.get(base, params={"visited": "false"})
    assert resp.json()["total"] == 2

    # Search hits title, memo and address, case-insensitively
    resp = await client.get(base, params={"search": "OMAKASE"})
    assert [b["title"] for b in resp.json()["bookmarks"]] == ["Sushi Bar"]
    resp = await client.get(base, params={"search": "shibuya"})
    assert [b["title"] for b in resp.json()["bookmarks"]] == ["Mall"]
    resp = await client.get(base, params={"search": "muse"})
    assert [b["title"] for b in resp.json()["bookmarks"]] == ["Museum"]

    resp = await client.get(base, params={"visited": "maybe"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_stats_cover_whole_group(client: AsyncClient):
    group_id = await _bootstrap(client)
    a = await _add(client, group_id, title="A", priority=5)
    await _add(client, group_id, title="B", priority=2)
    await _add(client, group_id, title="C", priority=2, category="shopping")
    await client.post(f"/v1/groups/{group_id}/bookmarks/{a['id']}/visited", json={"visited": True})

    resp = await client.get(
        f"/v1/groups/{group_id}/bookmarks", params={"category": "shopping"}
    )
    data = resp.json()
    assert data["total"] == 1
    assert data["stats"] == {
        "total_count": 3,
        "visited_count": 1,
        "unvisited_count": 2,
        "avg_priority": 3.0,
    }


@pytest.mark.asyncio
async def test_stats_for_empty_group(client: AsyncClient):
    group_id = await _bootstrap(client)
    resp = await client.get(f"/v1/groups/{group_id}/bookmarks")
    assert resp.json()["stats"] == {
        "total_count": 0,
        "visited_count": 0,
        "unvisited_count": 0,
        "avg_priority": 0.0,
    }


@pytest.mark.asyncio
async def test_unfiltered_listing_is_cached_and_invalidated(client: AsyncClient, cache: TTLCache):
    group_id = await _bootstrap(client)
    await _add(client, group_id, title="First")

    resp = await client.get(f"/v1/groups/{group_id}/bookmarks")
    assert resp.json()["total"] == 1
    assert cache.get(bookmarks_cache_key(group_id)) is not None

    # Filtered listings bypass the cache
    cache.delete(bookmarks_cache_key(group_id))
    await client.get(f"/v1/groups/{group_id}/bookmarks", params={"search": "First"})
    assert cache.get(bookmarks_cache_key(group_id)) is None

    await client.get(f"/v1/groups/{group_id}/bookmarks")
    await _add(client, group_id, title="Second")
    assert cache.get(bookmarks_cache_key(group_id)) is None

    resp = await client.get(f"/v1/groups/{group_id}/bookmarks")
    assert resp.json()["total"] == 2


@pytest.mark.asyncio
async def test_cached_listing_expires(client: AsyncClient, cache: TTLCache, clock):
    group_id = await _bootstrap(client)
    await client.get(f"/v1/groups/{group_id}/bookmarks")
    assert cache.get(bookmarks_cache_key(group_id)) is not None

    clock.advance(60_001)
    assert cache.get(bookmarks_cache_key(group_id)) is None


@pytest.mark.asyncio
async def test_update_bookmark(client: AsyncClient):
    group_id = await _bootstrap(client)
    bm = await _add(client, group_id, memo="old memo")

    resp = await client.patch(f"/v1/groups/{group_id}/bookmarks/{bm['id']}", json={
        "title": "Renamed",
        "priority": 4,
        "memo": "",
        "visited": True,
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["title"] == "Renamed"
    assert data["priority"] == 4
    assert data["memo"] is None
    assert data["url"] == "https://example.com/ramen"
    assert data["visited"] is True
    assert data["visited_at"] is not None


@pytest.mark.asyncio
async def test_update_rejects_invalid_url(client: AsyncClient):
    group_id = await _bootstrap(client)
    bm = await _add(client, group_id)
    resp = await client.patch(
        f"/v1/groups/{group_id}/bookmarks/{bm['id']}", json={"url": "nope"}
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_toggle_visited(client: AsyncClient):
    group_id = await _bootstrap(client)
    bm = await _add(client, group_id)
    url = f"/v1/groups/{group_id}/bookmarks/{bm['id']}/visited"

    resp = await client.post(url, json={"visited": True})
    assert resp.status_code == 200
    assert resp.json()["visited"] is True
    assert resp.json()["visited_at"] is not None

    resp = await client.post(url, json={"visited": False})
    assert resp.json()["visited"] is False
    assert resp.json()["visited_at"] is None


@pytest.mark.asyncio
async def test_delete_bookmark(client: AsyncClient):
    group_id = await _bootstrap(client)
    bm = await _add(client, group_id)

    resp = await client.delete(f"/v1/groups/{group_id}/bookmarks/{bm['id']}")
    assert resp.status_code == 204

    resp = await client.get(f"/v1/groups/{group_id}/bookmarks/{bm['id']}")
    assert resp.status_code == 404

    resp = await client.delete(f"/v1/groups/{group_id}/bookmarks/{bm['id']}")
    assert resp.status_code == 404
