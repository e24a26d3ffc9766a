"""Group endpoint tests."""

from datetime import timezone
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from wannago.core.cache import TTLCache
from wannago.models import Bookmark, Group, Theme
from wannago.models.base import utcnow
from wannago.services.groups import generate_group_id, group_cache_key


@pytest.mark.asyncio
async def test_create_and_get_group(client: AsyncClient):
    resp = await client.post("/v1/groups", json={
        "name": "  Kyoto Trip  ",
        "description": "Autumn leaves",
    })
    assert resp.status_code == 201
    group = resp.json()
    assert group["name"] == "Kyoto Trip"
    assert group["description"] == "Autumn leaves"
    assert len(group["id"]) == 8

    resp = await client.get(f"/v1/groups/{group['id']}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Kyoto Trip"


@pytest.mark.asyncio
async def test_create_group_with_custom_id(client: AsyncClient):
    resp = await client.post("/v1/groups", json={"name": "Custom", "id": "abcd1234"})
    assert resp.status_code == 201
    assert resp.json()["id"] == "abcd1234"

    # Same id again is a conflict
    resp = await client.post("/v1/groups", json={"name": "Again", "id": "abcd1234"})
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_create_group_rejects_bad_custom_id(client: AsyncClient):
    resp = await client.post("/v1/groups", json={"name": "Bad", "id": "ABC"})
    assert resp.status_code == 400
    assert "Invalid group ID" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_create_group_requires_name(client: AsyncClient):
    resp = await client.post("/v1/groups", json={"name": "   "})
    assert resp.status_code == 422

    resp = await client.post("/v1/groups", json={"name": "x" * 101})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_blank_description_is_stored_as_null(client: AsyncClient):
    resp = await client.post("/v1/groups", json={"name": "Blank", "description": "   "})
    assert resp.json()["description"] is None


@pytest.mark.asyncio
async def test_get_missing_group_is_404(client: AsyncClient):
    resp = await client.get("/v1/groups/zzzzzzzz")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_missing_group_is_not_cached(client: AsyncClient, cache: TTLCache):
    resp = await client.get("/v1/groups/zzzzzzzz")
    assert resp.status_code == 404
    assert cache.get(group_cache_key("zzzzzzzz")) is None

    resp = await client.post("/v1/groups", json={"name": "Late", "id": "zzzzzzzz"})
    assert resp.status_code == 201
    resp = await client.get("/v1/groups/zzzzzzzz")
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_group_lookup_is_cached(client: AsyncClient, cache: TTLCache):
    resp = await client.post("/v1/groups", json={"name": "Cached"})
    group_id = resp.json()["id"]

    await client.get(f"/v1/groups/{group_id}")
    cached = cache.get(group_cache_key(group_id))
    assert cached is not None
    assert cached.name == "Cached"


@pytest.mark.asyncio
async def test_update_group_invalidates_cache(client: AsyncClient, cache: TTLCache):
    resp = await client.post("/v1/groups", json={"name": "Old", "description": "d"})
    group_id = resp.json()["id"]
    await client.get(f"/v1/groups/{group_id}")  # warm the cache

    resp = await client.patch(f"/v1/groups/{group_id}", json={"name": "New"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "New"
    assert resp.json()["description"] == "d"

    resp = await client.get(f"/v1/groups/{group_id}")
    assert resp.json()["name"] == "New"


@pytest.mark.asyncio
async def test_update_group_clears_description(client: AsyncClient):
    resp = await client.post("/v1/groups", json={"name": "G", "description": "d"})
    group_id = resp.json()["id"]

    resp = await client.patch(f"/v1/groups/{group_id}", json={"description": ""})
    assert resp.status_code == 200
    assert resp.json()["description"] is None


@pytest.mark.asyncio
async def test_check_id_availability(client: AsyncClient):
    await client.post("/v1/groups", json={"name": "Taken", "id": "taken123"})

    resp = await client.get("/v1/groups/check-id", params={"group_id": "taken123"})
    assert resp.status_code == 200
    assert resp.json() == {"available": False, "suggested_alternatives": []}

    resp = await client.get("/v1/groups/check-id", params={"group_id": "free1234"})
    assert resp.json()["available"] is True

    resp = await client.get("/v1/groups/check-id", params={"group_id": "NOPE"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_id_generation_gives_up_after_collisions(client: AsyncClient):
    await client.post("/v1/groups", json={"name": "Taken", "id": "samesame"})

    with patch("wannago.services.groups.generate_group_id", return_value="samesame"):
        resp = await client.post("/v1/groups", json={"name": "Unlucky"})
    assert resp.status_code == 409


def test_generated_ids_match_format():
    for _ in range(50):
        group_id = generate_group_id()
        assert len(group_id) == 8
        assert group_id.isalnum() and group_id == group_id.lower()


def test_timestamps_are_timezone_aware():
    assert utcnow().tzinfo is timezone.utc
    for table in (Group, Bookmark, Theme):
        assert table.__table__.c.created_at.type.timezone is True
        assert table.__table__.c.updated_at.type.timezone is True
    assert Bookmark.__table__.c.visited_at.type.timezone is True


@pytest.mark.asyncio
async def test_writes_store_timestamps(client: AsyncClient):
    resp = await client.post("/v1/groups", json={"name": "Stamped"})
    assert resp.status_code == 201
    group_id = resp.json()["id"]
    assert resp.json()["created_at"]

    resp = await client.patch(f"/v1/groups/{group_id}", json={"name": "Restamped"})
    assert resp.status_code == 200

    resp = await client.post(f"/v1/groups/{group_id}/bookmarks", json={
        "title": "Spot",
        "url": "https://example.com",
        "category": "other",
    })
    assert resp.status_code == 201
    resp = await client.post(
        f"/v1/groups/{group_id}/bookmarks/{resp.json()['id']}/visited", json={"visited": True}
    )
    assert resp.status_code == 200
    assert resp.json()["visited_at"] is not None
