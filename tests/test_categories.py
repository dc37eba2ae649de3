from typing import Any

import pytest
from httpx import AsyncClient


async def _category_id(client: AsyncClient, name: str) -> int:
    response = await client.get("/api/pins/categories/all")
    return next(c["id"] for c in response.json() if c["name"] == name)


@pytest.mark.asyncio
async def test_list_default_categories(test_client: AsyncClient) -> None:
    response = await test_client.get("/api/pins/categories/all")

    assert response.status_code == 200
    categories = response.json()
    assert [c["name"] for c in categories] == [
        "Completed",
        "Default",
        "Important",
        "Problematic",
        "To check",
        "Visited",
    ]
    colors = {c["name"]: c["color"] for c in categories}
    assert colors["Default"] == "#FF5733"
    assert colors["Problematic"] == "#FF8C00"


@pytest.mark.asyncio
async def test_create_category(test_client: AsyncClient, subscriber: Any) -> None:
    response = await test_client.post(
        "/api/pins/categories", json={"name": "Food", "color": "#ABCDEF"}
    )

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Food"
    assert body["color"] == "#ABCDEF"
    assert subscriber.messages == [{"event": "category_created", "data": body}]


@pytest.mark.asyncio
async def test_create_category_requires_name_and_color(
    test_client: AsyncClient,
) -> None:
    response = await test_client.post("/api/pins/categories", json={"name": "Food"})

    assert response.status_code == 400
    assert response.json() == {"error": "Category name and color are required"}


@pytest.mark.asyncio
async def test_duplicate_category_is_a_conflict(
    test_client: AsyncClient, subscriber: Any
) -> None:
    """Two creates with the same name leave exactly one row behind."""
    first = await test_client.post(
        "/api/pins/categories", json={"name": "Food", "color": "#111111"}
    )
    second = await test_client.post(
        "/api/pins/categories", json={"name": "Food", "color": "#222222"}
    )

    assert first.status_code == 201
    assert second.status_code == 409
    assert "error" in second.json()

    listing = (await test_client.get("/api/pins/categories/all")).json()
    assert [c["name"] for c in listing].count("Food") == 1
    assert subscriber.events() == ["category_created"]


@pytest.mark.asyncio
async def test_update_category(test_client: AsyncClient, subscriber: Any) -> None:
    category_id = await _category_id(test_client, "Visited")

    response = await test_client.put(
        f"/api/pins/categories/{category_id}",
        json={"name": "Been there", "color": "#00AA00"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == category_id
    assert body["name"] == "Been there"
    assert body["color"] == "#00AA00"
    assert subscriber.messages[-1] == {"event": "category_updated", "data": body}


@pytest.mark.asyncio
async def test_update_category_errors(test_client: AsyncClient) -> None:
    category_id = await _category_id(test_client, "Visited")

    taken = await test_client.put(
        f"/api/pins/categories/{category_id}",
        json={"name": "Default", "color": "#00AA00"},
    )
    assert taken.status_code == 409

    missing = await test_client.put(
        "/api/pins/categories/999", json={"name": "Ghost", "color": "#000000"}
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_recolor_keeps_existing_pin_colors(
    test_client: AsyncClient, cafe: dict[str, Any]
) -> None:
    pin = (
        await test_client.post("/api/pins", json={**cafe, "category": "Important"})
    ).json()
    category_id = await _category_id(test_client, "Important")

    await test_client.put(
        f"/api/pins/categories/{category_id}",
        json={"name": "Important", "color": "#990000"},
    )

    reloaded = (await test_client.get(f"/api/pins/{pin['id']}")).json()
    assert reloaded["color"] == "#FF0000"
    assert reloaded["category_color"] == "#990000"


@pytest.mark.asyncio
async def test_delete_category_in_use(
    test_client: AsyncClient, cafe: dict[str, Any], subscriber: Any
) -> None:
    await test_client.post("/api/pins", json={**cafe, "category": "Important"})
    category_id = await _category_id(test_client, "Important")

    response = await test_client.delete(f"/api/pins/categories/{category_id}")

    assert response.status_code == 400
    assert response.json() == {
        "error": "Cannot delete a category that is used by pins"
    }
    assert "category_deleted" not in subscriber.events()
    assert [p["category"] for p in (await test_client.get("/api/pins")).json()] == [
        "Important"
    ]


@pytest.mark.asyncio
async def test_delete_unused_category(
    test_client: AsyncClient, subscriber: Any
) -> None:
    category_id = await _category_id(test_client, "Problematic")

    response = await test_client.delete(f"/api/pins/categories/{category_id}")

    assert response.status_code == 200
    assert response.json() == {
        "message": "Category deleted successfully",
        "id": category_id,
    }
    assert subscriber.messages[-1] == {
        "event": "category_deleted",
        "data": {"id": category_id},
    }

    again = await test_client.delete(f"/api/pins/categories/{category_id}")
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_category_routes_do_not_shadow_pin_ids(
    test_client: AsyncClient,
) -> None:
    response = await test_client.get("/api/pins/categories")
    # Matched by /api/pins/{pin_id} and rejected as a non-integer id
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "color", ["not-a-hex-color", "#FF573", "#FF57331", "FF5733", "#GG5733"]
)
async def test_create_category_rejects_bad_colors(
    test_client: AsyncClient, subscriber: Any, color: str
) -> None:
    response = await test_client.post(
        "/api/pins/categories", json={"name": "Food", "color": color}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "color must be a hex code such as #FF5733"}
    assert subscriber.messages == []


@pytest.mark.asyncio
async def test_update_category_rejects_bad_color(test_client: AsyncClient) -> None:
    category_id = await _category_id(test_client, "Visited")

    response = await test_client.put(
        f"/api/pins/categories/{category_id}",
        json={"name": "Visited", "color": "green"},
    )

    assert response.status_code == 400
    listing = (await test_client.get("/api/pins/categories/all")).json()
    assert {c["name"]: c["color"] for c in listing}["Visited"] == "#00FF00"


@pytest.mark.asyncio
async def test_category_name_length_limit(test_client: AsyncClient) -> None:
    too_long = await test_client.post(
        "/api/pins/categories", json={"name": "x" * 101, "color": "#abcdef"}
    )
    assert too_long.status_code == 400
    assert too_long.json() == {"error": "name must be at most 100 characters"}

    at_limit = await test_client.post(
        "/api/pins/categories", json={"name": "x" * 100, "color": "#abcdef"}
    )
    assert at_limit.status_code == 201
    assert at_limit.json()["color"] == "#abcdef"
