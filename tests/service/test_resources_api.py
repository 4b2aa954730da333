"""HTTP tests for the resources API."""

import http

from httpx import AsyncClient
import pytest

from resource_api.services import ResourceService

STATUS_MESSAGE = 'Status must be either "active" or "inactive"'


async def _create(client: AsyncClient, **fields) -> dict:
    payload = {"name": "Test Resource", "description": "A test resource", **fields}
    response = await client.post("/api/resources", json=payload)
    assert response.status_code == http.HTTPStatus.CREATED, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_health(async_client):
    response = await async_client.get("/health")

    assert response.status_code == http.HTTPStatus.OK
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Server is running"
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_root_endpoint(async_client):
    response = await async_client.get("/")

    assert response.status_code == http.HTTPStatus.OK
    assert response.json()["name"] == "Resource API"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(async_client):
    response = await async_client.get("/health", headers={"X-Correlation-ID": "req_test0001"})

    assert response.headers["X-Correlation-ID"] == "req_test0001"


@pytest.mark.asyncio
async def test_list_empty(async_client):
    response = await async_client.get("/api/resources")

    assert response.status_code == http.HTTPStatus.OK
    assert response.json() == {
        "success": True,
        "data": [],
        "pagination": {"total": 0, "count": 0},
    }


@pytest.mark.asyncio
async def test_create_resource(async_client):
    payload = {"name": "Test Resource", "description": "A test resource", "category": "Testing"}

    response = await async_client.post("/api/resources", json=payload)

    assert response.status_code == http.HTTPStatus.CREATED
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Resource created successfully"
    assert isinstance(body["data"]["id"], int)
    assert body["data"]["name"] == "Test Resource"
    assert body["data"]["description"] == "A test resource"
    assert body["data"]["category"] == "Testing"
    assert body["data"]["status"] == "active"
    assert "created_at" in body["data"]
    assert "updated_at" in body["data"]


@pytest.mark.asyncio
async def test_create_without_name(async_client):
    response = await async_client.post("/api/resources", json={"description": "No name provided"})

    assert response.status_code == http.HTTPStatus.BAD_REQUEST
    assert response.json() == {"success": False, "error": "Name is required"}


@pytest.mark.asyncio
async def test_create_without_body(async_client):
    response = await async_client.post("/api/resources")

    assert response.status_code == http.HTTPStatus.BAD_REQUEST
    assert response.json()["error"] == "Name is required"


@pytest.mark.asyncio
async def test_create_with_wrong_field_type(async_client):
    response = await async_client.post(
        "/api/resources", json={"name": 123, "description": "Numeric name"}
    )

    assert response.status_code == http.HTTPStatus.BAD_REQUEST
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Invalid request body")


@pytest.mark.asyncio
async def test_create_with_malformed_json(async_client):
    response = await async_client.post(
        "/api/resources",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == http.HTTPStatus.BAD_REQUEST
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_get_resource(async_client):
    created = await _create(async_client, name="Findable Resource")

    response = await async_client.get(f"/api/resources/{created['id']}")

    assert response.status_code == http.HTTPStatus.OK
    assert response.json() == {"success": True, "data": created}


@pytest.mark.asyncio
async def test_get_missing_resource(async_client):
    response = await async_client.get("/api/resources/999")

    assert response.status_code == http.HTTPStatus.NOT_FOUND
    assert response.json() == {"success": False, "error": "Resource not found"}


@pytest.mark.asyncio
async def test_get_non_numeric_id(async_client):
    response = await async_client.get("/api/resources/abc")

    assert response.status_code == http.HTTPStatus.NOT_FOUND
    assert response.json()["error"] == "Resource not found"


@pytest.mark.asyncio
async def test_list_filters_by_category(async_client):
    a = await _create(async_client, name="A", category="CategoryA")
    await _create(async_client, name="B", category="CategoryB")

    response = await async_client.get("/api/resources", params={"category": "CategoryA"})

    body = response.json()
    assert response.status_code == http.HTTPStatus.OK
    assert [r["id"] for r in body["data"]] == [a["id"]]
    assert body["pagination"] == {"total": 1, "count": 1}


@pytest.mark.asyncio
async def test_list_filters_by_status_and_search(async_client):
    await _create(async_client, name="Laptop", description="Work laptop", status="active")
    await _create(async_client, name="Old laptop", description="Retired", status="inactive")
    await _create(async_client, name="Desk", description="Standing desk", status="active")

    response = await async_client.get(
        "/api/resources", params={"status": "active", "search": "laptop"}
    )

    assert [r["name"] for r in response.json()["data"]] == ["Laptop"]


@pytest.mark.asyncio
async def test_replace_resource(async_client):
    created = await _create(async_client, category="Testing", status="inactive")

    response = await async_client.put(
        f"/api/resources/{created['id']}",
        json={"name": "Updated Resource", "description": "Updated description"},
    )

    assert response.status_code == http.HTTPStatus.OK
    body = response.json()
    assert body["message"] == "Resource updated successfully"
    assert body["data"]["name"] == "Updated Resource"
    assert body["data"]["category"] == "General"
    assert body["data"]["status"] == "active"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"description": "Only description"}, "Name is required for PUT operation"),
        ({"name": "Only name"}, "Description is required for PUT operation"),
        ({"name": "Name", "description": "  "}, "Description is required for PUT operation"),
    ],
)
async def test_replace_requires_core_fields(async_client, payload, message):
    created = await _create(async_client)

    response = await async_client.put(f"/api/resources/{created['id']}", json=payload)

    assert response.status_code == http.HTTPStatus.BAD_REQUEST
    assert response.json() == {"success": False, "error": message}


@pytest.mark.asyncio
async def test_replace_missing_resource(async_client):
    response = await async_client.put(
        "/api/resources/999", json={"name": "Name", "description": "Description"}
    )

    assert response.status_code == http.HTTPStatus.NOT_FOUND
    assert response.json()["error"] == "Resource not found"


@pytest.mark.asyncio
async def test_patch_resource(async_client):
    created = await _create(async_client, category="Testing")

    response = await async_client.patch(
        f"/api/resources/{created['id']}", json={"status": "inactive"}
    )

    assert response.status_code == http.HTTPStatus.OK
    body = response.json()
    assert body["message"] == "Resource patched successfully"
    assert body["data"]["status"] == "inactive"
    assert body["data"]["name"] == created["name"]
    assert body["data"]["category"] == "Testing"


@pytest.mark.asyncio
async def test_patch_empty_body(async_client):
    created = await _create(async_client)

    response = await async_client.patch(f"/api/resources/{created['id']}", json={})

    assert response.status_code == http.HTTPStatus.OK
    assert response.json() == {"success": True, "data": created, "message": "No changes made"}


@pytest.mark.asyncio
async def test_patch_invalid_status(async_client):
    created = await _create(async_client)

    response = await async_client.patch(
        f"/api/resources/{created['id']}", json={"status": "invalid_status"}
    )

    assert response.status_code == http.HTTPStatus.BAD_REQUEST
    assert response.json() == {"success": False, "error": STATUS_MESSAGE}


@pytest.mark.asyncio
async def test_patch_empty_name(async_client):
    created = await _create(async_client)

    response = await async_client.patch(f"/api/resources/{created['id']}", json={"name": " "})

    assert response.status_code == http.HTTPStatus.BAD_REQUEST
    assert response.json()["error"] == "Name cannot be empty"


@pytest.mark.asyncio
async def test_patch_missing_resource(async_client):
    response = await async_client.patch("/api/resources/999", json={"name": "Name"})

    assert response.status_code == http.HTTPStatus.NOT_FOUND


@pytest.mark.asyncio
async def test_delete_resource(async_client):
    created = await _create(async_client)

    response = await async_client.delete(f"/api/resources/{created['id']}")
    follow_up = await async_client.get(f"/api/resources/{created['id']}")

    assert response.status_code == http.HTTPStatus.OK
    assert response.json() == {"success": True, "message": "Resource deleted successfully"}
    assert follow_up.status_code == http.HTTPStatus.NOT_FOUND
    assert follow_up.json()["error"] == "Resource not found"


@pytest.mark.asyncio
async def test_delete_missing_resource(async_client):
    response = await async_client.delete("/api/resources/999")

    assert response.status_code == http.HTTPStatus.NOT_FOUND


@pytest.mark.asyncio
async def test_unknown_route(async_client):
    response = await async_client.get("/api/unknown")

    assert response.status_code == http.HTTPStatus.NOT_FOUND
    assert response.json() == {"success": False, "error": "Route /api/unknown not found"}


@pytest.mark.asyncio
async def test_unsupported_method_reads_as_unknown_route(async_client):
    response = await async_client.delete("/api/resources")

    assert response.status_code == http.HTTPStatus.NOT_FOUND
    assert response.json()["error"] == "Route /api/resources not found"


@pytest.mark.asyncio
async def test_storage_failure_returns_500(async_client, store):
    await async_client.get("/api/resources")
    await store.execute("DROP TABLE resources")

    response = await async_client.get("/api/resources")

    assert response.status_code == http.HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_unexpected_exception_returns_generic_500(async_client, monkeypatch):
    async def boom(*args, **kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(ResourceService, "get_by_id", boom)

    response = await async_client.get("/api/resources/1")

    assert response.status_code == http.HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.json() == {"success": False, "error": "Internal server error"}


@pytest.mark.asyncio
@pytest.mark.parametrize("resource_id", ["99999999999999999999999", "-99999999999999999999999"])
@pytest.mark.parametrize(
    ("method", "payload"),
    [
        ("GET", None),
        ("PUT", {"name": "Name", "description": "Description"}),
        ("PATCH", {"name": "Name"}),
        ("DELETE", None),
    ],
)
async def test_out_of_range_id_is_not_found(async_client, method, payload, resource_id):
    response = await async_client.request(
        method, f"/api/resources/{resource_id}", json=payload
    )

    assert response.status_code == http.HTTPStatus.NOT_FOUND
    assert response.json() == {"success": False, "error": "Resource not found"}


@pytest.mark.asyncio
@pytest.mark.parametrize("resource_id", ["1_0", "+10", "%2010", "10%20", "%EF%BC%91%EF%BC%90"])
@pytest.mark.parametrize(
    ("method", "payload"),
    [
        ("GET", None),
        ("PUT", {"name": "Name", "description": "Description"}),
        ("PATCH", {"name": "Name"}),
        ("DELETE", None),
    ],
)
async def test_non_canonical_id_does_not_match_a_row(async_client, method, payload, resource_id):
    for index in range(10):
        await _create(async_client, name=f"n{index}")

    response = await async_client.request(
        method, f"/api/resources/{resource_id}", json=payload
    )
    still_there = await async_client.get("/api/resources/10")

    assert response.status_code == http.HTTPStatus.NOT_FOUND
    assert response.json()["error"] == "Resource not found"
    assert still_there.json()["data"]["name"] == "n9"


@pytest.mark.asyncio
async def test_category_filter_is_case_sensitive(async_client):
    await _create(async_client, name="A", category="CategoryA")

    response = await async_client.get("/api/resources", params={"category": "categorya"})

    assert response.json()["data"] == []
    assert response.json()["pagination"] == {"total": 0, "count": 0}


@pytest.mark.asyncio
async def test_patch_null_category_resets_to_default(async_client):
    created = await _create(async_client, category="Testing")

    response = await async_client.patch(
        f"/api/resources/{created['id']}", json={"category": None}
    )

    assert response.status_code == http.HTTPStatus.OK
    assert response.json()["data"]["category"] == "General"


@pytest.mark.asyncio
async def test_collection_with_trailing_slash(async_client):
    created = await async_client.post(
        "/api/resources/", json={"name": "Slash", "description": "Trailing slash"}
    )
    listed = await async_client.get("/api/resources/")

    assert created.status_code == http.HTTPStatus.CREATED
    assert listed.status_code == http.HTTPStatus.OK
    assert [r["name"] for r in listed.json()["data"]] == ["Slash"]
