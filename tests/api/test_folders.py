"""Tests for folder endpoints."""
from collections.abc import AsyncGenerator

from fastapi import FastAPI
from httpx import AsyncClient

from core.config import Settings
from db.session import get_async_session
from models.user import User
from tests.conftest import bearer
from tests.fakes import FakeImageStorage


async def _create(
    client: AsyncClient,
    headers: dict[str, str],
    name: str,
    parent_id: int | None = None,
) -> int:
    body: dict = {"name": name}
    if parent_id is not None:
        body["folder_id"] = parent_id
    response = await client.post("/api/folder", json=body, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]["folder_Id"]


# =============================================================================
# Authentication
# =============================================================================


async def test_list_folders_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/folder")

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Not authenticated."}


async def test_missing_token_rejected_before_database_access(
    app: FastAPI,
    client: AsyncClient,
) -> None:
    opened: list[bool] = []

    async def tracking_session() -> AsyncGenerator[None]:
        opened.append(True)
        yield None

    app.dependency_overrides[get_async_session] = tracking_session

    response = await client.post("/api/folder", json={"name": "Work"})

    assert response.status_code == 401
    assert opened == []


async def test_invalid_token_rejected(client: AsyncClient) -> None:
    response = await client.get("/api/folder", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token."


# =============================================================================
# Create / read / delete
# =============================================================================


async def test_folder_lifecycle(
    client: AsyncClient,
    auth_headers: dict[str, str],
    settings: Settings,
) -> None:
    """Create, read, and delete a folder; deleted folders are gone."""
    response = await client.post("/api/folder", json={"name": "Work"}, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    folder_id = body["data"]["folder_Id"]
    assert isinstance(folder_id, int)

    response = await client.get(f"/api/folder/{folder_id}", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Work"
    assert data["folder_id"] is None
    assert data["image_url"] == settings.default_folder_image_url
    assert data["folders"] == []

    response = await client.delete(f"/api/folder/{folder_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Folder deleted successfully."}

    response = await client.get(f"/api/folder/{folder_id}", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Folder does not exist."}


async def test_create_folder_multipart_with_image(
    client: AsyncClient,
    auth_headers: dict[str, str],
    image_storage: FakeImageStorage,
) -> None:
    parent_id = await _create(client, auth_headers, "Parent")

    response = await client.post(
        "/api/folder",
        data={"name": "Pics", "folder_id": str(parent_id)},
        files={"litmark_image": ("cover.png", b"png bytes", "image/png")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    folder_id = response.json()["data"]["folder_Id"]
    detail = (await client.get(f"/api/folder/{folder_id}", headers=auth_headers)).json()["data"]
    assert detail["folder_id"] == parent_id
    assert len(image_storage.uploads) == 1
    assert detail["image_url"] == f"https://images.test/{image_storage.uploads[0][0]}"


async def test_create_folder_upload_failure(
    client: AsyncClient,
    auth_headers: dict[str, str],
    image_storage: FakeImageStorage,
) -> None:
    image_storage.fail = True

    response = await client.post(
        "/api/folder",
        data={"name": "Pics"},
        files={"litmark_image": ("cover.png", b"png bytes", "image/png")},
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to upload image."}


async def test_create_folder_name_required(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    missing = await client.post("/api/folder", json={}, headers=auth_headers)
    blank = await client.post("/api/folder", json={"name": "  "}, headers=auth_headers)

    assert missing.status_code == 400
    assert missing.json()["message"] == "name: Field required"
    assert blank.status_code == 400
    assert blank.json()["message"] == "name: Name is required."


async def test_create_folder_missing_parent(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    response = await client.post(
        "/api/folder", json={"name": "Child", "folder_id": 9999}, headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Parent folder does not exist."


async def test_get_folder_includes_children(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    parent_id = await _create(client, auth_headers, "Parent")
    first = await _create(client, auth_headers, "First", parent_id)
    second = await _create(client, auth_headers, "Second", parent_id)

    response = await client.get(f"/api/folder/{parent_id}", headers=auth_headers)

    children = response.json()["data"]["folders"]
    assert [c["id"] for c in children] == [first, second]
    assert all(c["folder_id"] == parent_id for c in children)


async def test_get_folder_invalid_id(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    not_int = await client.get("/api/folder/abc", headers=auth_headers)
    zero = await client.get("/api/folder/0", headers=auth_headers)

    assert not_int.status_code == 400
    assert not_int.json()["message"].startswith("folder_id:")
    assert zero.status_code == 400
    assert zero.json()["message"] == "Invalid ID."


async def test_other_users_folder_is_not_found(
    client: AsyncClient,
    auth_headers: dict[str, str],
    other_user: User,
    settings: Settings,
) -> None:
    folder_id = await _create(client, auth_headers, "Private")
    other_headers = bearer(other_user, settings)

    get = await client.get(f"/api/folder/{folder_id}", headers=other_headers)
    delete = await client.delete(f"/api/folder/{folder_id}", headers=other_headers)

    assert get.status_code == 404
    assert delete.status_code == 404
    assert (await client.get(f"/api/folder/{folder_id}", headers=auth_headers)).status_code == 200


# =============================================================================
# Listing and sorting
# =============================================================================


async def test_list_root_and_child_folders(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    root = await _create(client, auth_headers, "Root")
    child = await _create(client, auth_headers, "Child", root)

    roots = await client.get("/api/folder", headers=auth_headers)
    children = await client.get("/api/folder", params={"folder_id": root}, headers=auth_headers)

    assert [f["id"] for f in roots.json()["data"]] == [root]
    assert [f["id"] for f in children.json()["data"]] == [child]


async def test_sort_folders(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    for name in ("beta", "Alpha", "gamma"):
        await _create(client, auth_headers, name)

    asc = await client.get("/api/folder", params={"sort": "alphabet"}, headers=auth_headers)
    desc = await client.get(
        "/api/folder", params={"sort": "alphabet", "order": "desc"}, headers=auth_headers,
    )
    by_date = await client.get(
        "/api/folder", params={"sort": "date", "order": "desc"}, headers=auth_headers,
    )

    assert [f["name"] for f in asc.json()["data"]] == ["Alpha", "beta", "gamma"]
    assert [f["name"] for f in desc.json()["data"]] == ["gamma", "beta", "Alpha"]
    assert [f["name"] for f in by_date.json()["data"]] == ["gamma", "Alpha", "beta"]


async def test_sort_folders_invalid_field(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    response = await client.get("/api/folder", params={"sort": "size"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Sort must be one of: date, alphabet."


async def test_order_without_sort_rejected(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    response = await client.get("/api/folder", params={"order": "desc"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "Sort must be one of: date, alphabet.",
    }


# =============================================================================
# Update
# =============================================================================


async def test_rename_folder(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    parent = await _create(client, auth_headers, "Parent")
    folder_id = await _create(client, auth_headers, "Old", parent)

    response = await client.patch(
        f"/api/folder/{folder_id}", json={"name": "New"}, headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "New"
    assert data["folder_id"] == parent


async def test_rename_folder_blank_name(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    folder_id = await _create(client, auth_headers, "Keep")

    response = await client.patch(
        f"/api/folder/{folder_id}", json={"name": ""}, headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Name is required."}


async def test_rename_missing_folder(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    response = await client.patch("/api/folder/9999", json={"name": "X"}, headers=auth_headers)
    assert response.status_code == 404


async def test_delete_folder_cascades_to_chips(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> None:
    parent = await _create(client, auth_headers, "Parent")
    child = await _create(client, auth_headers, "Child", parent)
    chip = await client.post(
        "/api/chip", json={"name": "Deep", "folder_id": child}, headers=auth_headers,
    )
    chip_id = chip.json()["data"]["id"]

    await client.delete(f"/api/folder/{parent}", headers=auth_headers)

    assert (await client.get(f"/api/folder/{child}", headers=auth_headers)).status_code == 404
    assert (await client.get(f"/api/chip/{chip_id}", headers=auth_headers)).status_code == 404
