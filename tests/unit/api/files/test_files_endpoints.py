"""Object storage endpoint tests."""

import pytest
from fastapi import status
from httpx import AsyncClient

from src.api.core.dependencies import get_storage_client
from src.api.core.messages import MessageCode
from src.api.files.validators import safe_filename
from tests.utils.assertions import assert_error_response, assert_success_response
from tests.utils.fakes import FakeStorageClient


@pytest.mark.asyncio
async def test_upload_stores_under_user_prefix(
    authorized_client: AsyncClient, test_user, storage_client
):
    response = await authorized_client.post(
        "/v1/files",
        files={"file": ("../../etc/report 2026.csv", b"a,b\n1,2\n", "text/csv")},
    )

    data = assert_success_response(
        response, MessageCode.FILE_UPLOADED, status.HTTP_201_CREATED
    )
    expected_key = f"uploads/{test_user.id}/report-2026.csv"
    assert data["key"] == expected_key
    assert data["size"] == 8
    assert storage_client.objects[expected_key] == b"a,b\n1,2\n"


@pytest.mark.asyncio
async def test_empty_upload_is_rejected(authorized_client: AsyncClient):
    response = await authorized_client.post(
        "/v1/files", files={"file": ("empty.txt", b"", "text/plain")}
    )

    body = assert_error_response(
        response, MessageCode.INVALID_INPUT, status.HTTP_400_BAD_REQUEST
    )
    assert body["details"]["field"] == "file"


@pytest.mark.asyncio
async def test_oversized_upload_is_rejected(
    authorized_client: AsyncClient, storage_client, monkeypatch
):
    monkeypatch.setattr("src.api.files.router.MAX_UPLOAD_SIZE", 4)

    response = await authorized_client.post(
        "/v1/files", files={"file": ("big.bin", b"12345", "application/octet-stream")}
    )

    body = assert_error_response(
        response, MessageCode.FILE_TOO_LARGE, status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    )
    assert body["details"]["max_size_bytes"] == 4
    assert storage_client.objects == {}


@pytest.mark.asyncio
async def test_list_files_by_prefix(authorized_client: AsyncClient, storage_client):
    storage_client.objects.update(
        {"uploads/a/one.txt": b"1", "uploads/b/two.txt": b"22", "other/x": b"333"}
    )

    data = assert_success_response(
        await authorized_client.get("/v1/files", params={"prefix": "uploads/"})
    )

    assert [item["key"] for item in data] == ["uploads/a/one.txt", "uploads/b/two.txt"]
    assert [item["size"] for item in data] == [1, 2]


@pytest.mark.asyncio
async def test_signed_download_url(authorized_client: AsyncClient):
    response = await authorized_client.get(
        "/v1/files/download", params={"key": "uploads/a/one.txt", "expires_in": 600}
    )

    data = assert_success_response(response)
    assert data["key"] == "uploads/a/one.txt"
    assert data["expires_in"] == 600
    assert data["url"].endswith("uploads/a/one.txt?X-Amz-Expires=600")


@pytest.mark.asyncio
async def test_download_expiry_bounds(authorized_client: AsyncClient):
    response = await authorized_client.get(
        "/v1/files/download", params={"key": "k", "expires_in": 5}
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_storage_not_configured(authorized_client: AsyncClient, app):
    app.dependency_overrides[get_storage_client] = lambda: FakeStorageClient(
        configured=False
    )

    response = await authorized_client.get("/v1/files")

    assert_error_response(
        response,
        MessageCode.STORAGE_NOT_CONFIGURED,
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )


@pytest.mark.asyncio
async def test_files_require_session(public_client: AsyncClient):
    response = await public_client.get("/v1/files")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("photo.jpg", "photo.jpg"),
        ("C:\\Users\\me\\photo.jpg", "photo.jpg"),
        ("../secret", "secret"),
        ("my file (1).png", "my-file-1-.png"),
        ("...", "upload"),
        (None, "upload"),
    ],
)
def test_safe_filename(filename, expected):
    assert safe_filename(filename) == expected
