"""Tests for the Cloudinary upload client."""
import httpx
import pytest
import respx

from core.config import Settings
from services.exceptions import StorageUploadError
from services.image_storage import CloudinaryStorage, sign_params

UPLOAD_URL = "https://api.cloudinary.com/v1_1/demo/image/upload"


def test__sign_params__matches_documented_example() -> None:
    """Signature for Cloudinary's documented example request."""
    params = {"timestamp": "1315060510", "public_id": "sample_image"}
    assert sign_params(params, "abcd") == "b4ad47fb4e25c7bf5f92a20089f9db59bc302313"


def test__upload_url__uses_cloud_name(settings: Settings) -> None:
    assert CloudinaryStorage(settings).upload_url == UPLOAD_URL


@respx.mock
async def test__upload__posts_signed_form_and_returns_secure_url(settings: Settings) -> None:
    route = respx.post(UPLOAD_URL).mock(
        return_value=httpx.Response(
            200, json={"secure_url": "https://res.cloudinary.com/demo/image/upload/a.png"},
        ),
    )

    url = await CloudinaryStorage(settings).upload("a.png", b"bytes", "image/png")

    assert url == "https://res.cloudinary.com/demo/image/upload/a.png"
    assert route.called
    body = route.calls.last.request.content
    assert b'name="api_key"' in body
    assert b"123456" in body
    assert b'name="signature"' in body
    assert b'name="folder"' in body
    assert b"litmark" in body
    assert b'filename="a.png"' in body
    assert b"cloud-secret" not in body


@respx.mock
async def test__upload__http_error(settings: Settings) -> None:
    respx.post(UPLOAD_URL).mock(return_value=httpx.Response(401, json={"error": "bad key"}))

    with pytest.raises(StorageUploadError) as exc_info:
        await CloudinaryStorage(settings).upload("a.png", b"bytes", "image/png")
    assert exc_info.value.reason == "HTTP 401"


@respx.mock
async def test__upload__network_error(settings: Settings) -> None:
    respx.post(UPLOAD_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(StorageUploadError):
        await CloudinaryStorage(settings).upload("a.png", b"bytes", "image/png")


@respx.mock
async def test__upload__response_without_url(settings: Settings) -> None:
    respx.post(UPLOAD_URL).mock(return_value=httpx.Response(200, json={}))

    with pytest.raises(StorageUploadError):
        await CloudinaryStorage(settings).upload("a.png", b"bytes", "image/png")


async def test__upload__not_configured(settings: Settings) -> None:
    unconfigured = settings.model_copy(update={"cloudinary_api_secret": ""})

    with pytest.raises(StorageUploadError) as exc_info:
        await CloudinaryStorage(unconfigured).upload("a.png", b"bytes", "image/png")
    assert exc_info.value.reason == "Image storage is not configured."
