"""Upload client for the Cloudinary image storage API."""
import hashlib
import logging
import time
from typing import Protocol

import httpx

from core.config import Settings
from services.exceptions import StorageUploadError

logger = logging.getLogger(__name__)

CLOUDINARY_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"
DEFAULT_TIMEOUT = 30.0


class ImageStorage(Protocol):
    """Anything that can store image bytes and return a public URL."""

    async def upload(self, filename: str, content: bytes, content_type: str) -> str:
        """Store the image and return its URL."""
        ...


def sign_params(params: dict[str, str], api_secret: str) -> str:
    """
    Compute a Cloudinary request signature.

    Parameters are sorted by key, joined as ``key=value`` pairs with ``&``,
    suffixed with the API secret and hashed with SHA-1.
    """
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()  # noqa: S324


class CloudinaryStorage:
    """Signed uploads to Cloudinary using its REST API."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._cloud_name = settings.cloudinary_cloud_name
        self._api_key = settings.cloudinary_api_key
        self._api_secret = settings.cloudinary_api_secret
        self._folder = settings.cloudinary_folder
        self._configured = settings.storage_configured
        self._transport = transport
        self._timeout = timeout

    @property
    def upload_url(self) -> str:
        """Endpoint for image uploads to the configured cloud."""
        return CLOUDINARY_UPLOAD_URL.format(cloud_name=self._cloud_name)

    async def upload(self, filename: str, content: bytes, content_type: str) -> str:
        """
        Upload an image and return its HTTPS URL.

        Raises:
            StorageUploadError: If storage is not configured, the request fails,
                or Cloudinary answers with an error.
        """
        if not self._configured:
            raise StorageUploadError("Image storage is not configured.")

        params = {"folder": self._folder, "timestamp": str(int(time.time()))}
        form = {
            **params,
            "api_key": self._api_key,
            "signature": sign_params(params, self._api_secret),
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.upload_url,
                    data=form,
                    files={"file": (filename, content, content_type)},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Cloudinary rejected upload of %s: %s %s",
                filename, e.response.status_code, e.response.text,
            )
            raise StorageUploadError(f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error("Cloudinary upload of %s failed: %s", filename, e)
            raise StorageUploadError(str(e)) from e

        body = response.json()
        url = body.get("secure_url") or body.get("url")
        if not url:
            raise StorageUploadError("Upload response did not include a URL")
        logger.info("Uploaded image %s to %s", filename, url)
        return url
