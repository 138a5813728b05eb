"""Image upload service for the Cloudinary REST API."""

import base64
import hashlib
import logging
import time
from typing import Any

import httpx

from src.config import Settings
from src.errors import UploadError

logger = logging.getLogger(__name__)


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Wrap raw file bytes into a base64 data URI."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Sign upload parameters the way Cloudinary expects.

    Parameters are sorted by key, joined as ``k=v`` pairs with ``&``, the API
    secret is appended and the whole string is SHA-1 hashed.
    """
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] is not None)
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()  # noqa: S324


class ImageUploadService:
    """Uploads encoded images to the hosting service and returns their URL."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self.settings = settings
        self.client = client

    @property
    def upload_url(self) -> str:
        base_url = self.settings.cloudinary_upload_url.rstrip("/")
        return f"{base_url}/{self.settings.cloudinary_name}/image/upload"

    def _signed_form(self, data_uri: str) -> dict[str, Any]:
        params: dict[str, Any] = {"timestamp": int(time.time())}
        if self.settings.cloudinary_folder:
            params["folder"] = self.settings.cloudinary_folder
        signature = sign_params(params, self.settings.cloudinary_api_secret)
        return {
            **params,
            "file": data_uri,
            "api_key": self.settings.cloudinary_api_key,
            "signature": signature,
        }

    async def upload(self, data_uri: str) -> str:
        """Upload a data URI and return the hosted secure URL."""
        try:
            response = await self.client.post(self.upload_url, data=self._signed_form(data_uri))
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling image host: {e}")
            raise UploadError(f"Image upload failed: {e}") from e

        if response.status_code != 200:
            # Avoid dumping huge bodies; include a small snippet.
            body = response.text[:500]
            logger.error(f"Image host rejected upload: {response.status_code} {body}")
            raise UploadError(f"Image upload failed: {response.status_code} {body}")

        try:
            data: dict[str, Any] = response.json()
        except ValueError as e:
            raise UploadError("Image host returned a non-JSON response.") from e
        secure_url = data.get("secure_url") if isinstance(data, dict) else None
        if not isinstance(secure_url, str) or not secure_url:
            raise UploadError("Image host returned no secure_url.")

        logger.info(f"Uploaded image to {secure_url}")
        return secure_url

    async def upload_file(self, data: bytes, mime_type: str) -> str:
        """Encode raw file bytes and upload them."""
        return await self.upload(to_data_uri(data, mime_type))
