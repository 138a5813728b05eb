"""Image upload adapter tests."""

import base64
import hashlib
from urllib.parse import parse_qs

import httpx
import pytest

from src.config import Settings
from src.errors import UploadError
from src.services.image_upload import ImageUploadService, sign_params, to_data_uri


def _settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite:///./test.db",
        "cloudinary_name": "demo-cloud",
        "cloudinary_api_key": "123456",
        "cloudinary_api_secret": "s3cret",
    }
    values.update(overrides)
    return Settings(**values)


def _service(handler, **overrides) -> ImageUploadService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ImageUploadService(_settings(**overrides), client)


def test_to_data_uri():
    """Test wrapping bytes into a base64 data URI."""
    data_uri = to_data_uri(b"hello", "image/png")
    assert data_uri == f"data:image/png;base64,{base64.b64encode(b'hello').decode()}"


def test_sign_params_sorts_keys():
    """Test the signature covers sorted params followed by the secret."""
    expected = hashlib.sha1(b"folder=offers&timestamp=1700000000s3cret").hexdigest()
    assert sign_params({"timestamp": 1700000000, "folder": "offers"}, "s3cret") == expected


@pytest.mark.asyncio
async def test_upload_returns_secure_url():
    """Test a successful upload posts a signed form and returns the URL."""
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["form"] = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        return httpx.Response(200, json={"secure_url": "https://res.cloudinary.com/x.png"})

    service = _service(handler, cloudinary_folder="offers")
    url = await service.upload_file(b"img", "image/jpeg")

    assert url == "https://res.cloudinary.com/x.png"
    assert captured["url"] == "https://api.cloudinary.com/v1_1/demo-cloud/image/upload"
    form = captured["form"]
    assert form["api_key"] == "123456"
    assert form["folder"] == "offers"
    assert form["file"] == to_data_uri(b"img", "image/jpeg")
    assert form["signature"] == sign_params(
        {"timestamp": form["timestamp"], "folder": "offers"}, "s3cret"
    )


@pytest.mark.asyncio
async def test_upload_rejected_by_host():
    """Test a non-200 answer raises UploadError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "Invalid Signature"}})

    with pytest.raises(UploadError, match="401"):
        await _service(handler).upload("data:image/png;base64,AAAA")


@pytest.mark.asyncio
async def test_upload_network_error():
    """Test a transport failure raises UploadError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UploadError):
        await _service(handler).upload("data:image/png;base64,AAAA")


@pytest.mark.asyncio
async def test_upload_missing_secure_url():
    """Test a response without secure_url raises UploadError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"public_id": "abc"})

    with pytest.raises(UploadError, match="secure_url"):
        await _service(handler).upload("data:image/png;base64,AAAA")


def test_production_requires_cloudinary_credentials():
    """Test production settings refuse missing image host credentials."""
    with pytest.raises(ValueError, match="CLOUDINARY"):
        Settings(
            environment="production",
            database_url="postgresql://u:p@db:5432/marketplace",
            cloudinary_name="",
        )
