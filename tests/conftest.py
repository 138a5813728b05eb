"""Pytest configuration and fixtures."""

import os
from collections.abc import Mapping

DEFAULT_TEST_DATABASE_URL = "sqlite:///./test.db"


def resolve_test_database_url(environ: Mapping[str, str]) -> str:
    """Pick the database the tests may wipe, never the configured one.

    Tests delete every row after each run, so they use TEST_DATABASE_URL or a
    local SQLite file, and refuse a test URL equal to DATABASE_URL.
    """
    url = environ.get("TEST_DATABASE_URL") or DEFAULT_TEST_DATABASE_URL
    if url == environ.get("DATABASE_URL"):
        raise RuntimeError("TEST_DATABASE_URL must not point at the DATABASE_URL database")
    return url


SQLALCHEMY_DATABASE_URL = resolve_test_database_url(os.environ)

# Must be set before the application settings are first loaded
os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.api.dependencies import get_image_uploader
from src.database import Base, get_db
from src.main import app
from src.services.image_upload import ImageUploadService

FAKE_IMAGE_URL = "https://res.cloudinary.com/demo/image/upload/v1/offer.png"


class AuthHeaders(dict):
    """Dict subclass that also stores user info."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeImageUploader:
    """Stands in for the image host, recording what was uploaded."""

    def __init__(self, url: str = FAKE_IMAGE_URL):
        self.url = url
        self.uploads: list[tuple[bytes, str]] = []

    async def upload_file(self, data: bytes, mime_type: str) -> str:
        self.uploads.append((data, mime_type))
        return self.url


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    from src import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def image_uploader():
    """Fake image host."""
    return FakeImageUploader()


@pytest.fixture(scope="function")
def client(db, image_uploader):
    """Create a test client with database and image host overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    def override_get_image_uploader() -> ImageUploadService:
        return image_uploader

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_uploader] = override_get_image_uploader
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Sign up a user and return bearer auth headers with user info."""
    email = "seller@example.com"
    response = client.post(
        "/user/signup",
        json={"username": "Seller", "email": email, "password": "azerty", "newsletter": False},
    )
    assert response.status_code == 200
    data = response.json()

    return AuthHeaders({"Authorization": f"Bearer {data['token']}"}, user_id=data["id"], email=email)
