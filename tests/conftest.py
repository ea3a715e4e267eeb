"""
This file contains shared fixtures and configuration for the test suite.

Pytest will automatically discover and use the fixtures defined in this file.

The application runs against a throwaway SQLite file through the same async
engine code path used for PostgreSQL. The environment is prepared before any
`app` module is imported, since settings and the engine are created at import
time.
"""

import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="project_hub_tests_"))
_DB_PATH = _TEST_ROOT / "test.db"

os.environ["PROJECT_HUB_DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["UPLOAD_DIR"] = str(_TEST_ROOT / "uploads")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_TO_FILE"] = "false"

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402

from app import models  # noqa: E402, F401
from app.models.base import Base  # noqa: E402

# A tiny valid PNG header is enough: uploads are stored, not decoded
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(autouse=True)
def reset_database() -> Generator[None, None, None]:
    """Give every test empty tables."""
    engine = create_engine(f"sqlite:///{_DB_PATH}")
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    engine.dispose()
    yield


@pytest.fixture(scope="session")
def upload_root() -> Path:
    return _TEST_ROOT / "uploads"


@pytest.fixture(scope="session")
def app() -> FastAPI:
    """
    Create a new application instance for the test session.
    """
    from main import create_app

    return create_app()


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    Fixture to get a test client for making API requests.
    The TestClient handles the application's lifespan events (startup/shutdown).
    """
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict]:
    """Sign a user up through the API; returns ``{"userId", "email", "token"}``."""

    def _register(
        name: str = "Ada",
        surname: str = "Lovelace",
        email: str | None = None,
        password: str = "secret-password",
    ) -> dict:
        email = email or f"{name}.{surname}@example.com".lower()
        response = client.post(
            "/api/users/signup",
            data={
                "name": name,
                "surname": surname,
                "email": email,
                "password": password,
                "age": "30",
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    def _headers(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
