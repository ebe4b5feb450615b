"""
Shared fixtures.

DATABASE_URL and JWT_SECRET must be set before anything under app/ is
imported: the engine and the settings object are built at import time.
Tests run against a throwaway SQLite file so that worker threads (TestClient
and the concurrency tests) all see the same database.
"""
import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="backpack-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from app import models  # noqa: F401  registers every table on Base.metadata
from app.core.security import TokenCodec
from app.database import Base, SessionLocal, engine
from app.services.auth import AuthService
from main import app

TEST_SECRET = "test-secret"
DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def session_factory():
    """
    For assertions made between API calls. Use as `with session_factory() as s:`
    so the session (and its SQLite write lock) is released before the next
    request.
    """
    return SessionLocal


@pytest.fixture
def codec():
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def auth_service(codec):
    return AuthService(codec=codec)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    def _register(email: str, password: str = DEFAULT_PASSWORD):
        response = client.post("/api/users", json={"email": email, "password": password})
        assert response.status_code == 201, response.text
        return response

    return _register


@pytest.fixture
def login(client):
    def _login(email: str, password: str = DEFAULT_PASSWORD) -> dict:
        response = client.post("/api/token", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()

    return _login


@pytest.fixture
def auth_headers(register, login):
    """Register `email`, log in, and return a ready Authorization header."""

    def _auth_headers(email: str, password: str = DEFAULT_PASSWORD) -> dict:
        register(email, password)
        tokens = login(email, password)
        return {"Authorization": f"Bearer {tokens['token']}"}

    return _auth_headers
