"""
Shared fixtures for the API tests: an in-memory SQLite database swapped
in for `get_session`, plus a helper that signs a user up and logs in.
"""
import os

# settings are read once at import time
os.environ.setdefault("JWT_SECRET", "test-secret-with-enough-bytes-for-hs256!")
os.environ.setdefault("USDA_API_KEY", "")
os.environ.setdefault("GEMINI_API_KEY", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import app
from services.db import get_session, init_models


@pytest.fixture
def client():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    session_factory = async_sessionmaker(eng, expire_on_commit=False)
    ready = False

    async def _session():
        nonlocal ready
        if not ready:
            await init_models(eng)
            ready = True
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _session
    # one TestClient context = one event loop for the whole test
    with TestClient(app) as c:
        c.sessions = session_factory
        yield c
    app.dependency_overrides.clear()


def signup_and_login(client, email="sam@example.com", password="secret123", name="Sam"):
    r = client.post("/api/v1/auth/signup", json={"email": email, "password": password, "name": name})
    assert r.status_code == 201, r.text
    r = client.post("/api/v1/auth/token", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def auth(client):
    return signup_and_login(client)
