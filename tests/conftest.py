"""Test fixtures — an app wired to in-memory stores.

Learn: create_app() takes a Settings object, so each test builds its own
app with a known signing secret and bcrypt cost 4 (the minimum, ~1ms per
hash). The SQLAlchemy stores are replaced through dependency_overrides,
and httpx's ASGITransport doesn't run the lifespan, so no database is
touched. The auth pipeline itself (hashing, JWT, bearer dependency) runs
for real.
"""

import string

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from taskmanager.api.auth import get_user_service
from taskmanager.api.tasks import get_task_service
from taskmanager.config import Settings
from taskmanager.main import create_app

from .fakes import FakeTaskStore, FakeUserStore

TEST_SECRET = "test-secret-0123456789-abcdefghijklmnopqrstuvwxyz-ABCDEFGHIJKLMNOP"


@pytest.fixture()
def test_settings():
    return Settings(
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        access_token_expire_minutes=60,
        auto_create_tables=False,
        environment="development",
    )


@pytest.fixture()
def user_store():
    return FakeUserStore()


@pytest.fixture()
def task_store():
    return FakeTaskStore()


@pytest.fixture()
def app(test_settings, user_store, task_store):
    app = create_app(test_settings)
    app.dependency_overrides[get_user_service] = lambda: user_store
    app.dependency_overrides[get_task_service] = lambda: task_store
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def login(client):
    """Register a user through the API, log in, and return (token, user_json)."""

    async def _login(username="alice", password="password123"):
        await client.post(
            "/api/register",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "password": password,
            },
        )
        r = await client.post("/api/login", json={"username": username, "password": password})
        assert r.status_code == 200
        body = r.json()
        return body["token"], body["user"]

    return _login


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


B64URL = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"


def flip_char(segment: str, index: int) -> str:
    """Change one base64url character so that the decoded bytes change too.

    Swapping for a neighbouring character can leave the bytes intact when
    only padding bits differ; flipping the high bit of the 6-bit value can't.
    """
    char = segment[index]
    replacement = B64URL[B64URL.index(char) ^ 32]
    return segment[:index] + replacement + segment[index + 1:]
