"""Task API tests — CRUD scoped to the authenticated owner.

Pattern: every test logs in through the real auth pipeline, then drives
the task endpoints with the returned bearer token.
"""

import pytest
import pytest_asyncio

from .conftest import bearer


@pytest_asyncio.fixture()
async def alice(login):
    return await login("alice", "password123")


async def _create(client, token, title="Test Task", description="Test Description"):
    r = await client.post(
        "/api/tasks",
        json={"title": title, "description": description},
        headers=bearer(token),
    )
    assert r.status_code == 201
    return r.json()


# ═══════════════════════════════════════════════════════════
# CRUD
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_task_crud(client, alice):
    token, user = alice

    task = await _create(client, token)
    assert task["title"] == "Test Task"
    assert task["description"] == "Test Description"
    assert task["completed"] is False
    assert task["user_id"] == user["id"]

    r = await client.get("/api/tasks", headers=bearer(token))
    assert r.status_code == 200
    assert len(r.json()) == 1

    r = await client.get(f"/api/tasks/{task['id']}", headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["id"] == task["id"]

    r = await client.put(
        f"/api/tasks/{task['id']}",
        json={"title": "Updated Task", "description": "Updated Description"},
        headers=bearer(token),
    )
    assert r.status_code == 200
    assert r.json()["title"] == "Updated Task"
    assert r.json()["description"] == "Updated Description"

    r = await client.delete(f"/api/tasks/{task['id']}", headers=bearer(token))
    assert r.status_code == 200
    assert r.json() == {"message": "Task deleted successfully"}

    r = await client.get(f"/api/tasks/{task['id']}", headers=bearer(token))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_list_is_newest_first(client, alice):
    token, _ = alice
    first = await _create(client, token, title="first")
    second = await _create(client, token, title="second")

    r = await client.get("/api/tasks", headers=bearer(token))
    assert [t["id"] for t in r.json()] == [second["id"], first["id"]]


@pytest.mark.asyncio
async def test_list_empty(client, alice):
    token, _ = alice
    r = await client.get("/api/tasks", headers=bearer(token))
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.asyncio
async def test_toggle_completed(client, alice):
    token, _ = alice
    task = await _create(client, token)

    r = await client.put(
        f"/api/tasks/{task['id']}",
        json={"title": task["title"], "completed": True},
        headers=bearer(token),
    )
    assert r.json()["completed"] is True

    # Omitting completed leaves it as is
    r = await client.put(
        f"/api/tasks/{task['id']}",
        json={"title": "Renamed"},
        headers=bearer(token),
    )
    assert r.json()["completed"] is True
    assert r.json()["title"] == "Renamed"


@pytest.mark.asyncio
async def test_description_defaults_to_empty(client, alice):
    token, _ = alice
    r = await client.post("/api/tasks", json={"title": "No description"}, headers=bearer(token))
    assert r.status_code == 201
    assert r.json()["description"] == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"title": ""}, {"description": "missing title"}])
async def test_create_validation(client, alice, body):
    token, _ = alice
    r = await client.post("/api/tasks", json=body, headers=bearer(token))
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_non_numeric_task_id(client, alice):
    token, _ = alice
    r = await client.get("/api/tasks/abc", headers=bearer(token))
    assert r.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["get", "put", "delete"])
async def test_missing_task(client, alice, method):
    token, _ = alice
    kwargs = {"json": {"title": "x"}} if method == "put" else {}
    r = await client.request(method.upper(), "/api/tasks/999", headers=bearer(token), **kwargs)
    assert r.status_code == 404
    assert r.json() == {"detail": "Task not found"}


# ═══════════════════════════════════════════════════════════
# Ownership
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_other_users_tasks_are_invisible(client, login, task_store):
    alice_token, _ = await login("alice", "password123")
    bob_token, _ = await login("bob", "password456")
    task = await _create(client, alice_token)

    r = await client.get("/api/tasks", headers=bearer(bob_token))
    assert r.json() == []

    r = await client.get(f"/api/tasks/{task['id']}", headers=bearer(bob_token))
    assert r.status_code == 404

    r = await client.put(
        f"/api/tasks/{task['id']}", json={"title": "hijacked"}, headers=bearer(bob_token)
    )
    assert r.status_code == 404

    r = await client.delete(f"/api/tasks/{task['id']}", headers=bearer(bob_token))
    assert r.status_code == 404

    assert task_store.tasks[task["id"]].title == "Test Task"


# ═══════════════════════════════════════════════════════════
# Authentication
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/api/tasks"),
        ("POST", "/api/tasks"),
        ("GET", "/api/tasks/1"),
        ("PUT", "/api/tasks/1"),
        ("DELETE", "/api/tasks/1"),
    ],
)
async def test_tasks_require_auth(client, task_store, method, path):
    """Rejected before the handler runs: the store is never touched."""
    r = await client.request(method, path, json={"title": "x"})
    assert r.status_code == 401
    assert task_store.tasks == {}

    r = await client.request(
        method, path, json={"title": "x"}, headers={"Authorization": "Bearer invalid-token"}
    )
    assert r.status_code == 401
    assert task_store.tasks == {}
