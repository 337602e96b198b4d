"""API integration tests."""

import tempfile
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from taskhub.api.app import create_app
from taskhub.config import Settings
from taskhub.db.connection import Database

ANN = {"X-User-Id": "1"}
BOB = {"X-User-Id": "2"}


@pytest.fixture(params=[False, True], ids=["no-cache", "cache"])
async def app_with_db(request) -> AsyncGenerator[tuple, None]:
    """Create an app with a temporary database, with and without the cache."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        db = Database(db_path)
        await db.connect()

        settings = Settings(
            database_path=db_path,
            cache_enabled=request.param,
            app_domain="http://test",
        )
        app = create_app(settings)
        app.state.db = db

        yield app, db

        await db.disconnect()


@pytest.fixture
async def client(app_with_db) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    app, _ = app_with_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _create_task(client: AsyncClient, headers: dict, **body) -> dict:
    response = await client.post("/api/v1/tasks", json=body, headers=headers)
    assert response.status_code == 201
    return response.json()


async def _create_note(client: AsyncClient, **body) -> dict:
    response = await client.post("/api/v1/notes", json=body)
    assert response.status_code == 201
    return response.json()


class TestDefaultEndpoints:
    """Tests for health, help and status endpoints."""

    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.9.0"

    async def test_help(self, client: AsyncClient):
        response = await client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["endpoints"]["tasks"] == "http://test/api/v1/tasks"
        assert data["version"] == "1.9.0"

    async def test_status_counts(self, client: AsyncClient, app_with_db):
        app, _ = app_with_db
        await _create_task(client, ANN, name="One")
        await _create_note(client, name="Note")
        await client.post("/api/v1/users", json={"name": "Ann", "email": "ann@example.com"})

        response = await client.get("/status")
        assert response.status_code == 200
        data = response.json()
        assert data["stats"] == {"users": 1, "tasks": 1, "notes": 1}
        assert data["database"] == "OK"
        expected = "OK" if app.state.settings.cache_enabled else "Disabled"
        assert data["cache"] == expected
        assert data["logger"] in ("Enabled", "Disabled")


class TestTasksAPI:
    """Tests for tasks API."""

    async def test_requires_user_header(self, client: AsyncClient):
        response = await client.get("/api/v1/tasks")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    @pytest.mark.parametrize("value", [b"\xb2", b"abc", b"0", b"-3", b""])
    async def test_invalid_user_header(self, client: AsyncClient, value: bytes):
        response = await client.get("/api/v1/tasks", headers={"X-User-Id": value})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_list_tasks_empty(self, client: AsyncClient):
        response = await client.get("/api/v1/tasks", headers=ANN)
        assert response.status_code == 200
        assert response.json() == []

    async def test_create_and_get_task(self, client: AsyncClient):
        created = await _create_task(client, ANN, name="Write report", description="Q3")
        assert created["status"] == 0
        assert created["user_id"] == 1
        assert created["created_at"] is not None

        response = await client.get(f"/api/v1/tasks/{created['id']}", headers=ANN)
        assert response.status_code == 200
        assert response.json() == created

    async def test_other_user_cannot_see_task(self, client: AsyncClient):
        created = await _create_task(client, ANN, name="Private")

        response = await client.get(f"/api/v1/tasks/{created['id']}", headers=BOB)
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Task not found."

        response = await client.put(
            f"/api/v1/tasks/{created['id']}", json={"name": "Hijacked"}, headers=BOB
        )
        assert response.status_code == 404

        response = await client.delete(f"/api/v1/tasks/{created['id']}", headers=BOB)
        assert response.status_code == 404

        response = await client.get(f"/api/v1/tasks/{created['id']}", headers=ANN)
        assert response.json()["name"] == "Private"

    async def test_update_task(self, client: AsyncClient):
        created = await _create_task(client, ANN, name="Draft", description="keep me")

        response = await client.put(
            f"/api/v1/tasks/{created['id']}", json={"status": 1}, headers=ANN
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == 1
        assert data["name"] == "Draft"
        assert data["description"] == "keep me"
        assert data["created_at"] == created["created_at"]
        assert data["updated_at"] is not None

        response = await client.get(f"/api/v1/tasks/{created['id']}", headers=ANN)
        assert response.json()["status"] == 1

    async def test_update_missing_task(self, client: AsyncClient):
        response = await client.put("/api/v1/tasks/999", json={"name": "x"}, headers=ANN)
        assert response.status_code == 404

    async def test_invalid_status_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/tasks", json={"name": "Bad", "status": 7}, headers=ANN
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_delete_task(self, client: AsyncClient):
        created = await _create_task(client, ANN, name="Temp")

        response = await client.delete(f"/api/v1/tasks/{created['id']}", headers=ANN)
        assert response.status_code == 204

        response = await client.get(f"/api/v1/tasks/{created['id']}", headers=ANN)
        assert response.status_code == 404

    async def test_paged_listing(self, client: AsyncClient):
        ids = [(await _create_task(client, ANN, name=f"Task {i}"))["id"] for i in range(3)]
        await _create_task(client, BOB, name="Task of Bob")

        response = await client.get(
            "/api/v1/tasks", params={"page": 2, "per_page": 1}, headers=ANN
        )
        assert response.status_code == 200
        data = response.json()
        assert [t["id"] for t in data["items"]] == [ids[1]]
        assert data["total"] == 3
        assert data["total_pages"] == 3

    async def test_paged_listing_past_end(self, client: AsyncClient):
        await _create_task(client, ANN, name="Only")

        response = await client.get("/api/v1/tasks", params={"page": 4}, headers=ANN)
        data = response.json()
        assert data["items"] == []
        assert data["total"] == 1

    async def test_search_with_status(self, client: AsyncClient):
        await _create_task(client, ANN, name="Report draft", status=0)
        await _create_task(client, ANN, name="Report final", status=1)

        response = await client.get("/api/v1/tasks/search/Report", params={"status": 1}, headers=ANN)
        assert [t["name"] for t in response.json()] == ["Report final"]

        response = await client.get("/api/v1/tasks/search/Report", headers=ANN)
        assert len(response.json()) == 2

        response = await client.get("/api/v1/tasks/search/Report", params={"status": "x"}, headers=ANN)
        assert len(response.json()) == 2

    async def test_search_with_non_ascii_digit_status(self, client: AsyncClient):
        """A status that only looks numeric does not filter."""
        await _create_task(client, ANN, name="Report draft", status=0)
        await _create_task(client, ANN, name="Report final", status=1)

        response = await client.get(
            "/api/v1/tasks/search/Report", params={"status": "\u00b2"}, headers=ANN
        )
        assert response.status_code == 200
        assert [t["name"] for t in response.json()] == ["Report draft", "Report final"]

    async def test_search_no_results(self, client: AsyncClient):
        response = await client.get("/api/v1/tasks/search/nothing", headers=ANN)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "EMPTY_SEARCH_RESULT"


class TestNotesAPI:
    """Tests for notes API."""

    async def test_list_notes_empty(self, client: AsyncClient):
        response = await client.get("/api/v1/notes")
        assert response.status_code == 200
        assert response.json() == []

    async def test_paged_listing_empty(self, client: AsyncClient):
        response = await client.get("/api/v1/notes", params={"page": 1})
        assert response.status_code == 200
        assert response.json()["total"] == 0

    async def test_search_notes(self, client: AsyncClient):
        first = await _create_note(client, name="Buy milk")
        second = await _create_note(client, name="Buy eggs", description="milk allergy")

        response = await client.get("/api/v1/notes/search/milk")
        assert response.status_code == 200
        assert [n["id"] for n in response.json()] == [first["id"], second["id"]]

    async def test_search_notes_none_found(self, client: AsyncClient):
        response = await client.get("/api/v1/notes/search/bread")
        assert response.status_code == 404

    async def test_note_crud(self, client: AsyncClient):
        created = await _create_note(client, name="Old", description="text")

        response = await client.put(f"/api/v1/notes/{created['id']}", json={"name": "New"})
        assert response.status_code == 200
        assert response.json()["name"] == "New"
        assert response.json()["description"] == "text"

        response = await client.get(f"/api/v1/notes/{created['id']}")
        assert response.json()["name"] == "New"

        response = await client.delete(f"/api/v1/notes/{created['id']}")
        assert response.status_code == 204

        response = await client.get(f"/api/v1/notes/{created['id']}")
        assert response.status_code == 404

    async def test_get_note_not_found(self, client: AsyncClient):
        response = await client.get("/api/v1/notes/999")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_invalid_page_rejected(self, client: AsyncClient):
        response = await client.get("/api/v1/notes", params={"page": 0})
        assert response.status_code == 400


class TestUsersAPI:
    """Tests for users API."""

    async def test_create_user(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/users", json={"name": "Ann", "email": "ann@example.com"}
        )
        assert response.status_code == 201
        assert response.json()["email"] == "ann@example.com"

    async def test_duplicate_email_rejected(self, client: AsyncClient):
        body = {"name": "Ann", "email": "ann@example.com"}
        await client.post("/api/v1/users", json=body)

        response = await client.post("/api/v1/users", json=body)
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Email already exists."

    async def test_update_user(self, client: AsyncClient):
        created = (
            await client.post("/api/v1/users", json={"name": "Ann", "email": "ann@example.com"})
        ).json()

        response = await client.put(f"/api/v1/users/{created['id']}", json={"name": "Anna"})
        assert response.status_code == 200
        assert response.json()["name"] == "Anna"
        assert response.json()["email"] == "ann@example.com"

    async def test_delete_user_removes_tasks(self, client: AsyncClient):
        created = (
            await client.post("/api/v1/users", json={"name": "Ann", "email": "ann@example.com"})
        ).json()
        headers = {"X-User-Id": str(created["id"])}
        await _create_task(client, headers, name="Ann's task")

        response = await client.delete(f"/api/v1/users/{created['id']}")
        assert response.status_code == 204

        response = await client.get("/api/v1/tasks", headers=headers)
        assert response.json() == []

        response = await client.get(f"/api/v1/users/{created['id']}")
        assert response.status_code == 404

    async def test_search_users(self, client: AsyncClient):
        await client.post("/api/v1/users", json={"name": "Ann", "email": "ann@example.com"})

        response = await client.get("/api/v1/users/search/An")
        assert [u["name"] for u in response.json()] == ["Ann"]

        response = await client.get("/api/v1/users/search/Zed")
        assert response.status_code == 404

    async def test_deleted_users_tasks_are_gone(self, client: AsyncClient):
        created = (
            await client.post("/api/v1/users", json={"name": "Ann", "email": "ann@example.com"})
        ).json()
        headers = {"X-User-Id": str(created["id"])}
        task = await _create_task(client, headers, name="Ann's task")

        response = await client.get(f"/api/v1/tasks/{task['id']}", headers=headers)
        assert response.status_code == 200

        await client.delete(f"/api/v1/users/{created['id']}")

        response = await client.get(f"/api/v1/tasks/{task['id']}", headers=headers)
        assert response.status_code == 404
