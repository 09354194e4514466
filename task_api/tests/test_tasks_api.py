"""Tests for the task CRUD endpoints."""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from task_api.main import app
from task_api.database import get_session


@pytest.fixture(name="session")
def session_fixture():
    """Create a fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with overridden database session."""
    def get_session_override():
        yield session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def _create(client: TestClient, title: str = "Buy milk", description: str = "2%") -> dict:
    response = client.post(
        "/api/tasks", json={"title": title, "description": description, "status": "PENDING"}
    )
    assert response.status_code == 201
    return response.json()


def test_health_check(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_then_list_round_trip(client: TestClient):
    _create(client)

    response = client.get("/api/tasks")
    assert response.status_code == 200
    tasks = response.json()
    assert len(tasks) == 1
    task = tasks[0]
    assert task["title"] == "Buy milk"
    assert task["description"] == "2%"
    assert task["status"] == "PENDING"
    assert isinstance(task["id"], int)
    assert task["createdAt"]


def test_list_accepts_trailing_slash(client: TestClient):
    _create(client)
    response = client.get("/api/tasks/")
    assert response.status_code == 200
    assert len(response.json()) == 1


def test_task_json_shape(client: TestClient):
    task = _create(client)
    assert set(task) == {"id", "title", "description", "status", "createdAt"}


def test_create_forces_pending_status(client: TestClient):
    response = client.post(
        "/api/tasks", json={"title": "Already done?", "status": "COMPLETED"}
    )
    assert response.status_code == 201
    assert response.json()["status"] == "PENDING"


def test_create_without_description(client: TestClient):
    response = client.post("/api/tasks", json={"title": "No details"})
    assert response.status_code == 201
    assert response.json()["description"] is None


def test_create_strips_title(client: TestClient):
    task = _create(client, title="  Walk the dog  ")
    assert task["title"] == "Walk the dog"


@pytest.mark.parametrize("title", ["", "   "])
def test_create_rejects_blank_title(client: TestClient, title: str):
    response = client.post("/api/tasks", json={"title": title, "description": "x"})
    assert response.status_code == 400
    assert client.get("/api/tasks").json() == []


def test_create_accepts_title_at_length_limit(client: TestClient):
    task = _create(client, title="x" * 200)
    assert len(task["title"]) == 200


def test_create_rejects_overlong_title(client: TestClient):
    response = client.post("/api/tasks", json={"title": "x" * 201, "description": ""})
    assert response.status_code == 400
    assert client.get("/api/tasks").json() == []


def test_create_rejects_missing_title(client: TestClient):
    response = client.post("/api/tasks", json={"description": "no title"})
    assert response.status_code == 400


def test_create_rejects_malformed_json(client: TestClient):
    response = client.post(
        "/api/tasks",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_get_task(client: TestClient):
    task = _create(client)
    response = client.get(f"/api/tasks/{task['id']}")
    assert response.status_code == 200
    assert response.json() == task


def test_get_unknown_task(client: TestClient):
    response = client.get("/api/tasks/999")
    assert response.status_code == 404
    assert "detail" in response.json()


def test_update_task(client: TestClient):
    task = _create(client)

    response = client.put(
        f"/api/tasks/{task['id']}",
        json={"title": "Buy oat milk", "description": "", "status": "COMPLETED"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == task["id"]
    assert data["title"] == "Buy oat milk"
    assert data["description"] == ""
    assert data["status"] == "COMPLETED"
    assert data["createdAt"] == task["createdAt"]


def test_update_can_reopen_task(client: TestClient):
    task = _create(client)
    client.patch(f"/api/tasks/{task['id']}/complete")

    response = client.put(
        f"/api/tasks/{task['id']}",
        json={"title": task["title"], "description": None, "status": "PENDING"},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "PENDING"


def test_update_without_status_keeps_status(client: TestClient):
    task = _create(client)
    client.patch(f"/api/tasks/{task['id']}/complete")

    response = client.put(f"/api/tasks/{task['id']}", json={"title": "Renamed"})
    assert response.status_code == 200
    assert response.json()["status"] == "COMPLETED"


def test_update_rejects_blank_title(client: TestClient):
    task = _create(client)
    response = client.put(
        f"/api/tasks/{task['id']}",
        json={"title": "   ", "description": "changed", "status": "COMPLETED"},
    )
    assert response.status_code == 400

    unchanged = client.get(f"/api/tasks/{task['id']}").json()
    assert unchanged == task


def test_update_rejects_overlong_title(client: TestClient):
    task = _create(client)
    response = client.put(
        f"/api/tasks/{task['id']}",
        json={"title": "x" * 201, "description": "changed", "status": "COMPLETED"},
    )
    assert response.status_code == 400
    assert client.get(f"/api/tasks/{task['id']}").json() == task


def test_update_unknown_task(client: TestClient):
    _create(client)
    before = client.get("/api/tasks").json()

    response = client.put(
        "/api/tasks/999", json={"title": "Ghost", "description": None, "status": "PENDING"}
    )
    assert response.status_code == 404
    assert client.get("/api/tasks").json() == before


def test_complete_task(client: TestClient):
    task = _create(client)

    response = client.patch(f"/api/tasks/{task['id']}/complete")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "COMPLETED"
    assert data["title"] == task["title"]
    assert data["description"] == task["description"]
    assert data["createdAt"] == task["createdAt"]


def test_complete_is_idempotent(client: TestClient):
    task = _create(client)

    first = client.patch(f"/api/tasks/{task['id']}/complete")
    second = client.patch(f"/api/tasks/{task['id']}/complete")
    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["status"] == "COMPLETED"


def test_complete_unknown_task(client: TestClient):
    _create(client)
    before = client.get("/api/tasks").json()

    response = client.patch("/api/tasks/999/complete")
    assert response.status_code == 404
    assert client.get("/api/tasks").json() == before


def test_delete_task(client: TestClient):
    task = _create(client)

    response = client.delete(f"/api/tasks/{task['id']}")
    assert response.status_code == 204
    assert client.get("/api/tasks").json() == []

    again = client.delete(f"/api/tasks/{task['id']}")
    assert again.status_code == 404


def test_delete_unknown_task_leaves_store_alone(client: TestClient):
    _create(client, title="Keep me")
    response = client.delete("/api/tasks/999")
    assert response.status_code == 404
    assert [t["title"] for t in client.get("/api/tasks").json()] == ["Keep me"]


def test_non_integer_id_is_bad_request(client: TestClient):
    response = client.get("/api/tasks/abc")
    assert response.status_code == 400
