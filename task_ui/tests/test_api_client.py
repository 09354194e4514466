"""Tests for the async task API client."""

import json

import httpx
import pytest

from task_ui.client import (
    ApiNotFoundError,
    ApiValidationError,
    TaskApiClient,
    TaskStatus,
    TransportError,
)

TASK_JSON = {
    "id": 1,
    "title": "Buy milk",
    "description": "2%",
    "status": "PENDING",
    "createdAt": "2026-10-17T09:30:00",
}


def _client(handler) -> TaskApiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://api")
    return TaskApiClient(http)


class TestSuccessfulCalls:
    @pytest.mark.anyio()
    async def test_list_tasks_parses_records(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert request.url.path == "/api/tasks"
            return httpx.Response(200, json=[TASK_JSON])

        tasks = await _client(handler).list_tasks()
        assert len(tasks) == 1
        assert tasks[0].id == 1
        assert tasks[0].status == TaskStatus.PENDING
        assert tasks[0].created_at.year == 2026

    @pytest.mark.anyio()
    async def test_create_sends_pending_status(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json=TASK_JSON)

        task = await _client(handler).create_task("Buy milk", "2%")
        assert seen["body"] == {"title": "Buy milk", "description": "2%", "status": "PENDING"}
        assert task.title == "Buy milk"

    @pytest.mark.anyio()
    async def test_update_puts_full_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={**TASK_JSON, "status": "COMPLETED"})

        task = await _client(handler).update_task(1, "Buy milk", None, TaskStatus.COMPLETED)
        assert seen["method"] == "PUT"
        assert seen["path"] == "/api/tasks/1"
        assert seen["body"]["status"] == "COMPLETED"
        assert task.is_completed

    @pytest.mark.anyio()
    async def test_complete_patches(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "PATCH"
            assert request.url.path == "/api/tasks/1/complete"
            return httpx.Response(200, json={**TASK_JSON, "status": "COMPLETED"})

        task = await _client(handler).complete_task(1)
        assert task.status == TaskStatus.COMPLETED

    @pytest.mark.anyio()
    async def test_delete_accepts_no_content(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "DELETE"
            return httpx.Response(204)

        assert await _client(handler).delete_task(1) is None


class TestErrorMapping:
    @pytest.mark.anyio()
    async def test_400_is_validation_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"detail": "Task title must not be empty"})

        with pytest.raises(ApiValidationError, match="must not be empty"):
            await _client(handler).create_task("x", None)

    @pytest.mark.anyio()
    async def test_404_is_not_found(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"detail": "Task 9 not found"})

        with pytest.raises(ApiNotFoundError) as excinfo:
            await _client(handler).complete_task(9)
        assert excinfo.value.status_code == 404

    @pytest.mark.anyio()
    async def test_unexpected_status_is_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with pytest.raises(TransportError) as excinfo:
            await _client(handler).list_tasks()
        assert excinfo.value.status_code == 500

    @pytest.mark.anyio()
    async def test_connect_error_is_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError):
            await _client(handler).list_tasks()

    @pytest.mark.anyio()
    async def test_timeout_is_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(TransportError, match="timed out"):
            await _client(handler).delete_task(3)

    @pytest.mark.anyio()
    async def test_invalid_json_is_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>not json</html>")

        with pytest.raises(TransportError):
            await _client(handler).list_tasks()

    @pytest.mark.anyio()
    async def test_malformed_task_is_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"id": 1}])

        with pytest.raises(TransportError):
            await _client(handler).list_tasks()
