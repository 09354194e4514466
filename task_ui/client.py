"""Async HTTP client for the task API.

Maps HTTP outcomes onto a small error taxonomy so the interaction
controller can decide how loudly to complain:

- 400 -> :class:`ApiValidationError`
- 404 -> :class:`ApiNotFoundError`
- anything else that is not 2xx, plus network failures -> :class:`TransportError`
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

TASKS_PATH = "/api/tasks"


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class TaskRecord(BaseModel):
    """Client-side mirror of a task as returned by the API."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    created_at: datetime

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


class ApiError(Exception):
    """Base class for failed task API calls."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiValidationError(ApiError):
    """The API rejected the request body (HTTP 400)."""


class ApiNotFoundError(ApiError):
    """The targeted task does not exist (HTTP 404)."""


class TransportError(ApiError):
    """Network failure, unexpected status, or an unreadable response."""


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return response.reason_phrase


class TaskApiClient:
    """Thin wrapper around an ``httpx.AsyncClient`` pointed at the API.

    Parameters
    ----------
    http : httpx.AsyncClient
        Client whose ``base_url`` is the API root. The caller owns its
        lifetime.
    """

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def list_tasks(self) -> list[TaskRecord]:
        body = await self._request("GET", TASKS_PATH)
        if not isinstance(body, list):
            raise TransportError("Expected a list of tasks")
        return [self._parse(item) for item in body]

    async def create_task(self, title: str, description: Optional[str]) -> TaskRecord:
        payload = {
            "title": title,
            "description": description,
            "status": TaskStatus.PENDING.value,
        }
        return self._parse(await self._request("POST", TASKS_PATH, json=payload))

    async def update_task(
        self,
        task_id: int,
        title: str,
        description: Optional[str],
        status: TaskStatus,
    ) -> TaskRecord:
        payload = {"title": title, "description": description, "status": status.value}
        body = await self._request("PUT", f"{TASKS_PATH}/{task_id}", json=payload)
        return self._parse(body)

    async def complete_task(self, task_id: int) -> TaskRecord:
        body = await self._request("PATCH", f"{TASKS_PATH}/{task_id}/complete")
        return self._parse(body)

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"{TASKS_PATH}/{task_id}")

    # -- private helpers ------------------------------------------------------

    async def _request(self, method: str, url: str, json: Optional[dict] = None):
        try:
            response = await self._http.request(method, url, json=json)
        except httpx.TimeoutException as exc:
            raise TransportError(f"{method} {url} timed out") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        status = response.status_code
        logger.debug("%s %s -> %s", method, url, status)
        if status == 400:
            raise ApiValidationError(_detail(response), status)
        if status == 404:
            raise ApiNotFoundError(_detail(response), status)
        if not response.is_success:
            raise TransportError(f"HTTP error! status: {status}", status)

        if status == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"{method} {url} returned invalid JSON", status) from exc

    @staticmethod
    def _parse(item) -> TaskRecord:
        try:
            return TaskRecord.model_validate(item)
        except ValidationError as exc:
            raise TransportError(f"Unexpected task payload: {exc}") from exc
