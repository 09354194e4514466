"""Interaction controller: turns UI events into API calls and cache updates.

Mode transitions::

    IDLE -> LOADING -> IDLE               load / add / complete
    IDLE -> EDIT_MODAL -> LOADING -> IDLE submit succeeded
                      -> LOADING -> EDIT_MODAL (submit failed)
                      -> IDLE             cancel / close
    IDLE -> CONFIRM_MODAL -> LOADING -> IDLE  confirmed
                          -> IDLE             cancelled

The cache is only touched after the API acknowledges a change, and any
failure leaves it exactly as it was.
"""

import logging
from contextlib import asynccontextmanager

from task_ui.client import (
    ApiError,
    ApiNotFoundError,
    ApiValidationError,
    TaskApiClient,
    TaskStatus,
)
from task_ui.notifications import Notifier
from task_ui.state import ClientState, PendingAction, PendingDelete, UiMode

logger = logging.getLogger(__name__)

MISSING_TITLE = "Please enter a task title."


class InteractionController:
    """Drives one session's :class:`ClientState` against the task API."""

    def __init__(self, state: ClientState, notifier: Notifier, api: TaskApiClient) -> None:
        self._state = state
        self._notifier = notifier
        self._api = api

    @property
    def state(self) -> ClientState:
        return self._state

    # -- API-backed actions --------------------------------------------------

    async def load(self) -> bool:
        """Replace the cache with the server's collection."""
        async with self._loading():
            try:
                tasks = await self._api.list_tasks()
            except ApiError as exc:
                logger.error(f"Error loading tasks: {exc}")
                self._notifier.error("Error loading tasks. Please try again.")
                return False
        self._state.replace_all(tasks)
        return True

    async def add(self, title: str, description: str = "") -> bool:
        title = (title or "").strip()
        description = (description or "").strip()
        if not title:
            self._notifier.warning(MISSING_TITLE)
            return False

        async with self._loading():
            try:
                task = await self._api.create_task(title, description)
            except ApiError as exc:
                self._report(exc, "Error adding task. Please try again.")
                return False
        self._state.prepend(task)
        self._notifier.success("Task added successfully!")
        return True

    async def submit_edit(
        self, title: str, description: str, status: TaskStatus
    ) -> bool:
        """Send the edit modal's form. The modal stays open on failure."""
        task_id = self._state.editing
        if self._state.mode != UiMode.EDIT_MODAL or task_id is None:
            logger.warning("Edit submitted with no edit modal open")
            return False

        title = (title or "").strip()
        description = (description or "").strip()
        if not title:
            self._notifier.warning(MISSING_TITLE)
            return False

        async with self._loading():
            try:
                task = await self._api.update_task(task_id, title, description, status)
            except ApiError as exc:
                self._report(exc, "Error updating task. Please try again.")
                return False
        self._state.replace(task)
        self._state.close_modals()
        self._notifier.success("Task updated successfully!")
        return True

    async def complete(self, task_id: int) -> bool:
        async with self._loading():
            try:
                task = await self._api.complete_task(task_id)
            except ApiError as exc:
                self._report(exc, "Error updating task. Please try again.")
                return False
        self._state.replace(task)
        self._notifier.success("Task marked as completed!")
        return True

    async def confirm(self) -> bool:
        """Execute the pending action, then close the confirmation."""
        action = self._state.pending
        if self._state.mode != UiMode.CONFIRM_MODAL or action is None:
            return False
        self._state.close_modals()
        return await self._execute(action)

    # -- modal handling ------------------------------------------------------

    def open_edit(self, task_id: int) -> bool:
        """Open the edit modal, pre-filled from the cached copy of the task."""
        if not self._can_open_modal():
            return False
        if self._state.find(task_id) is None:
            return False
        self._state.open_edit(task_id)
        return True

    def close_edit(self) -> None:
        if self._state.mode == UiMode.EDIT_MODAL:
            self._state.close_modals()

    def request_delete(self, task_id: int) -> bool:
        """Ask for confirmation before deleting *task_id*."""
        if not self._can_open_modal():
            return False
        if self._state.find(task_id) is None:
            return False
        self._state.open_confirm(PendingDelete(task_id=task_id))
        return True

    def cancel_confirm(self) -> None:
        """Discard the pending action without running it."""
        if self._state.mode == UiMode.CONFIRM_MODAL:
            self._state.close_modals()

    def dismiss_toast(self, toast_id: int) -> None:
        self._notifier.dismiss(toast_id)

    # -- private helpers -----------------------------------------------------

    async def _execute(self, action: PendingAction) -> bool:
        if action.kind == "delete":
            return await self._delete(action.task_id)
        raise ValueError(f"Unknown pending action: {action.kind}")

    async def _delete(self, task_id: int) -> bool:
        async with self._loading():
            try:
                await self._api.delete_task(task_id)
            except ApiError as exc:
                self._report(exc, "Error deleting task. Please try again.")
                return False
        self._state.remove(task_id)
        self._notifier.success("Task deleted successfully!")
        return True

    def _can_open_modal(self) -> bool:
        if self._state.mode != UiMode.IDLE:
            logger.info(f"Ignoring modal request while {self._state.mode.value}")
            return False
        return True

    def _report(self, exc: ApiError, fallback: str) -> None:
        """Turn an API failure into a toast of the matching severity."""
        if isinstance(exc, ApiValidationError):
            self._notifier.warning(f"{exc} Please check the task details.")
        elif isinstance(exc, ApiNotFoundError):
            self._notifier.error("That task no longer exists.")
        else:
            logger.error(f"{fallback} ({exc})")
            self._notifier.error(fallback)

    @asynccontextmanager
    async def _loading(self):
        """Hold LOADING while this or any overlapping API call is outstanding."""
        self._state.begin_call()
        try:
            yield
        finally:
            self._state.end_call()
