"""Domain rules for tasks, sitting between the routes and the store."""

import logging
from typing import Optional

from task_api.errors import TaskNotFoundError, TaskValidationError
from task_api.models import Task, TaskStatus
from task_api.store import TaskStore

logger = logging.getLogger(__name__)


def _clean_title(title: Optional[str]) -> str:
    """Return the stripped title, or raise if nothing is left."""
    cleaned = (title or "").strip()
    if not cleaned:
        raise TaskValidationError("Task title must not be empty")
    return cleaned


class TaskService:
    """Enforces task invariants on top of a :class:`TaskStore`.

    New tasks always start PENDING, titles are never blank, and
    ``id``/``created_at`` are never touched after creation.
    """

    def __init__(self, store: TaskStore) -> None:
        self._store = store

    def list(self) -> list[Task]:
        """Return every task. Ordering is left to the caller."""
        return self._store.all()

    def get(self, task_id: int) -> Task:
        task = self._store.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def create(
        self,
        title: Optional[str],
        description: Optional[str] = None,
        status: Optional[TaskStatus] = None,
    ) -> Task:
        """Create a task. Any supplied *status* is ignored: new tasks are PENDING."""
        cleaned = _clean_title(title)
        if status is not None and status != TaskStatus.PENDING:
            logger.debug("Ignoring status %s on create", status.value)
        task = self._store.add(
            Task(title=cleaned, description=description, status=TaskStatus.PENDING)
        )
        logger.info("Created task %s", task.id)
        return task

    def update(
        self,
        task_id: int,
        title: Optional[str],
        description: Optional[str],
        status: Optional[TaskStatus] = None,
    ) -> Task:
        """Replace the mutable fields of a task.

        A missing *status* keeps the current one.
        """
        task = self.get(task_id)
        cleaned = _clean_title(title)
        task.title = cleaned
        task.description = description
        if status is not None:
            task.status = status
        task = self._store.save(task)
        logger.info("Updated task %s", task_id)
        return task

    def complete(self, task_id: int) -> Task:
        """Mark a task COMPLETED. Completing twice is a no-op success."""
        task = self.get(task_id)
        if task.status == TaskStatus.COMPLETED:
            return task
        task.status = TaskStatus.COMPLETED
        task = self._store.save(task)
        logger.info("Completed task %s", task_id)
        return task

    def delete(self, task_id: int) -> None:
        task = self.get(task_id)
        self._store.remove(task)
        logger.info("Deleted task %s", task_id)
