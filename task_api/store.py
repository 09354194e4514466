"""Persistent task collection backed by a SQLModel session."""

from typing import Optional

from sqlmodel import Session, select

from task_api.models import Task


class TaskStore:
    """Owns the authoritative task rows.

    The database assigns ``id`` on insert and the model default stamps
    ``created_at``; nothing here reorders or recomputes either.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def all(self) -> list[Task]:
        return list(self._session.exec(select(Task)).all())

    def get(self, task_id: int) -> Optional[Task]:
        return self._session.get(Task, task_id)

    def add(self, task: Task) -> Task:
        self._session.add(task)
        self._session.commit()
        self._session.refresh(task)
        return task

    def save(self, task: Task) -> Task:
        self._session.add(task)
        self._session.commit()
        self._session.refresh(task)
        return task

    def remove(self, task: Task) -> None:
        self._session.delete(task)
        self._session.commit()
