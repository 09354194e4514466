"""CRUD endpoints for tasks."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from task_api.database import get_session
from task_api.models import TaskRead, TaskWrite
from task_api.service import TaskService
from task_api.store import TaskStore

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_service(session: Session = Depends(get_session)) -> TaskService:
    """Build a task service bound to the request's database session."""
    return TaskService(TaskStore(session))


@router.get("")
@router.get("/", include_in_schema=False)
def list_tasks(service: TaskService = Depends(get_service)) -> list[TaskRead]:
    """List all tasks."""
    return [TaskRead.model_validate(task) for task in service.list()]


@router.get("/{task_id}")
def get_task(task_id: int, service: TaskService = Depends(get_service)) -> TaskRead:
    """Get a single task by ID."""
    return TaskRead.model_validate(service.get(task_id))


@router.post("", status_code=201)
@router.post("/", status_code=201, include_in_schema=False)
def create_task(body: TaskWrite, service: TaskService = Depends(get_service)) -> TaskRead:
    """Create a new task. It always starts PENDING."""
    task = service.create(body.title, body.description, body.status)
    return TaskRead.model_validate(task)


@router.put("/{task_id}")
def update_task(
    task_id: int, body: TaskWrite, service: TaskService = Depends(get_service)
) -> TaskRead:
    """Replace title, description and (when given) status of a task."""
    task = service.update(task_id, body.title, body.description, body.status)
    return TaskRead.model_validate(task)


@router.patch("/{task_id}/complete")
def complete_task(task_id: int, service: TaskService = Depends(get_service)) -> TaskRead:
    """Mark a task as completed."""
    return TaskRead.model_validate(service.complete(task_id))


@router.delete("/{task_id}", status_code=204)
def delete_task(task_id: int, service: TaskService = Depends(get_service)) -> None:
    """Delete a task by ID."""
    service.delete(task_id)
