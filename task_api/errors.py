"""Domain errors raised by the task service."""


class TaskError(Exception):
    """Base class for task domain failures."""


class TaskValidationError(TaskError):
    """A required field is missing or blank."""


class TaskNotFoundError(TaskError):
    """The operation targets an id that is not in the store."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id
