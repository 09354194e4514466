"""Per-session client state: the task cache plus the current UI mode.

Uses immutable update patterns throughout -- ``self._state`` is never
mutated in-place. The cache is only written after the API has
acknowledged the corresponding change.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from task_ui.client import TaskRecord


class UiMode(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    EDIT_MODAL = "edit_modal"
    CONFIRM_MODAL = "confirm_modal"


class PendingDelete(BaseModel):
    """Deletion awaiting the user's confirmation."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["delete"] = "delete"
    task_id: int


# Other confirmable operations join this alias as they are added.
PendingAction = PendingDelete


def _initial_state() -> dict:
    """Return a fresh idle state dict."""
    return {
        "tasks": (),
        "mode": UiMode.IDLE,
        "editing": None,
        "pending": None,
        "in_flight": 0,
    }


def _settled_mode(state: dict) -> UiMode:
    """Mode implied by the rest of *state*: LOADING while any call is out."""
    if state["in_flight"] > 0:
        return UiMode.LOADING
    if state["editing"] is not None:
        return UiMode.EDIT_MODAL
    if state["pending"] is not None:
        return UiMode.CONFIRM_MODAL
    return UiMode.IDLE


class ClientState:
    """Single source of truth for one browser session.

    Task mirrors are frozen models held in a tuple, so :meth:`snapshot`
    only needs a shallow copy of the outer dict.
    """

    def __init__(self) -> None:
        self._state: dict = _initial_state()

    # -- reads ---------------------------------------------------------------

    def snapshot(self) -> dict:
        """Return a copy of the current state."""
        return dict(self._state)

    @property
    def tasks(self) -> tuple[TaskRecord, ...]:
        return self._state["tasks"]

    @property
    def mode(self) -> UiMode:
        return self._state["mode"]

    @property
    def editing(self) -> Optional[int]:
        """Id of the task shown in the edit modal, if any."""
        return self._state["editing"]

    @property
    def pending(self) -> Optional[PendingAction]:
        return self._state["pending"]

    def find(self, task_id: int) -> Optional[TaskRecord]:
        return next((t for t in self._state["tasks"] if t.id == task_id), None)

    # -- cache mutations -----------------------------------------------------

    def replace_all(self, tasks) -> None:
        """Replace the whole cache with the server's collection."""
        self._state = {**self._state, "tasks": tuple(tasks)}

    def prepend(self, task: TaskRecord) -> None:
        """Insert a freshly created task at the front."""
        self._state = {**self._state, "tasks": (task, *self._state["tasks"])}

    def replace(self, task: TaskRecord) -> None:
        """Swap in the server's copy of *task*; no-op if the id is unknown."""
        if self.find(task.id) is None:
            return
        self._state = {
            **self._state,
            "tasks": tuple(task if t.id == task.id else t for t in self._state["tasks"]),
        }

    def remove(self, task_id: int) -> None:
        self._state = {
            **self._state,
            "tasks": tuple(t for t in self._state["tasks"] if t.id != task_id),
        }

    # -- mode ----------------------------------------------------------------

    @property
    def in_flight(self) -> int:
        """Number of API calls started but not yet finished."""
        return self._state["in_flight"]

    def begin_call(self) -> None:
        self._state = {
            **self._state,
            "mode": UiMode.LOADING,
            "in_flight": self._state["in_flight"] + 1,
        }

    def end_call(self) -> None:
        """Finish one call; leaves LOADING only once none are outstanding."""
        new_state = {**self._state, "in_flight": max(self._state["in_flight"] - 1, 0)}
        self._state = {**new_state, "mode": _settled_mode(new_state)}

    def open_edit(self, task_id: int) -> None:
        self._state = {
            **self._state,
            "mode": UiMode.EDIT_MODAL,
            "editing": task_id,
        }

    def open_confirm(self, action: PendingAction) -> None:
        self._state = {
            **self._state,
            "mode": UiMode.CONFIRM_MODAL,
            "pending": action,
        }

    def close_modals(self) -> None:
        """Drop any modal target and pending action.

        The mode becomes IDLE, or stays LOADING while other calls are out.
        """
        new_state = {**self._state, "editing": None, "pending": None}
        self._state = {**new_state, "mode": _settled_mode(new_state)}
