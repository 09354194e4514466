"""Transient toast notifications with independent lifetimes."""

import itertools
import time
from enum import Enum
from typing import Callable

from pydantic import BaseModel, ConfigDict

from task_ui.config import TOAST_TTL_SECONDS


class Severity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Toast(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    message: str
    severity: Severity
    expires_at: float


class Notifier:
    """Holds the toasts visible to one session.

    Toasts are purely advisory: pushing or dismissing one never affects
    anything else. Expired toasts drop out of :meth:`active`.
    """

    def __init__(
        self,
        ttl: float = TOAST_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._ids = itertools.count(1)
        self._toasts: tuple[Toast, ...] = ()

    @property
    def ttl(self) -> float:
        return self._ttl

    def push(self, message: str, severity: Severity = Severity.SUCCESS) -> Toast:
        toast = Toast(
            id=next(self._ids),
            message=message,
            severity=severity,
            expires_at=self._clock() + self._ttl,
        )
        self._toasts = (*self._toasts, toast)
        return toast

    def success(self, message: str) -> Toast:
        return self.push(message, Severity.SUCCESS)

    def error(self, message: str) -> Toast:
        return self.push(message, Severity.ERROR)

    def warning(self, message: str) -> Toast:
        return self.push(message, Severity.WARNING)

    def info(self, message: str) -> Toast:
        return self.push(message, Severity.INFO)

    def dismiss(self, toast_id: int) -> None:
        """Remove a toast before it expires. Unknown ids are ignored."""
        self._toasts = tuple(t for t in self._toasts if t.id != toast_id)

    def active(self) -> tuple[Toast, ...]:
        """Return the toasts that have not yet expired, oldest first."""
        now = self._clock()
        self._toasts = tuple(t for t in self._toasts if t.expires_at > now)
        return self._toasts
