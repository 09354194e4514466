"""FastAPI service that renders the task page and talks to the task API.

Each browser session (identified by a cookie) owns its own
:class:`ClientState` and :class:`Notifier`. Reloading ``/`` throws both
away and reloads the cache from the API; every other route renders the
page from the cache as it stands after the action.
"""

import logging
import secrets
import time
from collections import OrderedDict
from typing import Callable, Optional

import httpx
from fastapi import Depends, FastAPI, Form, Request, Response
from fastapi.responses import HTMLResponse

from task_ui.client import TaskApiClient, TaskStatus
from task_ui.config import (
    HOST,
    LOG_LEVEL,
    PORT,
    SESSION_COOKIE,
    SESSION_IDLE_SECONDS,
    SESSION_MAX_COUNT,
    TASK_API_TIMEOUT,
    TASK_API_URL,
    TOAST_TTL_SECONDS,
)
from task_ui.controller import InteractionController
from task_ui.notifications import Notifier
from task_ui.renderer import render_page
from task_ui.state import ClientState

logger = logging.getLogger(__name__)


class UiSession:
    """State container and notifications for one browser session."""

    def __init__(self) -> None:
        self.state = ClientState()
        self.notifier = Notifier(ttl=TOAST_TTL_SECONDS)

    def reset(self) -> None:
        self.state = ClientState()
        self.notifier = Notifier(ttl=TOAST_TTL_SECONDS)

    def render(self) -> str:
        return render_page(self.state.snapshot(), self.notifier.active(), self.notifier.ttl)


class SessionStore:
    """In-process map of session id to :class:`UiSession`.

    Bounded two ways: sessions idle for longer than *idle_seconds* expire,
    and once *max_count* is reached the least recently used one is evicted.
    """

    def __init__(
        self,
        max_count: int = SESSION_MAX_COUNT,
        idle_seconds: float = SESSION_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_count = max_count
        self._idle_seconds = idle_seconds
        self._clock = clock
        # Oldest first: (session, last_seen)
        self._sessions: OrderedDict[str, tuple[UiSession, float]] = OrderedDict()

    def get(self, session_id: Optional[str]) -> Optional[UiSession]:
        if session_id is None:
            return None
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        session, last_seen = entry
        now = self._clock()
        if now - last_seen > self._idle_seconds:
            del self._sessions[session_id]
            return None
        self._sessions[session_id] = (session, now)
        self._sessions.move_to_end(session_id)
        return session

    def create(self) -> tuple[str, UiSession]:
        self._prune()
        session_id = secrets.token_urlsafe(16)
        session = UiSession()
        self._sessions[session_id] = (session, self._clock())
        return session_id, session

    def _prune(self) -> None:
        """Drop expired sessions, then make room for one more."""
        now = self._clock()
        expired = [
            sid for sid, (_, last_seen) in self._sessions.items()
            if now - last_seen > self._idle_seconds
        ]
        for sid in expired:
            del self._sessions[sid]
        while self._sessions and len(self._sessions) >= self._max_count:
            self._sessions.popitem(last=False)
            logger.info("Evicted least recently used UI session")
        if expired:
            logger.info(f"Expired {len(expired)} idle UI session(s)")

    def __len__(self) -> int:
        return len(self._sessions)


app = FastAPI(title="Task Manager UI")
app.state.sessions = SessionStore()


async def get_http_client():
    """Yield an HTTP client pointed at the task API for one request."""
    async with httpx.AsyncClient(base_url=TASK_API_URL, timeout=TASK_API_TIMEOUT) as http:
        yield http


def get_ui_session(request: Request, response: Response) -> UiSession:
    """Look up the caller's session, starting a new one if needed."""
    sessions: SessionStore = request.app.state.sessions
    session = sessions.get(request.cookies.get(SESSION_COOKIE))
    if session is None:
        session_id, session = sessions.create()
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
        logger.info("Started UI session")
    return session


def get_controller(
    session: UiSession = Depends(get_ui_session),
    http: httpx.AsyncClient = Depends(get_http_client),
) -> InteractionController:
    return InteractionController(session.state, session.notifier, TaskApiClient(http))


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "api": TASK_API_URL}


@app.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    response: Response,
    http: httpx.AsyncClient = Depends(get_http_client),
):
    """Full page load: discard the session's cache and reload it."""
    session = get_ui_session(request, response)
    session.reset()
    controller = InteractionController(session.state, session.notifier, TaskApiClient(http))
    await controller.load()
    return session.render()


@app.post("/tasks", response_class=HTMLResponse)
async def add_task(
    title: str = Form(""),
    description: str = Form(""),
    session: UiSession = Depends(get_ui_session),
    controller: InteractionController = Depends(get_controller),
):
    await controller.add(title, description)
    return session.render()


@app.post("/tasks/{task_id}/edit", response_class=HTMLResponse)
async def open_edit(
    task_id: int,
    session: UiSession = Depends(get_ui_session),
    controller: InteractionController = Depends(get_controller),
):
    controller.open_edit(task_id)
    return session.render()


@app.post("/tasks/{task_id}", response_class=HTMLResponse)
async def submit_edit(
    task_id: int,
    title: str = Form(""),
    description: str = Form(""),
    status: TaskStatus = Form(TaskStatus.PENDING),
    session: UiSession = Depends(get_ui_session),
    controller: InteractionController = Depends(get_controller),
):
    if session.state.editing != task_id:
        logger.warning(f"Edit for task {task_id} does not match the open modal")
        return session.render()
    await controller.submit_edit(title, description, status)
    return session.render()


@app.post("/edit/close", response_class=HTMLResponse)
async def close_edit(
    session: UiSession = Depends(get_ui_session),
    controller: InteractionController = Depends(get_controller),
):
    controller.close_edit()
    return session.render()


@app.post("/tasks/{task_id}/complete", response_class=HTMLResponse)
async def complete_task(
    task_id: int,
    session: UiSession = Depends(get_ui_session),
    controller: InteractionController = Depends(get_controller),
):
    await controller.complete(task_id)
    return session.render()


@app.post("/tasks/{task_id}/delete", response_class=HTMLResponse)
async def request_delete(
    task_id: int,
    session: UiSession = Depends(get_ui_session),
    controller: InteractionController = Depends(get_controller),
):
    controller.request_delete(task_id)
    return session.render()


@app.post("/confirm", response_class=HTMLResponse)
async def confirm_action(
    session: UiSession = Depends(get_ui_session),
    controller: InteractionController = Depends(get_controller),
):
    await controller.confirm()
    return session.render()


@app.post("/confirm/cancel", response_class=HTMLResponse)
async def cancel_confirm(
    session: UiSession = Depends(get_ui_session),
    controller: InteractionController = Depends(get_controller),
):
    controller.cancel_confirm()
    return session.render()


@app.post("/toasts/{toast_id}/dismiss", response_class=HTMLResponse)
async def dismiss_toast(
    toast_id: int,
    session: UiSession = Depends(get_ui_session),
    controller: InteractionController = Depends(get_controller),
):
    controller.dismiss_toast(toast_id)
    return session.render()


def run() -> None:
    """Console entry point: serve the UI with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
