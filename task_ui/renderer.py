"""HTML rendering for the task page.

Every function here is pure: it takes a state snapshot (and the active
toasts) and returns markup. Behavior is wired through plain form actions
and ``data-task-id`` attributes, never inline handlers. All user-supplied
text goes through :func:`html.escape`.
"""

from datetime import datetime
from html import escape
from typing import Iterable, Optional, Sequence

from task_ui.client import TaskRecord, TaskStatus
from task_ui.notifications import Severity, Toast
from task_ui.state import PendingAction, UiMode

_TOAST_ICONS = {
    Severity.SUCCESS: "icon-check-circle",
    Severity.ERROR: "icon-exclamation-circle",
    Severity.WARNING: "icon-exclamation-triangle",
    Severity.INFO: "icon-info-circle",
}

_STYLE = """
body { font-family: sans-serif; max-width: 48rem; margin: 2rem auto; }
.task-item { border: 1px solid #ddd; border-radius: 6px; padding: 1rem; margin: .5rem 0; }
.task-item.completed .task-title { text-decoration: line-through; color: #888; }
.task-actions form { display: inline; }
.modal { position: fixed; inset: 0; display: flex; align-items: center;
         justify-content: center; background: rgba(0, 0, 0, .4); }
.modal-content { background: #fff; padding: 1.5rem; border-radius: 6px; min-width: 20rem; }
#toastContainer { position: fixed; top: 1rem; right: 1rem; }
.toast { padding: .5rem 1rem; margin-bottom: .5rem; border-radius: 4px; color: #fff;
         animation: toast-expire 0s linear var(--toast-ttl, 5s) forwards; }
.toast.success { background: #2e7d32; }
.toast.error { background: #c62828; }
.toast.warning { background: #ef6c00; }
.toast.info { background: #1565c0; }
@keyframes toast-expire { to { visibility: hidden; height: 0; padding: 0; margin: 0; } }
"""


def sort_tasks(tasks: Iterable[TaskRecord]) -> list[TaskRecord]:
    """Pending before completed, newest first within a status.

    Both passes are stable, so equal timestamps keep their cache order.
    """
    newest_first = sorted(tasks, key=lambda t: t.created_at, reverse=True)
    return sorted(newest_first, key=lambda t: t.status != TaskStatus.PENDING)


def format_created_at(created_at: datetime) -> str:
    """Format like ``Oct 17, 2026, 03:08 PM``."""
    return f"{created_at:%b} {created_at.day}, {created_at:%Y, %I:%M %p}"


def format_task_count(tasks: Sequence[TaskRecord]) -> str:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.is_completed)
    pending = total - completed
    if total == 0:
        return "0 tasks"
    if completed == 0:
        return f"{total} task{'' if total == 1 else 's'}"
    return f"{pending} pending, {completed} completed"


def render_task(task: TaskRecord) -> str:
    status = task.status.value
    description = (
        f'<p class="task-description">{escape(task.description)}</p>'
        if task.description
        else ""
    )
    complete_button = (
        ""
        if task.is_completed
        else (
            f'<form method="post" action="/tasks/{task.id}/complete">'
            f'<button type="submit" class="btn btn-success btn-sm" '
            f'data-action="complete" data-task-id="{task.id}">Mark Complete</button>'
            "</form>"
        )
    )
    return f"""
<div class="task-item{' completed' if task.is_completed else ''}" data-task-id="{task.id}">
  <div class="task-header">
    <h3 class="task-title">{escape(task.title)}</h3>
    <span class="task-status {status.lower()}">{status}</span>
  </div>
  {description}
  <div class="task-meta">
    <div class="task-date">Created: {format_created_at(task.created_at)}</div>
  </div>
  <div class="task-actions">
    {complete_button}
    <form method="post" action="/tasks/{task.id}/edit">
      <button type="submit" class="btn btn-warning btn-sm" data-action="edit" data-task-id="{task.id}">Edit</button>
    </form>
    <form method="post" action="/tasks/{task.id}/delete">
      <button type="submit" class="btn btn-danger btn-sm" data-action="delete" data-task-id="{task.id}">Delete</button>
    </form>
  </div>
</div>"""


def render_task_list(tasks: Sequence[TaskRecord]) -> str:
    """Sorted task list, or the empty-state block when there is nothing to show."""
    if not tasks:
        return (
            '<div id="emptyState" class="empty-state">'
            "<h3>No tasks yet</h3><p>Add your first task above to get started.</p>"
            "</div>"
        )
    items = "".join(render_task(task) for task in sort_tasks(tasks))
    return f'<div id="taskList" class="task-list">{items}</div>'


def render_edit_modal(task: TaskRecord) -> str:
    options = "".join(
        f'<option value="{s.value}"{" selected" if s == task.status else ""}>'
        f"{s.value.title()}</option>"
        for s in TaskStatus
    )
    return f"""
<div id="editModal" class="modal show">
  <div class="modal-content">
    <h2>Edit Task</h2>
    <form id="editTaskForm" method="post" action="/tasks/{task.id}">
      <input type="hidden" id="editTaskId" name="id" value="{task.id}">
      <label for="editTaskTitle">Title</label>
      <input type="text" id="editTaskTitle" name="title" maxlength="200" value="{escape(task.title)}">
      <label for="editTaskDescription">Description</label>
      <textarea id="editTaskDescription" name="description">{escape(task.description or '')}</textarea>
      <label for="editTaskStatus">Status</label>
      <select id="editTaskStatus" name="status">{options}</select>
      <button type="submit" class="btn btn-primary">Save Changes</button>
    </form>
    <form method="post" action="/edit/close">
      <button type="submit" id="cancelEdit" class="btn btn-secondary">Cancel</button>
    </form>
  </div>
</div>"""


def confirm_message(task: TaskRecord) -> str:
    return f'Are you sure you want to delete "{task.title}"? This action cannot be undone.'


def render_confirm_modal(task: TaskRecord, action: PendingAction) -> str:
    return f"""
<div id="confirmModal" class="modal show" data-action="{action.kind}" data-task-id="{action.task_id}">
  <div class="modal-content">
    <h2>Confirm Action</h2>
    <p id="confirmMessage">{escape(confirm_message(task))}</p>
    <form method="post" action="/confirm">
      <button type="submit" id="confirmAction" class="btn btn-danger">Delete</button>
    </form>
    <form method="post" action="/confirm/cancel">
      <button type="submit" id="cancelConfirm" class="btn btn-secondary">Cancel</button>
    </form>
  </div>
</div>"""


def render_toasts(toasts: Sequence[Toast], ttl: float) -> str:
    items = "".join(
        f'<div class="toast {t.severity.value}" data-toast-id="{t.id}" style="--toast-ttl: {ttl:g}s">'
        f'<i class="toast-icon {_TOAST_ICONS[t.severity]}"></i>'
        f'<span class="toast-message">{escape(t.message)}</span>'
        f'<form method="post" action="/toasts/{t.id}/dismiss">'
        '<button type="submit" class="toast-close" aria-label="Dismiss">&times;</button>'
        "</form></div>"
        for t in toasts
    )
    return f'<div id="toastContainer" class="toast-container">{items}</div>'


def _render_modal(snapshot: dict) -> str:
    mode = snapshot["mode"]
    tasks = snapshot["tasks"]

    def lookup(task_id: Optional[int]) -> Optional[TaskRecord]:
        return next((t for t in tasks if t.id == task_id), None)

    if mode == UiMode.EDIT_MODAL:
        task = lookup(snapshot["editing"])
        return render_edit_modal(task) if task is not None else ""
    if mode == UiMode.CONFIRM_MODAL and snapshot["pending"] is not None:
        task = lookup(snapshot["pending"].task_id)
        return render_confirm_modal(task, snapshot["pending"]) if task is not None else ""
    return ""


def render_page(snapshot: dict, toasts: Sequence[Toast], toast_ttl: float) -> str:
    """Render the full document for one session."""
    tasks = snapshot["tasks"]
    loading = (
        '<div id="loadingIndicator" class="loading">Loading tasks...</div>'
        if snapshot["mode"] == UiMode.LOADING
        else ""
    )
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Task Manager</title>
  <style>{_STYLE}</style>
</head>
<body>
  <h1>Task Manager</h1>
  <form id="addTaskForm" method="post" action="/tasks">
    <input type="text" id="taskTitle" name="title" maxlength="200" placeholder="Task title" required>
    <textarea id="taskDescription" name="description" placeholder="Description (optional)"></textarea>
    <button type="submit" class="btn btn-primary">Add Task</button>
  </form>
  <div class="tasks-header">
    <h2>Your Tasks</h2>
    <span id="taskCount">{format_task_count(tasks)}</span>
  </div>
  {loading}
  {render_task_list(tasks)}
  {_render_modal(snapshot)}
  {render_toasts(toasts, toast_ttl)}
</body>
</html>"""
