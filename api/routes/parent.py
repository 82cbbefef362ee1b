"""
Parent routes: children, their tasks and sessions.

GOVERNANCE:
- Parents only see children registered to them
- Completion notes come from the parent; status rollback happens via unmark only
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import require_parent
from api.models import Child, Task, TaskStatus, TherapySession, User
from api.models.session import SessionListResponse, SessionResponse
from api.models.task import (
    CompleteTaskRequest,
    TaskListResponse,
    TaskUpdateResponse,
)
from api.models.user import ChildListResponse
from storage import get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/parent", tags=["parent"])


def _own_child(child_id: str, parent: User) -> Child:
    child = get_storage().children.get(child_id)
    if child is None or child.parent_id != parent.id:
        raise HTTPException(status_code=404, detail="Child not found or unauthorized")
    return child


def _own_session(session_id: str, parent: User) -> TherapySession:
    storage = get_storage()
    session = storage.sessions.get(session_id)
    child = storage.children.get(session.patient_id) if session else None
    if session is None or child is None or child.parent_id != parent.id:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _apply_completion(task: Task, request: CompleteTaskRequest) -> TaskUpdateResponse:
    now = datetime.now(timezone.utc)
    if request.unmark:
        task.status = TaskStatus.PENDING
        task.completed_at = None
        task.completion_notes = None
        message = "Task unmarked as completed"
    else:
        task.status = TaskStatus.COMPLETED
        task.completed_at = now
        task.completion_notes = request.completion_notes or None
        message = "Task marked as completed"
    task.updated_at = now

    get_storage().tasks.update(task)
    logger.info("%s: %s", message, task.id)
    return TaskUpdateResponse(success=True, message=message, task=task)


@router.get("/children", response_model=ChildListResponse)
def list_children(parent: User = Depends(require_parent)):
    """List the acting parent's children."""
    storage = get_storage()
    return ChildListResponse(
        children=storage.children.filter(lambda c: c.parent_id == parent.id)
    )


@router.get("/children/{child_id}/tasks", response_model=TaskListResponse)
def list_child_tasks(child_id: str, parent: User = Depends(require_parent)):
    """All tasks of a child ordered by due date."""
    child = _own_child(child_id, parent)
    tasks = get_storage().tasks.filter(lambda t: t.patient_id == child.id)
    return TaskListResponse(tasks=sorted(tasks, key=lambda t: t.due_date))


@router.patch(
    "/children/{child_id}/tasks/{task_id}/complete",
    response_model=TaskUpdateResponse,
)
def complete_child_task(
    child_id: str,
    task_id: str,
    request: CompleteTaskRequest,
    parent: User = Depends(require_parent),
):
    """Mark a task completed (optionally with notes) or unmark it."""
    child = _own_child(child_id, parent)
    task = get_storage().tasks.get(task_id)
    if task is None or task.patient_id != child.id:
        raise HTTPException(status_code=404, detail="Task not found")
    return _apply_completion(task, request)


@router.get("/sessions", response_model=SessionListResponse)
def list_sessions(
    child_id: Optional[str] = Query(None, alias="childId"),
    parent: User = Depends(require_parent),
):
    """Sessions of the parent's children, newest first."""
    storage = get_storage()
    if child_id:
        child_ids = {_own_child(child_id, parent).id}
    else:
        child_ids = {c.id for c in storage.children.filter(lambda c: c.parent_id == parent.id)}

    sessions = storage.sessions.filter(lambda s: s.patient_id in child_ids)
    return SessionListResponse(
        sessions=sorted(sessions, key=lambda s: s.scheduled_at, reverse=True)
    )


@router.get("/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, parent: User = Depends(require_parent)):
    """One session with its documentation."""
    return SessionResponse(session=_own_session(session_id, parent))


@router.get("/sessions/{session_id}/tasks", response_model=TaskListResponse)
def list_session_tasks(session_id: str, parent: User = Depends(require_parent)):
    """Tasks assigned during a session."""
    session = _own_session(session_id, parent)
    tasks = get_storage().tasks.filter(lambda t: t.session_id == session.id)
    return TaskListResponse(tasks=sorted(tasks, key=lambda t: t.due_date))


@router.patch(
    "/sessions/{session_id}/tasks/{task_id}/complete",
    response_model=TaskUpdateResponse,
)
def complete_session_task(
    session_id: str,
    task_id: str,
    request: CompleteTaskRequest,
    parent: User = Depends(require_parent),
):
    """Completion toggle for a task assigned in this session."""
    session = _own_session(session_id, parent)
    task = get_storage().tasks.get(task_id)
    if task is None or task.session_id != session.id:
        raise HTTPException(status_code=404, detail="Task not found")
    return _apply_completion(task, request)
