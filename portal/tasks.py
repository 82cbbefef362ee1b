"""
Task list filtering and the parent's completion toggle.

Overdue is decided per task: its own due date has passed and it is not
itself completed.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional

from api.models import Task, TaskStatus
from portal.client import PortalError, SparksClient

logger = logging.getLogger(__name__)

OPEN_STATUSES = {TaskStatus.PENDING, TaskStatus.IN_PROGRESS}


class TaskType(str, Enum):
    ALL = "all"
    DAILY = "daily"
    THERAPIST = "therapist"
    WEEKLY = "weekly"


class TaskStatusFilter(str, Enum):
    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"
    OVERDUE = "overdue"


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def is_overdue(task: Task, now: Optional[datetime] = None) -> bool:
    if task.status == TaskStatus.OVERDUE:
        return True
    return task.status != TaskStatus.COMPLETED and task.due_date < _now(now)


def matches_type(task: Task, task_type: TaskType) -> bool:
    daily = task.is_recurring and task.recurring_pattern == "daily"
    if task_type == TaskType.DAILY:
        return daily
    if task_type == TaskType.THERAPIST:
        return not daily
    if task_type == TaskType.WEEKLY:
        return task.is_recurring and task.recurring_pattern == "weekly"
    return True


def matches_status(task: Task, status: TaskStatusFilter, now: Optional[datetime] = None) -> bool:
    if status == TaskStatusFilter.PENDING:
        return task.status in OPEN_STATUSES
    if status == TaskStatusFilter.COMPLETED:
        return task.status == TaskStatus.COMPLETED
    if status == TaskStatusFilter.OVERDUE:
        return is_overdue(task, now)
    return True


def filter_tasks(
    tasks: Iterable[Task],
    task_type: TaskType = TaskType.ALL,
    status: TaskStatusFilter = TaskStatusFilter.ALL,
    now: Optional[datetime] = None,
) -> list[Task]:
    """
    Apply the type and status filters.

    With the status filter on ``all`` the result is regrouped as
    open tasks by priority (highest first), then overdue, then completed.
    A task matching several groups appears once, in the first.
    """
    now = _now(now)
    selected = [
        t for t in tasks
        if matches_type(t, task_type) and matches_status(t, status, now)
    ]
    if status != TaskStatusFilter.ALL:
        return selected

    buckets = [
        sorted((t for t in selected if t.status in OPEN_STATUSES), key=lambda t: -t.priority),
        [t for t in selected if is_overdue(t, now)],
        [t for t in selected if t.status == TaskStatus.COMPLETED],
    ]
    seen: set[str] = set()
    ordered = []
    for bucket in buckets:
        for task in bucket:
            if task.id not in seen:
                seen.add(task.id)
                ordered.append(task)
    return ordered


def overdue_count(tasks: Iterable[Task], now: Optional[datetime] = None) -> int:
    now = _now(now)
    return sum(1 for t in tasks if is_overdue(t, now))


def pending_count(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if t.status in OPEN_STATUSES)


def completed_count(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)


def load_session_tasks(client: SparksClient, session_id: str) -> tuple[list[Task], Optional[str]]:
    """Tasks assigned in a session, or an error message for display."""
    try:
        return client.list_session_tasks(session_id), None
    except PortalError as exc:
        logger.warning("Could not load tasks for session %s: %s", session_id, exc.message)
        return [], exc.message


class TaskBoard:
    """A child's tasks plus the completion toggle."""

    def __init__(self, client: SparksClient, child_id: str):
        self.client = client
        self.child_id = child_id
        self.tasks: list[Task] = []

    def load(self) -> list[Task]:
        self.tasks = self.client.list_tasks(self.child_id)
        return self.tasks

    def visible(
        self,
        task_type: TaskType = TaskType.ALL,
        status: TaskStatusFilter = TaskStatusFilter.ALL,
        now: Optional[datetime] = None,
    ) -> list[Task]:
        return filter_tasks(self.tasks, task_type, status, now)

    def _replace(self, updated: Task) -> Task:
        self.tasks = [updated if t.id == updated.id else t for t in self.tasks]
        return updated

    def complete(self, task_id: str, notes: Optional[str] = None) -> Task:
        return self._replace(self.client.complete_task(self.child_id, task_id, notes))

    def unmark(self, task_id: str) -> Task:
        return self._replace(self.client.unmark_task(self.child_id, task_id))
