"""Task models for home practice assigned by therapists."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from api.models.base import CamelModel


class TaskStatus(str, Enum):
    """Task status enum."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"


class Task(CamelModel):
    """A task assigned to a child."""

    id: str
    patient_id: str
    session_id: Optional[str] = None  # Session the task was assigned in
    title: str
    description: str = ""
    instructions: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: int = 1  # Higher is more urgent
    due_date: datetime
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    completion_notes: Optional[str] = None
    is_recurring: bool = False
    recurring_pattern: Optional[str] = None  # 'daily', 'weekly', ...


class CompleteTaskRequest(CamelModel):
    """Mark a task completed, or unmark it."""

    completion_notes: Optional[str] = Field(default=None, max_length=1000)
    unmark: bool = False


class TaskListResponse(CamelModel):
    """Tasks of a child or session."""

    tasks: list[Task]


class TaskUpdateResponse(CamelModel):
    """Result of a completion toggle."""

    success: bool
    message: str
    task: Task
