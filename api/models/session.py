"""
Therapy session models.

GOVERNANCE:
- Clinical documentation is written by the assigned therapist only
- A no-show carries no clinical documentation
"""

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import Field

from api.models.base import CamelModel


class SessionStatus(str, Enum):
    """Session status enum."""

    SCHEDULED = "SCHEDULED"
    APPROVED = "APPROVED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    LATE = "LATE"
    NO_SHOW = "NO_SHOW"
    CANCELLED = "CANCELLED"


class ProgressLevel(str, Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"
    CONCERNING = "CONCERNING"


class EngagementLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    RESISTANT = "RESISTANT"


class RiskLevel(str, Enum):
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


FOCUS_AREAS = [
    "Attention & Focus",
    "Impulse Control",
    "Emotional Regulation",
    "Anxiety Management",
    "Social Skills",
    "Organization & Planning",
    "Behavioral Strategies",
    "Parent Coaching",
]


class TherapySession(CamelModel):
    """A scheduled session with its clinical documentation."""

    id: str
    patient_id: str
    patient_name: str = ""
    therapist_id: str
    scheduled_at: datetime
    duration: int = 45  # minutes
    type: str = "Individual"
    status: SessionStatus = SessionStatus.SCHEDULED
    booked_rate: float = 0.0  # LKR, 0 for free sessions
    is_paid: bool = False
    meeting_link: Optional[str] = None

    # Clinical documentation
    attendance_status: Optional[AttendanceStatus] = None
    overall_progress: Optional[ProgressLevel] = None
    patient_engagement: Optional[EngagementLevel] = None
    risk_assessment: Optional[RiskLevel] = None
    focus_areas: list[str] = Field(default_factory=list)
    session_notes: Optional[str] = None
    next_session_goals: Optional[str] = None
    updated_at: Optional[datetime] = None


class SessionDocumentationUpdate(CamelModel):
    """Body of PUT /api/therapist/sessions/{id}."""

    attendance_status: AttendanceStatus
    overall_progress: Optional[ProgressLevel] = None
    patient_engagement: Optional[EngagementLevel] = None
    risk_assessment: Optional[RiskLevel] = None
    focus_areas: list[str] = Field(default_factory=list)
    session_notes: Optional[str] = None
    next_session_goals: Optional[str] = None
    save_only: bool = False
    move_to_status: Optional[Literal["COMPLETED", "NO_SHOW"]] = None


class SessionResponse(CamelModel):
    session: TherapySession


class SessionListResponse(CamelModel):
    sessions: list[TherapySession]


class SessionUpdateResponse(CamelModel):
    message: str
    session: TherapySession
