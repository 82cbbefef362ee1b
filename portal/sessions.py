"""
Session documentation form for therapists.

GOVERNANCE:
- NO_SHOW sends no clinical fields
- Moving a session's status requires explicit confirmation
- A no-show or cancelled session cannot be completed
"""

from typing import Optional

from pydantic import Field

from api.models import AttendanceStatus, TherapySession
from api.models.base import CamelModel
from api.models.session import (
    FOCUS_AREAS,
    EngagementLevel,
    ProgressLevel,
    RiskLevel,
)
from portal.client import FormValidationError, SparksClient
from portal.events import EventBus, SessionSaved


class SessionDocumentation(CamelModel):
    """Form state that becomes the PUT body."""

    attendance_status: AttendanceStatus = AttendanceStatus.PRESENT
    overall_progress: Optional[ProgressLevel] = None
    patient_engagement: Optional[EngagementLevel] = None
    risk_assessment: Optional[RiskLevel] = None
    focus_areas: list[str] = Field(default_factory=list)
    session_notes: str = ""
    next_session_goals: str = ""

    @classmethod
    def from_session(cls, session: TherapySession) -> "SessionDocumentation":
        return cls(
            attendance_status=session.attendance_status or AttendanceStatus.PRESENT,
            overall_progress=session.overall_progress,
            patient_engagement=session.patient_engagement,
            risk_assessment=session.risk_assessment,
            focus_areas=list(session.focus_areas),
            session_notes=session.session_notes or "",
            next_session_goals=session.next_session_goals or "",
        )

    @property
    def is_no_show(self) -> bool:
        return self.attendance_status == AttendanceStatus.NO_SHOW

    @property
    def can_complete(self) -> bool:
        return self.attendance_status not in (AttendanceStatus.NO_SHOW, AttendanceStatus.CANCELLED)

    def toggle_focus_area(self, area: str) -> None:
        if area not in FOCUS_AREAS:
            raise FormValidationError(f"Unknown focus area: {area}")
        if area in self.focus_areas:
            self.focus_areas.remove(area)
        else:
            self.focus_areas.append(area)

    def payload(self, save_only: bool = False, move_to_status: Optional[str] = None) -> dict:
        body = {"attendanceStatus": self.attendance_status.value, "saveOnly": save_only}
        if move_to_status:
            body["moveToStatus"] = move_to_status
        if self.is_no_show:
            return body
        body.update(
            self.model_dump(
                by_alias=True,
                mode="json",
                exclude_none=True,
                exclude={"attendance_status"},
            )
        )
        return body


def save_documentation(
    client: SparksClient,
    session_id: str,
    form: SessionDocumentation,
    save_only: bool = True,
    bus: Optional[EventBus] = None,
) -> TherapySession:
    session = client.document_session(session_id, form.payload(save_only=save_only))
    if bus is not None:
        bus.publish(SessionSaved(session.id, session.status.value))
    return session


def confirm_move(
    client: SparksClient,
    session_id: str,
    status: str,
    confirmed: bool,
    form: Optional[SessionDocumentation] = None,
    bus: Optional[EventBus] = None,
) -> Optional[TherapySession]:
    """Move a session to COMPLETED or NO_SHOW once the user has confirmed."""
    if not confirmed:
        return None
    if status == "NO_SHOW":
        form = SessionDocumentation(attendance_status=AttendanceStatus.NO_SHOW)
    form = form or SessionDocumentation()
    if status == "COMPLETED" and not form.can_complete:
        raise FormValidationError("A no-show or cancelled session cannot be marked completed")
    session = client.document_session(session_id, form.payload(move_to_status=status))
    if bus is not None:
        bus.publish(SessionSaved(session.id, session.status.value))
    return session
