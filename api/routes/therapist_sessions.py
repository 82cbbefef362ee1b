"""
Therapist session routes: listing and clinical documentation.

GOVERNANCE:
- Therapists only document their own sessions
- A no-show is stored without clinical documentation
- Parents are notified when a session is completed
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import require_therapist
from api.models import AttendanceStatus, SessionStatus, TherapySession, User
from api.models.session import (
    SessionDocumentationUpdate,
    SessionListResponse,
    SessionResponse,
    SessionUpdateResponse,
)
from storage import get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/therapist/sessions", tags=["therapist-sessions"])

CLINICAL_FIELDS = (
    "overall_progress",
    "patient_engagement",
    "risk_assessment",
    "session_notes",
    "next_session_goals",
)

UNATTENDED = (AttendanceStatus.NO_SHOW, AttendanceStatus.CANCELLED)


def _own_session(session_id: str, therapist: User) -> TherapySession:
    session = get_storage().sessions.get(session_id)
    if session is None or session.therapist_id != therapist.id:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def resolve_attendance(update: SessionDocumentationUpdate) -> AttendanceStatus:
    """Attendance recorded for a save; moving a session to NO_SHOW marks it a no-show."""
    if update.move_to_status == SessionStatus.NO_SHOW.value:
        return AttendanceStatus.NO_SHOW
    if (
        update.move_to_status == SessionStatus.COMPLETED.value
        and update.attendance_status in UNATTENDED
    ):
        raise HTTPException(
            status_code=400,
            detail="Cannot complete a session marked as no-show or cancelled",
        )
    return update.attendance_status


def resolve_status(
    update: SessionDocumentationUpdate, current: SessionStatus
) -> SessionStatus:
    """Status a session ends up in after a documentation save."""
    if update.move_to_status:
        return SessionStatus(update.move_to_status)
    if update.attendance_status == AttendanceStatus.NO_SHOW:
        return SessionStatus.NO_SHOW
    if update.attendance_status == AttendanceStatus.CANCELLED:
        return SessionStatus.CANCELLED
    if update.save_only:
        return current
    return SessionStatus.COMPLETED


@router.get("", response_model=SessionListResponse)
def list_sessions(
    status: Optional[SessionStatus] = Query(None),
    therapist: User = Depends(require_therapist),
):
    """The therapist's sessions, newest first."""
    sessions = get_storage().sessions.filter(
        lambda s: s.therapist_id == therapist.id and (status is None or s.status == status)
    )
    return SessionListResponse(
        sessions=sorted(sessions, key=lambda s: s.scheduled_at, reverse=True)
    )


@router.get("/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, therapist: User = Depends(require_therapist)):
    return SessionResponse(session=_own_session(session_id, therapist))


@router.put("/{session_id}", response_model=SessionUpdateResponse)
def document_session(
    session_id: str,
    update: SessionDocumentationUpdate,
    therapist: User = Depends(require_therapist),
):
    """
    Save session documentation and move the session's status.

    GOVERNANCE:
    - NO_SHOW attendance clears every clinical field
    - A no-show or cancelled session cannot be moved to COMPLETED
    """
    storage = get_storage()
    session = _own_session(session_id, therapist)
    previous = session.status
    attendance = resolve_attendance(update)

    session.attendance_status = attendance
    if attendance == AttendanceStatus.NO_SHOW:
        for field in CLINICAL_FIELDS:
            setattr(session, field, None)
        session.focus_areas = []
    else:
        for field in CLINICAL_FIELDS:
            setattr(session, field, getattr(update, field))
        session.focus_areas = list(update.focus_areas)

    session.status = resolve_status(update, previous)
    session.updated_at = datetime.now(timezone.utc)
    storage.sessions.update(session)

    if session.status == SessionStatus.COMPLETED and previous != SessionStatus.COMPLETED:
        child = storage.children.get(session.patient_id)
        if child is not None:
            storage.notify(
                therapist.id,
                child.parent_id,
                "Session Completed",
                f"{therapist.name} has completed the session for {session.patient_name}. "
                "Session notes and tasks are now available.",
            )

    logger.info("Session %s documented: %s -> %s", session.id, previous.value, session.status.value)
    return SessionUpdateResponse(message="Session updated successfully", session=session)
