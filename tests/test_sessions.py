"""Tests for therapist session documentation."""

import pytest
from fastapi import HTTPException

from api.models import AttendanceStatus, SessionStatus
from api.models.session import ProgressLevel, SessionDocumentationUpdate
from api.routes.therapist_sessions import resolve_attendance, resolve_status
from conftest import OTHER_THERAPIST, PARENT, THERAPIST
from portal.client import FormValidationError
from portal.events import EventBus, SessionSaved
from portal.sessions import SessionDocumentation, confirm_move, save_documentation

URL = "/api/therapist/sessions"

DOCUMENTED = {
    "attendanceStatus": "PRESENT",
    "overallProgress": "GOOD",
    "patientEngagement": "HIGH",
    "riskAssessment": "NONE",
    "focusAreas": ["Impulse Control"],
    "sessionNotes": "Practised waiting turns.",
    "nextSessionGoals": "Introduce homework timer.",
}


class TestResolveStatus:
    """Tests for resolve_status()."""

    @pytest.mark.parametrize(
        "body, current, expected",
        [
            ({"attendanceStatus": "PRESENT"}, SessionStatus.SCHEDULED, SessionStatus.COMPLETED),
            ({"attendanceStatus": "LATE", "saveOnly": True}, SessionStatus.SCHEDULED, SessionStatus.SCHEDULED),
            ({"attendanceStatus": "NO_SHOW", "saveOnly": True}, SessionStatus.SCHEDULED, SessionStatus.NO_SHOW),
            ({"attendanceStatus": "CANCELLED"}, SessionStatus.SCHEDULED, SessionStatus.CANCELLED),
            (
                {"attendanceStatus": "LATE", "moveToStatus": "COMPLETED"},
                SessionStatus.SCHEDULED,
                SessionStatus.COMPLETED,
            ),
        ],
    )
    def test_resolution(self, body, current, expected):
        update = SessionDocumentationUpdate.model_validate(body)
        assert resolve_status(update, current) == expected


class TestResolveAttendance:
    """Tests for resolve_attendance()."""

    @pytest.mark.parametrize("attendance", ["PRESENT", "LATE", "CANCELLED", "NO_SHOW"])
    def test_no_show_move_marks_no_show(self, attendance):
        update = SessionDocumentationUpdate.model_validate(
            {"attendanceStatus": attendance, "moveToStatus": "NO_SHOW"}
        )
        assert resolve_attendance(update) == AttendanceStatus.NO_SHOW

    @pytest.mark.parametrize("attendance", ["NO_SHOW", "CANCELLED"])
    def test_unattended_session_cannot_complete(self, attendance):
        update = SessionDocumentationUpdate.model_validate(
            {"attendanceStatus": attendance, "moveToStatus": "COMPLETED"}
        )
        with pytest.raises(HTTPException) as exc:
            resolve_attendance(update)
        assert exc.value.status_code == 400

    @pytest.mark.parametrize("attendance", ["PRESENT", "LATE"])
    def test_attended_session_completes(self, attendance):
        update = SessionDocumentationUpdate.model_validate(
            {"attendanceStatus": attendance, "moveToStatus": "COMPLETED"}
        )
        assert resolve_attendance(update) == AttendanceStatus(attendance)


class TestTherapistSessionRoutes:
    """Tests for /api/therapist/sessions."""

    def test_list_newest_first(self, client):
        sessions = client.get(URL, headers=THERAPIST).json()["sessions"]
        assert [s["id"] for s in sessions] == ["session-3", "session-2", "session-1"]

    def test_status_filter(self, client):
        sessions = client.get(URL, params={"status": "COMPLETED"}, headers=THERAPIST).json()["sessions"]
        assert [s["id"] for s in sessions] == ["session-1"]

    def test_parents_are_refused(self, client):
        assert client.get(URL, headers=PARENT).status_code == 403

    def test_other_therapist_sees_404(self, client):
        response = client.get(f"{URL}/session-2", headers=OTHER_THERAPIST)
        assert response.status_code == 404
        assert response.json() == {"error": "Session not found"}

    def test_completing_notifies_parent(self, client, fresh_storage):
        response = client.put(f"{URL}/session-2", json=DOCUMENTED, headers=THERAPIST)
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Session updated successfully"
        assert body["session"]["status"] == "COMPLETED"
        assert body["session"]["sessionNotes"] == "Practised waiting turns."
        assert body["session"]["updatedAt"] is not None

        notices = fresh_storage.notifications.filter(lambda n: n.receiver_id == "parent-demo")
        assert [n.title for n in notices] == ["Session Completed"]

    def test_save_only_keeps_status(self, client, fresh_storage):
        body = dict(DOCUMENTED, saveOnly=True)
        response = client.put(f"{URL}/session-3", json=body, headers=THERAPIST)
        assert response.json()["session"]["status"] == "SCHEDULED"
        assert len(fresh_storage.notifications) == 0

    def test_no_show_clears_clinical_fields(self, client):
        client.put(f"{URL}/session-2", json=dict(DOCUMENTED, saveOnly=True), headers=THERAPIST)
        response = client.put(
            f"{URL}/session-2",
            json=dict(DOCUMENTED, attendanceStatus="NO_SHOW"),
            headers=THERAPIST,
        )
        session = response.json()["session"]
        assert session["status"] == "NO_SHOW"
        assert session["attendanceStatus"] == "NO_SHOW"
        assert session["sessionNotes"] is None
        assert session["overallProgress"] is None
        assert session["focusAreas"] == []

    def test_no_show_move_clears_clinical_fields(self, client, fresh_storage):
        body = dict(DOCUMENTED, moveToStatus="NO_SHOW")
        response = client.put(f"{URL}/session-2", json=body, headers=THERAPIST)
        assert response.status_code == 200
        session = response.json()["session"]
        assert session["status"] == "NO_SHOW"
        assert session["attendanceStatus"] == "NO_SHOW"
        assert session["sessionNotes"] is None
        assert session["overallProgress"] is None
        assert session["focusAreas"] == []
        assert len(fresh_storage.notifications) == 0

    @pytest.mark.parametrize("attendance", ["NO_SHOW", "CANCELLED"])
    def test_completing_unattended_session_is_refused(self, client, fresh_storage, attendance):
        response = client.put(
            f"{URL}/session-2",
            json={"attendanceStatus": attendance, "moveToStatus": "COMPLETED"},
            headers=THERAPIST,
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "Cannot complete a session marked as no-show or cancelled"
        }
        stored = fresh_storage.sessions.get("session-2")
        assert stored.status == SessionStatus.SCHEDULED
        assert stored.attendance_status is None
        assert len(fresh_storage.notifications) == 0

    def test_completing_attended_session_notifies(self, client, fresh_storage):
        body = dict(DOCUMENTED, attendanceStatus="LATE", moveToStatus="COMPLETED")
        response = client.put(f"{URL}/session-2", json=body, headers=THERAPIST)
        assert response.json()["session"]["status"] == "COMPLETED"
        assert response.json()["session"]["attendanceStatus"] == "LATE"
        assert len(fresh_storage.notifications) == 1

    def test_recompleting_does_not_notify_again(self, client, fresh_storage):
        client.put(f"{URL}/session-1", json=DOCUMENTED, headers=THERAPIST)
        assert len(fresh_storage.notifications) == 0

    def test_invalid_attendance(self, client):
        response = client.put(
            f"{URL}/session-2", json={"attendanceStatus": "ABSENT"}, headers=THERAPIST
        )
        assert response.status_code == 400
        assert response.json()["errors"]


class TestSessionDocumentation:
    def test_no_show_payload_has_no_clinical_fields(self):
        form = SessionDocumentation(
            attendance_status=AttendanceStatus.NO_SHOW,
            overall_progress=ProgressLevel.GOOD,
            session_notes="should not be sent",
        )
        assert form.payload() == {"attendanceStatus": "NO_SHOW", "saveOnly": False}

    def test_present_payload(self):
        form = SessionDocumentation(overall_progress=ProgressLevel.FAIR)
        form.toggle_focus_area("Social Skills")
        payload = form.payload(save_only=True)
        assert payload["attendanceStatus"] == "PRESENT"
        assert payload["saveOnly"] is True
        assert payload["overallProgress"] == "FAIR"
        assert payload["focusAreas"] == ["Social Skills"]
        assert "riskAssessment" not in payload
        assert "moveToStatus" not in payload

    def test_toggle_focus_area(self):
        form = SessionDocumentation()
        form.toggle_focus_area("Impulse Control")
        form.toggle_focus_area("Impulse Control")
        assert form.focus_areas == []
        with pytest.raises(FormValidationError):
            form.toggle_focus_area("Juggling")

    def test_from_session(self, therapist_api):
        therapist_api.document_session("session-2", dict(DOCUMENTED, saveOnly=True))
        form = SessionDocumentation.from_session(therapist_api.get_therapist_session("session-2"))
        assert form.overall_progress == ProgressLevel.GOOD
        assert form.focus_areas == ["Impulse Control"]


class TestSessionActions:
    @pytest.fixture
    def bus(self):
        return EventBus()

    def test_unconfirmed_move_sends_nothing(self, therapist_api, bus, fresh_storage):
        assert confirm_move(therapist_api, "session-2", "COMPLETED", confirmed=False, bus=bus) is None
        assert fresh_storage.sessions.get("session-2").status == SessionStatus.SCHEDULED

    def test_confirmed_move_publishes(self, therapist_api, bus):
        received = []
        bus.subscribe(SessionSaved, received.append)
        session = confirm_move(therapist_api, "session-2", "NO_SHOW", confirmed=True, bus=bus)
        assert session.status == SessionStatus.NO_SHOW
        assert received == [SessionSaved("session-2", "NO_SHOW")]

    def test_no_show_move_ignores_clinical_form(self, therapist_api, bus):
        form = SessionDocumentation(overall_progress=ProgressLevel.GOOD, session_notes="notes")
        session = confirm_move(therapist_api, "session-2", "NO_SHOW", confirmed=True, form=form, bus=bus)
        assert session.attendance_status == AttendanceStatus.NO_SHOW
        assert session.session_notes is None

    @pytest.mark.parametrize("attendance", [AttendanceStatus.NO_SHOW, AttendanceStatus.CANCELLED])
    def test_unattended_form_cannot_complete(self, therapist_api, bus, fresh_storage, attendance):
        form = SessionDocumentation(attendance_status=attendance)
        assert not form.can_complete
        with pytest.raises(FormValidationError):
            confirm_move(therapist_api, "session-2", "COMPLETED", confirmed=True, form=form, bus=bus)
        assert fresh_storage.sessions.get("session-2").status == SessionStatus.SCHEDULED

    def test_no_bus_publishes_nothing(self, therapist_api):
        session = save_documentation(therapist_api, "session-3", SessionDocumentation())
        assert session.status == SessionStatus.SCHEDULED

    def test_save_documentation_publishes(self, therapist_api, bus):
        received = []
        bus.subscribe(SessionSaved, received.append)
        form = SessionDocumentation(session_notes="Good focus today")
        session = save_documentation(therapist_api, "session-3", form, bus=bus)
        assert session.status == SessionStatus.SCHEDULED
        assert session.session_notes == "Good focus today"
        assert received == [SessionSaved("session-3", "SCHEDULED")]
