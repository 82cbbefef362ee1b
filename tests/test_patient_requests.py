"""Tests for patient request review."""

import pytest

from conftest import OTHER_THERAPIST, PARENT, THERAPIST
from portal.requests import ConfirmationModal, ModalState, PatientRequestBoard

URL = "/api/therapist/patient-requests"


class TestPatientRequestRoutes:
    """Tests for /api/therapist/patient-requests."""

    def test_lists_pending_newest_first(self, client):
        response = client.get(URL, headers=THERAPIST)
        assert response.status_code == 200
        requests = response.json()["requests"]
        assert [r["id"] for r in requests] == ["request-2", "request-1"]
        assert requests[1]["message"] == "Amaya struggles to stay focused at school."
        assert requests[0]["message"] == "No message provided"
        assert isinstance(requests[0]["age"], int)

    def test_parent_cannot_list(self, client):
        assert client.get(URL, headers=PARENT).status_code == 403

    def test_accept_assigns_child_and_notifies_parent(self, client, fresh_storage):
        response = client.post(
            URL,
            json={"requestId": "request-1", "action": "accept", "message": "Welcome!"},
            headers=THERAPIST,
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Request accepted successfully"}

        assert fresh_storage.children.get("child-2").therapist_id == "therapist-demo"
        notice = fresh_storage.notifications.filter(lambda n: n.receiver_id == "parent-demo")[0]
        assert notice.title == "Therapist Assignment Approved"
        assert "Welcome!" in notice.message
        assert notice.is_urgent

    def test_reject_leaves_child_unassigned(self, client, fresh_storage):
        response = client.post(
            URL, json={"requestId": "request-2", "action": "reject"}, headers=THERAPIST
        )
        assert response.json()["message"] == "Request rejected successfully"
        assert fresh_storage.children.get("child-3").therapist_id is None
        notice = fresh_storage.notifications.filter(lambda n: n.receiver_id == "parent-2")[0]
        assert notice.title == "Therapist Assignment Declined"

    def test_decided_request_leaves_pending_list(self, client):
        client.post(URL, json={"requestId": "request-1", "action": "reject"}, headers=THERAPIST)
        ids = [r["id"] for r in client.get(URL, headers=THERAPIST).json()["requests"]]
        assert ids == ["request-2"]

    def test_already_processed(self, client):
        client.post(URL, json={"requestId": "request-1", "action": "accept"}, headers=THERAPIST)
        response = client.post(
            URL, json={"requestId": "request-1", "action": "reject"}, headers=THERAPIST
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Request has already been processed"}

    @pytest.mark.parametrize(
        "body, error",
        [
            ({"action": "accept"}, "Request ID and action are required"),
            ({"requestId": "request-1"}, "Request ID and action are required"),
            ({"requestId": "request-1", "action": "maybe"}, "Action must be 'accept' or 'reject'"),
        ],
    )
    def test_bad_bodies(self, client, body, error):
        response = client.post(URL, json=body, headers=THERAPIST)
        assert response.status_code == 400
        assert response.json() == {"error": error}

    def test_unknown_request(self, client):
        response = client.post(URL, json={"requestId": "nope", "action": "accept"}, headers=THERAPIST)
        assert response.status_code == 404

    def test_other_therapists_request(self, client):
        response = client.post(
            URL, json={"requestId": "request-1", "action": "accept"}, headers=OTHER_THERAPIST
        )
        assert response.status_code == 403
        assert response.json() == {"error": "Unauthorized to access this request"}


class TestPatientRequestBoard:
    """Tests for the confirmation flow."""

    @pytest.fixture
    def board(self, therapist_api, clock):
        board = PatientRequestBoard(therapist_api, ConfirmationModal(clock=clock, auto_close_seconds=2))
        board.load()
        return board

    def test_success_removes_item_without_refetch(self, board, clock):
        request = board.requests[0]
        board.modal.open(request, "reject")
        assert board.modal.state == ModalState.IDLE

        assert board.confirm()
        assert [r.id for r in board.requests] == ["request-1"]
        assert board.modal.state == ModalState.SUCCESS
        assert board.modal.result == "Request rejected successfully"
        assert board.modal.is_open

        clock.advance(2)
        assert not board.modal.is_open
        assert board.modal.state == ModalState.CLOSED

    def test_error_keeps_modal_open(self, board, client):
        request = next(r for r in board.requests if r.id == "request-1")
        client.post(URL, json={"requestId": "request-1", "action": "accept"}, headers=THERAPIST)

        board.modal.open(request, "reject")
        assert not board.confirm()
        assert board.modal.state == ModalState.ERROR
        assert board.modal.error == "Request has already been processed"
        assert board.modal.is_open
        assert len(board.requests) == 2

    def test_confirm_without_open_modal(self, board):
        assert not board.confirm()
