"""
HTTP client for the SPARKS API.

Every dashboard and view-model talks to the backend through SparksClient.
Failures surface as PortalError subclasses carrying the server's message
verbatim; nothing is retried automatically.
"""

import logging
from datetime import date
from typing import Any, Optional

import httpx

from api.models import (
    AvailabilitySlot,
    Child,
    ContactFormData,
    Conversation,
    PatientRequest,
    Task,
    TherapistApplication,
    TherapistProfile,
    TherapistReport,
    TherapySession,
)
from api.models.auth import VerifyOtpResponse
from api.models.availability import BulkAddRequest, BulkAddResponse
from config import get_settings

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "An error occurred. Please try again."


class PortalError(Exception):
    """Base class for every failure shown to a portal user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FormValidationError(PortalError):
    """Input rejected before any request was sent."""


class ApiError(PortalError):
    """The server answered with an error status."""

    def __init__(self, status: int, message: str, payload: Optional[dict] = None):
        super().__init__(message)
        self.status = status
        self.payload = payload or {}


class RateLimitedError(ApiError):
    """HTTP 429; ``remaining_seconds`` comes from the response body when present."""

    def __init__(self, message: str, remaining_seconds: Optional[int], payload: Optional[dict] = None):
        super().__init__(429, message, payload)
        self.remaining_seconds = remaining_seconds


class NetworkError(PortalError):
    """The request never produced a response."""

    def __init__(self, message: str = NETWORK_ERROR_MESSAGE):
        super().__init__(message)


def _error_message(payload: dict, response: httpx.Response) -> str:
    if payload.get("error"):
        return str(payload["error"])
    if payload.get("errors"):
        return "; ".join(str(e) for e in payload["errors"])
    return response.reason_phrase or f"Request failed with status {response.status_code}"


class SparksClient:
    """
    Thin wrapper over ``httpx.Client``.

    ``http`` may be any httpx client, e.g. FastAPI's TestClient in tests.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_id: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.user_id = user_id
        self._http = http or httpx.Client(
            base_url=base_url or settings.api_base_url,
            timeout=timeout or settings.request_timeout,
        )

    def as_user(self, user_id: Optional[str]) -> "SparksClient":
        """A client sharing the connection but acting as another user."""
        return SparksClient(user_id=user_id, http=self._http)

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> dict:
        headers = kwargs.pop("headers", {})
        if self.user_id:
            headers["X-User-Id"] = self.user_id
        if "params" in kwargs:
            kwargs["params"] = {k: v for k, v in kwargs["params"].items() if v not in (None, "")}

        try:
            response = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError() from exc

        try:
            payload = response.json() if response.content else {}
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {"data": payload}

        if response.status_code == 429:
            raise RateLimitedError(
                _error_message(payload, response),
                payload.get("remainingSeconds"),
                payload,
            )
        if response.is_error:
            raise ApiError(response.status_code, _error_message(payload, response), payload)
        return payload

    # Password recovery

    def forgot_password(self, email: str) -> str:
        """Request a recovery code; returns the server message."""
        return self._request("POST", "/api/mobile/forgot-password", json={"email": email})["message"]

    def verify_otp(self, email: str, otp: str) -> VerifyOtpResponse:
        data = self._request(
            "POST", "/api/mobile/forgot-password/verify", json={"email": email, "otp": otp}
        )
        return VerifyOtpResponse.model_validate(data)

    def reset_password(self, email: str, verification_token: str, new_password: str) -> str:
        data = self._request(
            "POST",
            "/api/mobile/forgot-password/reset",
            json={
                "email": email,
                "verificationToken": verification_token,
                "newPassword": new_password,
            },
        )
        return data["message"]

    # Parent: children, tasks, sessions

    def list_children(self) -> list[Child]:
        data = self._request("GET", "/api/parent/children")
        return [Child.model_validate(c) for c in data["children"]]

    def list_tasks(self, child_id: str) -> list[Task]:
        data = self._request("GET", f"/api/parent/children/{child_id}/tasks")
        return [Task.model_validate(t) for t in data["tasks"]]

    def complete_task(self, child_id: str, task_id: str, notes: Optional[str] = None) -> Task:
        body = {"completionNotes": notes} if notes else {}
        data = self._request(
            "PATCH", f"/api/parent/children/{child_id}/tasks/{task_id}/complete", json=body
        )
        return Task.model_validate(data["task"])

    def unmark_task(self, child_id: str, task_id: str) -> Task:
        data = self._request(
            "PATCH",
            f"/api/parent/children/{child_id}/tasks/{task_id}/complete",
            json={"unmark": True},
        )
        return Task.model_validate(data["task"])

    def list_sessions(self, child_id: Optional[str] = None) -> list[TherapySession]:
        data = self._request("GET", "/api/parent/sessions", params={"childId": child_id})
        return [TherapySession.model_validate(s) for s in data["sessions"]]

    def get_session(self, session_id: str) -> TherapySession:
        data = self._request("GET", f"/api/parent/sessions/{session_id}")
        return TherapySession.model_validate(data["session"])

    def list_session_tasks(self, session_id: str) -> list[Task]:
        data = self._request("GET", f"/api/parent/sessions/{session_id}/tasks")
        return [Task.model_validate(t) for t in data["tasks"]]

    def complete_session_task(
        self, session_id: str, task_id: str, notes: Optional[str] = None, unmark: bool = False
    ) -> Task:
        body: dict[str, Any] = {"unmark": True} if unmark else {}
        if notes and not unmark:
            body["completionNotes"] = notes
        data = self._request(
            "PATCH", f"/api/parent/sessions/{session_id}/tasks/{task_id}/complete", json=body
        )
        return Task.model_validate(data["task"])

    # Parent: messages

    def list_conversations(self) -> list[Conversation]:
        data = self._request("GET", "/api/parent/conversations")
        return [Conversation.model_validate(c) for c in data["conversations"]]

    def send_message(self, conversation_id: str, text: str) -> Conversation:
        data = self._request(
            "POST", f"/api/parent/conversations/{conversation_id}/messages", json={"text": text}
        )
        return Conversation.model_validate(data["conversation"])

    def mark_conversation_read(self, conversation_id: str) -> Conversation:
        data = self._request("POST", f"/api/parent/conversations/{conversation_id}/read")
        return Conversation.model_validate(data["conversation"])

    # Therapist: patient requests

    def list_patient_requests(self) -> list[PatientRequest]:
        data = self._request("GET", "/api/therapist/patient-requests")
        return [PatientRequest.model_validate(r) for r in data["requests"]]

    def decide_request(self, request_id: str, action: str, message: Optional[str] = None) -> str:
        body = {"requestId": request_id, "action": action}
        if message:
            body["message"] = message
        return self._request("POST", "/api/therapist/patient-requests", json=body)["message"]

    # Therapist: profile

    def get_profile(self) -> TherapistProfile:
        data = self._request("GET", "/api/therapist/profile")
        return TherapistProfile.model_validate(data["profile"])

    def update_profile(self, **fields: Any) -> TherapistProfile:
        data = self._request("POST", "/api/therapist/profile", json=fields)
        return TherapistProfile.model_validate(data["profile"])

    def update_profile_image(self, image_url: str) -> TherapistProfile:
        data = self._request("POST", "/api/therapist/profile/image", json={"imageUrl": image_url})
        return TherapistProfile.model_validate(data["profile"])

    def profile_completion(self) -> dict:
        return self._request("GET", "/api/therapist/profile/complete")

    def mark_profile_complete(self) -> dict:
        return self._request("POST", "/api/therapist/profile/complete")

    # Therapist: reports and sessions

    def get_report(
        self,
        filter_type: str = "all",
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        patient_id: Optional[str] = None,
    ) -> TherapistReport:
        data = self._request(
            "GET",
            "/api/therapist/reports",
            params={
                "filterType": filter_type,
                "startDate": start_date.isoformat() if start_date else None,
                "endDate": end_date.isoformat() if end_date else None,
                "patientId": patient_id,
            },
        )
        return TherapistReport.model_validate(data)

    def list_therapist_sessions(self, status: Optional[str] = None) -> list[TherapySession]:
        data = self._request("GET", "/api/therapist/sessions", params={"status": status})
        return [TherapySession.model_validate(s) for s in data["sessions"]]

    def get_therapist_session(self, session_id: str) -> TherapySession:
        data = self._request("GET", f"/api/therapist/sessions/{session_id}")
        return TherapySession.model_validate(data["session"])

    def document_session(self, session_id: str, payload: dict) -> TherapySession:
        data = self._request("PUT", f"/api/therapist/sessions/{session_id}", json=payload)
        return TherapySession.model_validate(data["session"])

    # Therapist: availability

    def list_slots(self, week_start: Optional[date] = None) -> list[AvailabilitySlot]:
        data = self._request(
            "GET",
            "/api/therapist/availability",
            params={"weekStart": week_start.isoformat() if week_start else None},
        )
        return [AvailabilitySlot.model_validate(s) for s in data["slots"]]

    def add_slot(self, slot_date: date, start_time: str, is_free: bool = False) -> AvailabilitySlot:
        data = self._request(
            "POST",
            "/api/therapist/availability",
            json={"date": slot_date.isoformat(), "startTime": start_time, "isFree": is_free},
        )
        return AvailabilitySlot.model_validate(data["slot"])

    def bulk_add_slots(self, request: BulkAddRequest) -> BulkAddResponse:
        data = self._request(
            "POST", "/api/therapist/availability/bulk-add", json=request.to_wire()
        )
        return BulkAddResponse.model_validate(data)

    def set_slot_free(self, slot_id: str, is_free: bool) -> AvailabilitySlot:
        data = self._request(
            "PATCH", f"/api/therapist/availability/{slot_id}", json={"isFree": is_free}
        )
        return AvailabilitySlot.model_validate(data["slot"])

    def delete_slot(self, slot_id: str) -> str:
        return self._request("DELETE", f"/api/therapist/availability/{slot_id}")["message"]

    # Manager: applications

    def list_applications(
        self, status: Optional[str] = None, search: str = ""
    ) -> list[TherapistApplication]:
        data = self._request(
            "GET", "/api/manager/applications", params={"status": status, "search": search}
        )
        return [TherapistApplication.model_validate(a) for a in data["applications"]]

    def get_application(self, application_id: str) -> TherapistApplication:
        data = self._request("GET", f"/api/manager/applications/{application_id}")
        return TherapistApplication.model_validate(data["application"])

    def review_application(
        self, application_id: str, status: str, rejection_reason: Optional[str] = None
    ) -> TherapistApplication:
        body = {"status": status}
        if rejection_reason:
            body["rejectionReason"] = rejection_reason
        data = self._request(
            "PATCH", f"/api/manager/applications/{application_id}/review", json=body
        )
        return TherapistApplication.model_validate(data["application"])

    # Public

    def submit_contact(self, form: ContactFormData) -> str:
        return self._request("POST", "/api/contact", json=form.to_wire())["message"]
