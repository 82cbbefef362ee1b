"""
Therapist review of incoming patient requests.

A decision goes through a confirmation modal. On success the request is
dropped from the local list without refetching.
"""

import logging
import time
from enum import Enum
from typing import Optional

from api.models import PatientRequest, RequestStatus
from config import get_settings
from portal.client import PortalError, SparksClient
from portal.timers import Clock, Countdown

logger = logging.getLogger(__name__)


class ModalState(str, Enum):
    CLOSED = "closed"
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCESS = "success"
    ERROR = "error"


class ConfirmationModal:
    """Accept/reject confirmation for one request."""

    def __init__(self, clock: Clock = time.monotonic, auto_close_seconds: Optional[int] = None):
        self.state = ModalState.CLOSED
        self.request: Optional[PatientRequest] = None
        self.action: Optional[str] = None
        self.message = ""
        self.error: Optional[str] = None
        self.result: Optional[str] = None
        self._auto_close = Countdown(clock)
        self._auto_close_seconds = (
            auto_close_seconds
            if auto_close_seconds is not None
            else get_settings().modal_auto_close_seconds
        )

    @property
    def is_open(self) -> bool:
        if self.state == ModalState.SUCCESS and not self._auto_close.running:
            self.close()
        return self.state != ModalState.CLOSED

    def open(self, request: PatientRequest, action: str) -> None:
        self.state = ModalState.IDLE
        self.request = request
        self.action = action
        self.message = ""
        self.error = None
        self.result = None

    def begin(self) -> None:
        self.state = ModalState.IN_FLIGHT
        self.error = None

    def succeed(self, result: str) -> None:
        self.state = ModalState.SUCCESS
        self.result = result
        self._auto_close.start(self._auto_close_seconds)

    def fail(self, error: str) -> None:
        self.state = ModalState.ERROR
        self.error = error

    def close(self) -> None:
        self.state = ModalState.CLOSED
        self.request = None
        self.action = None
        self._auto_close.clear()


class PatientRequestBoard:
    """Pending requests for the acting therapist."""

    def __init__(self, client: SparksClient, modal: Optional[ConfirmationModal] = None):
        self.client = client
        self.modal = modal or ConfirmationModal()
        self.requests: list[PatientRequest] = []

    def load(self) -> list[PatientRequest]:
        self.requests = [
            r for r in self.client.list_patient_requests()
            if r.status == RequestStatus.PENDING
        ]
        return self.requests

    def confirm(self) -> bool:
        """Send the decision held by the modal."""
        modal = self.modal
        if modal.request is None or modal.state not in (ModalState.IDLE, ModalState.ERROR):
            return False

        modal.begin()
        try:
            result = self.client.decide_request(modal.request.id, modal.action, modal.message or None)
        except PortalError as exc:
            modal.fail(exc.message)
            return False

        decided = modal.request.id
        self.requests = [r for r in self.requests if r.id != decided]
        modal.succeed(result)
        logger.info("Request %s %s", decided, modal.action)
        return True
