"""Requests from parents asking a therapist to take on their child."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import computed_field

from api.models.base import CamelModel


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class RequestAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"


class PatientRequest(CamelModel):
    """An assignment request as shown to the therapist."""

    id: str
    patient_id: str
    therapist_id: str
    first_name: str
    last_name: str
    date_of_birth: date
    gender: str
    phone: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None
    requested_at: datetime
    status: RequestStatus = RequestStatus.PENDING
    message: str = "No message provided"
    preferred_session_type: str = "online"
    urgency_level: str = "medium"
    response_message: Optional[str] = None

    @computed_field
    @property
    def age(self) -> int:
        today = date.today()
        born = self.date_of_birth
        return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


class RequestDecision(CamelModel):
    """Body of POST /api/therapist/patient-requests."""

    request_id: str = ""
    action: str = ""
    message: Optional[str] = None


class PatientRequestListResponse(CamelModel):
    requests: list[PatientRequest]


class RequestDecisionResponse(CamelModel):
    success: bool
    message: str
