"""
Therapist application models.

GOVERNANCE:
- approved and rejected are terminal
- Rejection REQUIRES a non-empty reason
- Every decision records the reviewing manager
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from api.models.base import CamelModel


class ApplicationStatus(str, Enum):
    """Application status enum."""

    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


ALLOWED_TRANSITIONS: dict[ApplicationStatus, set[ApplicationStatus]] = {
    ApplicationStatus.PENDING: {
        ApplicationStatus.UNDER_REVIEW,
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
    },
    ApplicationStatus.UNDER_REVIEW: {
        ApplicationStatus.APPROVED,
        ApplicationStatus.REJECTED,
    },
    ApplicationStatus.APPROVED: set(),
    ApplicationStatus.REJECTED: set(),
}


def can_transition(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    """Whether an application may move from ``current`` to ``target``."""
    return target in ALLOWED_TRANSITIONS[current]


class Address(CamelModel):
    house_number: str = ""
    street_name: str = ""
    city: str = ""


class DocumentRef(CamelModel):
    """An uploaded file; contents live in document storage."""

    id: str
    name: str
    original_name: str
    url: str


class ApplicationDocuments(CamelModel):
    professional_license: list[DocumentRef] = Field(default_factory=list)
    educational_certificates: list[DocumentRef] = Field(default_factory=list)
    additional_certifications: list[DocumentRef] = Field(default_factory=list)


class ReferenceContact(CamelModel):
    first_name: str
    last_name: str
    professional_title: str
    phone_number: str
    email: str


class TherapistApplication(CamelModel):
    """A therapist's request to join the platform."""

    id: str
    therapist_id: str
    name: str
    email: str
    phone: str = ""
    date_of_birth: Optional[date] = None
    address: Address = Field(default_factory=Address)
    gender: str = ""
    license_number: str
    primary_specialty: str = ""
    years_of_experience: str = ""
    highest_education: str = ""
    institution: str = ""
    adhd_experience: str = ""
    documents: ApplicationDocuments = Field(default_factory=ApplicationDocuments)
    reference: Optional[ReferenceContact] = None
    status: ApplicationStatus = ApplicationStatus.PENDING
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    rejection_reason: Optional[str] = None


class ReviewDecision(CamelModel):
    """Body of PATCH /api/manager/applications/{id}/review."""

    status: ApplicationStatus
    rejection_reason: Optional[str] = None


class ApplicationListResponse(CamelModel):
    applications: list[TherapistApplication]


class ApplicationResponse(CamelModel):
    application: TherapistApplication
