"""
Manager review of therapist applications.

GOVERNANCE:
- approved and rejected are terminal
- Rejection REQUIRES a reason
- Approval lists the therapist with an empty profile to be completed
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import require_manager
from api.models import (
    ApplicationStatus,
    ReviewDecision,
    TherapistApplication,
    TherapistProfile,
    User,
)
from api.models.application import (
    ApplicationListResponse,
    ApplicationResponse,
    can_transition,
)
from storage import get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/manager/applications", tags=["applications"])


def _matches(application: TherapistApplication, search: str) -> bool:
    needle = search.lower()
    return any(
        needle in value.lower()
        for value in (application.name, application.email, application.license_number)
    )


def _get_application(application_id: str) -> TherapistApplication:
    application = get_storage().applications.get(application_id)
    if application is None:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


@router.get("", response_model=ApplicationListResponse)
def list_applications(
    status: Optional[ApplicationStatus] = Query(None),
    search: str = Query(""),
    manager: User = Depends(require_manager),
):
    """Applications filtered by status and a name/email/license search."""
    applications = get_storage().applications.filter(
        lambda a: (status is None or a.status == status)
        and (not search.strip() or _matches(a, search.strip()))
    )
    return ApplicationListResponse(
        applications=sorted(applications, key=lambda a: a.submitted_at, reverse=True)
    )


@router.get("/{application_id}", response_model=ApplicationResponse)
def get_application(application_id: str, manager: User = Depends(require_manager)):
    return ApplicationResponse(application=_get_application(application_id))


@router.patch("/{application_id}/review", response_model=ApplicationResponse)
def review_application(
    application_id: str,
    decision: ReviewDecision,
    manager: User = Depends(require_manager),
):
    """Move an application along its review workflow."""
    storage = get_storage()
    application = _get_application(application_id)

    if not can_transition(application.status, decision.status):
        raise HTTPException(
            status_code=400,
            detail=(
                f"Cannot change application status from "
                f"{application.status.value} to {decision.status.value}"
            ),
        )

    reason = (decision.rejection_reason or "").strip()
    if decision.status == ApplicationStatus.REJECTED and not reason:
        raise HTTPException(status_code=400, detail="Rejection reason is required")

    application.status = decision.status
    application.reviewed_at = datetime.now(timezone.utc)
    application.reviewed_by = manager.id
    application.rejection_reason = reason if decision.status == ApplicationStatus.REJECTED else None
    storage.applications.update(application)

    if decision.status == ApplicationStatus.APPROVED and storage.profiles.get(application.therapist_id) is None:
        storage.profiles.create(
            TherapistProfile(
                id=application.therapist_id,
                name=application.name,
                email=application.email,
                phone=application.phone,
                specialization=application.primary_specialty,
                license_number=application.license_number,
            )
        )

    logger.info(
        "Application %s set to %s by %s",
        application.id,
        application.status.value,
        manager.id,
    )
    return ApplicationResponse(application=application)
