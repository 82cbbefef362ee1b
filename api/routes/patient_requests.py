"""
Therapist review of patient assignment requests.

GOVERNANCE:
- Only pending requests are listed
- A request is decided once
- Parents are notified of every decision
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.deps import require_therapist
from api.models import RequestStatus, User
from api.models.patient_request import (
    PatientRequestListResponse,
    RequestAction,
    RequestDecision,
    RequestDecisionResponse,
)
from storage import get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/therapist/patient-requests", tags=["patient-requests"])


@router.get("", response_model=PatientRequestListResponse)
def list_requests(therapist: User = Depends(require_therapist)):
    """Pending requests addressed to the therapist, newest first."""
    pending = get_storage().patient_requests.filter(
        lambda r: r.therapist_id == therapist.id and r.status == RequestStatus.PENDING
    )
    return PatientRequestListResponse(
        requests=sorted(pending, key=lambda r: r.requested_at, reverse=True)
    )


@router.post("", response_model=RequestDecisionResponse)
def decide_request(decision: RequestDecision, therapist: User = Depends(require_therapist)):
    """
    Accept or reject a request.

    GOVERNANCE:
    - Accepting makes the therapist the child's primary therapist
    """
    if not decision.request_id or not decision.action:
        raise HTTPException(status_code=400, detail="Request ID and action are required")
    try:
        action = RequestAction(decision.action)
    except ValueError:
        raise HTTPException(status_code=400, detail="Action must be 'accept' or 'reject'")

    storage = get_storage()
    request = storage.patient_requests.get(decision.request_id)
    if request is None:
        raise HTTPException(status_code=404, detail="Assignment request not found")
    if request.therapist_id != therapist.id:
        raise HTTPException(status_code=403, detail="Unauthorized to access this request")
    if request.status != RequestStatus.PENDING:
        raise HTTPException(status_code=400, detail="Request has already been processed")

    accepted = action == RequestAction.ACCEPT
    request.status = RequestStatus.ACCEPTED if accepted else RequestStatus.REJECTED
    request.response_message = decision.message or None
    storage.patient_requests.update(request)

    child = storage.children.get(request.patient_id)
    if accepted and child is not None:
        child.therapist_id = therapist.id
        storage.children.update(child)

    patient_name = f"{request.first_name} {request.last_name}".strip()
    note = f" Therapist message: {decision.message}" if decision.message else ""
    if accepted:
        title = "Therapist Assignment Approved"
        text = (
            f"Good news! {therapist.name} has accepted your therapist assignment request "
            f"for {patient_name}. You can now schedule sessions and begin therapy.{note}"
        )
    else:
        title = "Therapist Assignment Declined"
        text = (
            f"{therapist.name} has declined your therapist assignment request "
            f"for {patient_name}.{note}"
        )
    if child is not None:
        storage.notify(therapist.id, child.parent_id, title, text, is_urgent=accepted)

    logger.info("Request %s %sed by %s", request.id, action.value, therapist.id)
    return RequestDecisionResponse(
        success=True,
        message=f"Request {'accepted' if accepted else 'rejected'} successfully",
    )
