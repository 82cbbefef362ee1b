"""
Manager review of therapist applications.

GOVERNANCE:
- Rejection cannot be submitted without a reason
"""

import logging
from collections import Counter
from typing import Iterable, Optional

from api.models import ApplicationStatus, TherapistApplication
from portal.client import FormValidationError, SparksClient

logger = logging.getLogger(__name__)


def filter_applications(
    applications: Iterable[TherapistApplication],
    search: str = "",
    status: Optional[str] = "all",
) -> list[TherapistApplication]:
    """Case-insensitive search over name, email and license, intersected with status."""
    needle = search.strip().lower()
    result = []
    for app in applications:
        if status and status != "all" and app.status != status:
            continue
        if needle and not any(
            needle in value.lower() for value in (app.name, app.email, app.license_number)
        ):
            continue
        result.append(app)
    return result


def status_counts(applications: Iterable[TherapistApplication]) -> dict[str, int]:
    counts = Counter(app.status.value for app in applications)
    return {status.value: counts.get(status.value, 0) for status in ApplicationStatus}


def can_submit_rejection(reason: Optional[str]) -> bool:
    return bool(reason and reason.strip())


class ApplicationReviewBoard:
    """Applications list plus the review actions."""

    def __init__(self, client: SparksClient):
        self.client = client
        self.applications: list[TherapistApplication] = []
        self.search = ""
        self.status = "all"

    def load(self) -> list[TherapistApplication]:
        self.applications = self.client.list_applications()
        return self.applications

    def visible(self) -> list[TherapistApplication]:
        return filter_applications(self.applications, self.search, self.status)

    def counts(self) -> dict[str, int]:
        return status_counts(self.applications)

    def _replace(self, updated: TherapistApplication) -> TherapistApplication:
        self.applications = [updated if a.id == updated.id else a for a in self.applications]
        return updated

    def start_review(self, application_id: str) -> TherapistApplication:
        return self._replace(
            self.client.review_application(application_id, ApplicationStatus.UNDER_REVIEW.value)
        )

    def approve(self, application_id: str) -> TherapistApplication:
        updated = self.client.review_application(application_id, ApplicationStatus.APPROVED.value)
        logger.info("Application %s approved", application_id)
        return self._replace(updated)

    def reject(self, application_id: str, reason: str) -> TherapistApplication:
        if not can_submit_rejection(reason):
            raise FormValidationError("Please provide a reason for rejection")
        updated = self.client.review_application(
            application_id, ApplicationStatus.REJECTED.value, reason.strip()
        )
        logger.info("Application %s rejected", application_id)
        return self._replace(updated)
