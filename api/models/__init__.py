"""API models."""

from api.models.application import (
    ApplicationStatus,
    ReviewDecision,
    TherapistApplication,
)
from api.models.auth import OtpRecord
from api.models.availability import AvailabilitySlot, BulkAddRequest, RecurrenceType
from api.models.base import CamelModel, MessageResponse
from api.models.contact import ContactFormData, ContactMessage
from api.models.message import ChatMessage, Conversation, Sender
from api.models.notification import Notification
from api.models.patient_request import PatientRequest, RequestStatus
from api.models.profile import TherapistProfile
from api.models.report import TherapistReport
from api.models.session import AttendanceStatus, SessionStatus, TherapySession
from api.models.task import Task, TaskStatus
from api.models.user import Child, Role, User

__all__ = [
    "CamelModel",
    "MessageResponse",
    "User",
    "Role",
    "Child",
    "OtpRecord",
    "Task",
    "TaskStatus",
    "TherapySession",
    "SessionStatus",
    "AttendanceStatus",
    "AvailabilitySlot",
    "BulkAddRequest",
    "RecurrenceType",
    "PatientRequest",
    "RequestStatus",
    "TherapistApplication",
    "ApplicationStatus",
    "ReviewDecision",
    "TherapistProfile",
    "Conversation",
    "ChatMessage",
    "Sender",
    "ContactFormData",
    "ContactMessage",
    "Notification",
    "TherapistReport",
]
