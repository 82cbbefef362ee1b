"""
In-memory storage of record for the demo backend.

GOVERNANCE:
- No persistent storage (demo only)
- No external database connections
"""

import logging
import uuid
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Generic, Optional, TypeVar

from pydantic import BaseModel

from api.models import (
    AvailabilitySlot,
    Child,
    ContactMessage,
    Conversation,
    Notification,
    OtpRecord,
    PatientRequest,
    Task,
    TherapistApplication,
    TherapistProfile,
    TherapySession,
    User,
)
from config import get_settings
from storage.seed import seed_demo_data

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def new_id() -> str:
    """Generate a record id."""
    return uuid.uuid4().hex


class Collection(Generic[T]):
    """Records of one kind, keyed by their ``id``."""

    def __init__(self, name: str):
        self.name = name
        self._records: dict[str, T] = {}

    def create(self, record: T) -> T:
        """Store a new record."""
        self._records[record.id] = record
        return record

    def get(self, record_id: str) -> Optional[T]:
        """Retrieve a record by ID."""
        return self._records.get(record_id)

    def update(self, record: T) -> T:
        """Replace an existing record."""
        if record.id not in self._records:
            raise KeyError(f"{self.name} {record.id} not found")
        self._records[record.id] = record
        return record

    def delete(self, record_id: str) -> None:
        """Remove a record."""
        if self._records.pop(record_id, None) is None:
            raise KeyError(f"{self.name} {record_id} not found")

    def list_all(self) -> list[T]:
        """List all records in insertion order."""
        return list(self._records.values())

    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        """List records matching ``predicate``."""
        return [r for r in self._records.values() if predicate(r)]

    def __len__(self) -> int:
        return len(self._records)


class SparksStorage:
    """One collection per entity the portal reads or writes."""

    def __init__(self):
        self.users: Collection[User] = Collection("User")
        self.otps: Collection[OtpRecord] = Collection("OTP")
        self.children: Collection[Child] = Collection("Child")
        self.tasks: Collection[Task] = Collection("Task")
        self.sessions: Collection[TherapySession] = Collection("Session")
        self.slots: Collection[AvailabilitySlot] = Collection("Slot")
        self.patient_requests: Collection[PatientRequest] = Collection("Request")
        self.applications: Collection[TherapistApplication] = Collection("Application")
        self.profiles: Collection[TherapistProfile] = Collection("Profile")
        self.conversations: Collection[Conversation] = Collection("Conversation")
        self.contact_messages: Collection[ContactMessage] = Collection("Contact")
        self.notifications: Collection[Notification] = Collection("Notification")

    def find_user_by_email(self, email: str) -> Optional[User]:
        """Look a user up by (already sanitized) email."""
        matches = self.users.filter(lambda u: u.email == email)
        return matches[0] if matches else None

    def notify(
        self,
        sender_id: str,
        receiver_id: str,
        title: str,
        message: str,
        is_urgent: bool = False,
    ) -> Notification:
        """Deliver an in-app notification."""
        notification = Notification(
            id=new_id(),
            sender_id=sender_id,
            receiver_id=receiver_id,
            title=title,
            message=message,
            created_at=datetime.now(timezone.utc),
            is_urgent=is_urgent,
        )
        logger.info("Notification '%s' sent to %s", title, receiver_id)
        return self.notifications.create(notification)


@lru_cache
def get_storage() -> SparksStorage:
    """Get the singleton storage instance."""
    storage = SparksStorage()
    if get_settings().seed_demo_data:
        seed_demo_data(storage)
    return storage
