"""In-app notifications."""

from datetime import datetime

from api.models.base import CamelModel


class Notification(CamelModel):
    """A system notice delivered to a user's inbox."""

    id: str
    sender_id: str
    receiver_id: str
    title: str
    message: str
    created_at: datetime
    is_read: bool = False
    is_urgent: bool = False
