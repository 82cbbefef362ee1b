"""Parent-therapist conversation models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, computed_field

from api.models.base import CamelModel


class Sender(str, Enum):
    PARENT = "parent"
    THERAPIST = "therapist"


class ChatMessage(CamelModel):
    """One message, kept in append order."""

    id: str
    text: str
    sender: Sender
    timestamp: datetime
    is_read: bool = False


class Conversation(CamelModel):
    """Messages between a parent and a therapist about one child."""

    id: str
    parent_id: str
    therapist_id: str
    therapist_name: str
    child_name: str
    messages: list[ChatMessage] = Field(default_factory=list)

    @computed_field(alias="lastMessage")
    @property
    def last_message(self) -> str:
        return self.messages[-1].text if self.messages else ""

    @computed_field(alias="lastMessageTime")
    @property
    def last_message_time(self) -> Optional[datetime]:
        return self.messages[-1].timestamp if self.messages else None

    @computed_field(alias="unreadCount")
    @property
    def unread_count(self) -> int:
        return sum(
            1 for m in self.messages
            if m.sender == Sender.THERAPIST and not m.is_read
        )


class SendMessageRequest(CamelModel):
    text: str = Field(..., min_length=1, max_length=2000)


class ConversationListResponse(CamelModel):
    conversations: list[Conversation]


class ConversationResponse(CamelModel):
    conversation: Conversation
