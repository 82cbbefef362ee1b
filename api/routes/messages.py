"""Parent conversations with therapists."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from api.deps import require_parent
from api.models import ChatMessage, Conversation, Sender, User
from api.models.message import (
    ConversationListResponse,
    ConversationResponse,
    SendMessageRequest,
)
from storage import get_storage, new_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/parent/conversations", tags=["messages"])


def _own_conversation(conversation_id: str, parent: User) -> Conversation:
    conversation = get_storage().conversations.get(conversation_id)
    if conversation is None or conversation.parent_id != parent.id:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


@router.get("", response_model=ConversationListResponse)
def list_conversations(parent: User = Depends(require_parent)):
    """Conversations of the acting parent, most recent activity first."""
    conversations = get_storage().conversations.filter(lambda c: c.parent_id == parent.id)
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    return ConversationListResponse(
        conversations=sorted(
            conversations,
            key=lambda c: c.last_message_time or epoch,
            reverse=True,
        )
    )


@router.post("/{conversation_id}/messages", response_model=ConversationResponse)
def send_message(
    conversation_id: str,
    request: SendMessageRequest,
    parent: User = Depends(require_parent),
):
    """Append a parent message."""
    conversation = _own_conversation(conversation_id, parent)
    text = request.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Message cannot be empty")

    conversation.messages.append(
        ChatMessage(
            id=new_id(),
            text=text,
            sender=Sender.PARENT,
            timestamp=datetime.now(timezone.utc),
            is_read=True,
        )
    )
    get_storage().conversations.update(conversation)
    return ConversationResponse(conversation=conversation)


@router.post("/{conversation_id}/read", response_model=ConversationResponse)
def mark_read(conversation_id: str, parent: User = Depends(require_parent)):
    """Mark the therapist's messages as read."""
    conversation = _own_conversation(conversation_id, parent)
    for message in conversation.messages:
        if message.sender == Sender.THERAPIST:
            message.is_read = True
    get_storage().conversations.update(conversation)
    return ConversationResponse(conversation=conversation)
