"""Parent inbox: conversations with therapists."""

from typing import Optional

from api.models import Conversation
from portal.client import SparksClient


class Inbox:
    def __init__(self, client: SparksClient):
        self.client = client
        self.conversations: list[Conversation] = []
        self.selected_id: Optional[str] = None

    def load(self) -> list[Conversation]:
        self.conversations = self.client.list_conversations()
        if self.selected_id is None and self.conversations:
            self.selected_id = self.conversations[0].id
        return self.conversations

    @property
    def selected(self) -> Optional[Conversation]:
        return next((c for c in self.conversations if c.id == self.selected_id), None)

    @property
    def unread_total(self) -> int:
        return sum(c.unread_count for c in self.conversations)

    def _replace(self, updated: Conversation) -> Conversation:
        self.conversations = [updated if c.id == updated.id else c for c in self.conversations]
        return updated

    def select(self, conversation_id: str) -> Optional[Conversation]:
        """Open a conversation and mark its therapist messages read."""
        self.selected_id = conversation_id
        conversation = self.selected
        if conversation is not None and conversation.unread_count:
            conversation = self._replace(self.client.mark_conversation_read(conversation_id))
        return conversation

    def send(self, text: str) -> Optional[Conversation]:
        """Send to the selected conversation; blank text is ignored."""
        if not text or not text.strip() or self.selected_id is None:
            return None
        return self._replace(self.client.send_message(self.selected_id, text.strip()))
