"""Tests for parent conversations."""

from conftest import OTHER_PARENT, PARENT
from portal.messages import Inbox

URL = "/api/parent/conversations"


class TestConversationRoutes:
    """Tests for /api/parent/conversations."""

    def test_list_with_derived_fields(self, client):
        conversations = client.get(URL, headers=PARENT).json()["conversations"]
        assert len(conversations) == 1
        conversation = conversations[0]
        assert conversation["unreadCount"] == 1
        assert conversation["lastMessage"] == "Great progress! Let's add the homework timer next."
        assert len(conversation["messages"]) == 3

    def test_send_appends_in_order(self, client):
        response = client.post(
            f"{URL}/conversation-1/messages", json={"text": "  Thank you!  "}, headers=PARENT
        )
        assert response.status_code == 200
        conversation = response.json()["conversation"]
        last = conversation["messages"][-1]
        assert last["text"] == "Thank you!"
        assert last["sender"] == "parent"
        assert conversation["lastMessage"] == "Thank you!"
        assert len(conversation["messages"]) == 4

    def test_blank_message(self, client):
        response = client.post(
            f"{URL}/conversation-1/messages", json={"text": "   "}, headers=PARENT
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Message cannot be empty"}

    def test_mark_read(self, client):
        response = client.post(f"{URL}/conversation-1/read", headers=PARENT)
        assert response.json()["conversation"]["unreadCount"] == 0

    def test_other_parent(self, client):
        response = client.post(f"{URL}/conversation-1/read", headers=OTHER_PARENT)
        assert response.status_code == 404
        assert client.get(URL, headers=OTHER_PARENT).json()["conversations"] == []


class TestInbox:
    def test_load_selects_first(self, parent_api):
        inbox = Inbox(parent_api)
        inbox.load()
        assert inbox.selected.id == "conversation-1"
        assert inbox.unread_total == 1

    def test_select_marks_read(self, parent_api, fresh_storage):
        inbox = Inbox(parent_api)
        inbox.load()
        inbox.select("conversation-1")
        assert inbox.unread_total == 0
        assert fresh_storage.conversations.get("conversation-1").unread_count == 0

    def test_send(self, parent_api):
        inbox = Inbox(parent_api)
        inbox.load()
        assert inbox.send("   ") is None
        conversation = inbox.send("See you Thursday")
        assert conversation.last_message == "See you Thursday"
        assert inbox.selected.last_message == "See you Thursday"
