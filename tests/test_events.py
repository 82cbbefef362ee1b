"""Tests for the dashboard event bus and theme."""

from portal.events import EventBus, OpenTasksModal, SessionSaved, session_bus
from portal.theme import get_theme


class TestEventBus:
    def test_subscribers_receive_their_type_only(self):
        bus = EventBus()
        tasks, saved = [], []
        bus.subscribe(OpenTasksModal, tasks.append)
        bus.subscribe(SessionSaved, saved.append)

        assert bus.publish(OpenTasksModal("session-1")) == 1
        assert tasks == [OpenTasksModal("session-1")]
        assert saved == []

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        unsubscribe = bus.subscribe(SessionSaved, received.append)
        unsubscribe()
        unsubscribe()
        assert bus.publish(SessionSaved("session-1", "COMPLETED")) == 0
        assert received == []

    def test_no_subscribers(self):
        assert EventBus().publish(OpenTasksModal("session-9")) == 0


class TestSessionBus:
    """Each browser session keeps its own bus in its state."""

    def test_created_once_per_state(self):
        state = {}
        assert session_bus(state) is session_bus(state)
        assert state["event_bus"] is session_bus(state)

    def test_sessions_do_not_share_subscribers(self):
        states = [{} for _ in range(3)]
        opened = [[] for _ in states]
        for state, received in zip(states, opened):
            session_bus(state).subscribe(OpenTasksModal, received.append)

        assert session_bus(states[1]).publish(OpenTasksModal("session-1")) == 1
        assert opened == [[], [OpenTasksModal("session-1")], []]

    def test_dropped_session_takes_its_handlers(self):
        state = {}
        session_bus(state).subscribe(SessionSaved, lambda event: None)
        state.clear()
        assert session_bus(state).publish(SessionSaved("session-1", "COMPLETED")) == 0


class TestTheme:
    def test_palette(self):
        theme = get_theme()
        assert theme.primary == "#8159A8"
        assert theme.status_color("COMPLETED") == theme.success
        assert theme.warning in theme.badge("Pending", "pending")
