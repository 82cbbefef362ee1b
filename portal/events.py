"""
In-process event bus for signals between dashboard components.

Payloads are dataclasses; subscribers register for one payload type.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, MutableMapping, TypeVar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpenTasksModal:
    session_id: str


@dataclass(frozen=True)
class SessionSaved:
    session_id: str
    status: str


E = TypeVar("E")
Handler = Callable[[E], None]


class EventBus:
    """Typed publish/subscribe."""

    def __init__(self):
        self._subscribers: dict[type, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Handler) -> Callable[[], None]:
        """Register ``handler``; the returned callable unsubscribes it."""
        self._subscribers[event_type].append(handler)

        def unsubscribe() -> None:
            handlers = self._subscribers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, event: object) -> int:
        """Deliver ``event`` to its subscribers; returns how many received it."""
        handlers = list(self._subscribers.get(type(event), []))
        for handler in handlers:
            handler(event)
        logger.debug("Published %s to %d subscriber(s)", type(event).__name__, len(handlers))
        return len(handlers)


def session_bus(state: MutableMapping) -> EventBus:
    """The bus kept in one browser session's state, created on first use."""
    if "event_bus" not in state:
        state["event_bus"] = EventBus()
    return state["event_bus"]
