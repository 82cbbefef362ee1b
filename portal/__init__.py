"""Client-side view-models shared by the dashboards."""

from portal.client import (
    ApiError,
    FormValidationError,
    NetworkError,
    PortalError,
    RateLimitedError,
    SparksClient,
)
from portal.events import EventBus, session_bus
from portal.theme import Theme, get_theme
from portal.timers import Countdown

__all__ = [
    "SparksClient",
    "PortalError",
    "FormValidationError",
    "ApiError",
    "RateLimitedError",
    "NetworkError",
    "Countdown",
    "EventBus",
    "session_bus",
    "Theme",
    "get_theme",
]
