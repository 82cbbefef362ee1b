"""
Therapist availability models.

GOVERNANCE:
- Slots are fixed 45-minute units
- isBooked is owned by booking; therapists cannot change it
"""

import re
from datetime import date
from enum import Enum

from pydantic import Field, field_validator, model_validator

from api.models.base import CamelModel

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def _check_time(value: str) -> str:
    value = value.strip()
    if not TIME_PATTERN.match(value):
        raise ValueError("Invalid time format. Use HH:MM format")
    hours, minutes = value.split(":")
    return f"{int(hours):02d}:{minutes}"


class AvailabilitySlot(CamelModel):
    """A bookable 45-minute window."""

    id: str
    therapist_id: str
    date: date
    start_time: str  # HH:MM
    is_booked: bool = False
    is_free: bool = False


class RecurrenceType(str, Enum):
    """How a bulk range repeats."""

    NONE = "None"
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    CUSTOM = "Custom"


class CreateSlotRequest(CamelModel):
    """Add one slot."""

    date: date
    start_time: str
    is_free: bool = False

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: str) -> str:
        return _check_time(v)


class BulkAddRequest(CamelModel):
    """Add slots across a date range."""

    start_date: date
    end_date: date
    start_time: str
    end_time: str
    recurrence_type: RecurrenceType
    selected_days: list[int] = Field(default_factory=list)  # 0 = Sunday
    is_free: bool = False

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_times(cls, v: str) -> str:
        return _check_time(v)

    @field_validator("selected_days")
    @classmethod
    def validate_days(cls, v: list[int]) -> list[int]:
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("selectedDays must be between 0 (Sunday) and 6 (Saturday)")
        return sorted(set(v))

    @model_validator(mode="after")
    def validate_range(self) -> "BulkAddRequest":
        if self.start_date > self.end_date:
            raise ValueError("Start date must be before or equal to end date")
        if self.recurrence_type == RecurrenceType.CUSTOM and not self.selected_days:
            raise ValueError("Custom recurrence requires selectedDays")
        return self


class SlotUpdateRequest(CamelModel):
    """The only therapist-editable slot attribute."""

    is_free: bool


class DateRange(CamelModel):
    start: date
    end: date


class SlotListResponse(CamelModel):
    slots: list[AvailabilitySlot]


class SlotResponse(CamelModel):
    message: str
    slot: AvailabilitySlot


class BulkAddResponse(CamelModel):
    message: str
    slots_created: int
    date_range: DateRange
