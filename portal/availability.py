"""
Weekly availability calendar helpers.

GOVERNANCE:
- Booked slots are shown but never edited
- Therapists may only toggle isFree or delete unbooked slots
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from api.models import AvailabilitySlot, BulkAddRequest
from api.models.availability import BulkAddResponse
from config import get_settings
from portal.client import FormValidationError, SparksClient


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def week_days(start: date) -> list[date]:
    return [start + timedelta(days=i) for i in range(7)]


def slots_for_week(slots: Iterable[AvailabilitySlot], start: date) -> dict[date, list[AvailabilitySlot]]:
    """Bucket slots per day of the week beginning at ``start``, each day sorted by time."""
    days = {day: [] for day in week_days(start)}
    for slot in slots:
        if slot.date in days:
            days[slot.date].append(slot)
    for day_slots in days.values():
        day_slots.sort(key=lambda s: s.start_time)
    return days


def slot_end(start_time: str) -> str:
    """End time of a slot starting at ``start_time`` (HH:MM)."""
    start = datetime.strptime(start_time, "%H:%M")
    end = start + timedelta(minutes=get_settings().slot_duration_minutes)
    return end.strftime("%H:%M")


def ensure_editable(slot: AvailabilitySlot) -> None:
    if slot.is_booked:
        raise FormValidationError("Booked slots cannot be changed")


class AvailabilityEditor:
    """One therapist's week of slots and the mutations allowed on them."""

    def __init__(self, client: SparksClient, start: Optional[date] = None):
        self.client = client
        self.start = week_start(start or date.today())
        self.slots: list[AvailabilitySlot] = []

    def load(self) -> dict[date, list[AvailabilitySlot]]:
        self.slots = self.client.list_slots(self.start)
        return self.week()

    def week(self) -> dict[date, list[AvailabilitySlot]]:
        return slots_for_week(self.slots, self.start)

    def shift(self, weeks: int) -> None:
        self.start += timedelta(weeks=weeks)

    def _find(self, slot_id: str) -> AvailabilitySlot:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        raise FormValidationError("Slot not found")

    def toggle_free(self, slot_id: str) -> AvailabilitySlot:
        slot = self._find(slot_id)
        ensure_editable(slot)
        updated = self.client.set_slot_free(slot.id, not slot.is_free)
        self.slots = [updated if s.id == updated.id else s for s in self.slots]
        return updated

    def delete(self, slot_id: str) -> None:
        slot = self._find(slot_id)
        ensure_editable(slot)
        self.client.delete_slot(slot.id)
        self.slots = [s for s in self.slots if s.id != slot.id]

    def bulk_add(self, request: BulkAddRequest) -> BulkAddResponse:
        """Create slots server-side, then reload the visible week."""
        response = self.client.bulk_add_slots(request)
        self.load()
        return response
