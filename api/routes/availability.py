"""
Therapist availability routes.

GOVERNANCE:
- Slots start on the hour and last 45 minutes, with a 15-minute break
- Booked slots are read-only to the therapist
- Bulk creation is all-or-nothing: any conflict rejects the whole batch
"""

import logging
from calendar import monthrange
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import require_therapist
from api.models import AvailabilitySlot, User
from api.models.availability import (
    BulkAddRequest,
    BulkAddResponse,
    CreateSlotRequest,
    DateRange,
    RecurrenceType,
    SlotListResponse,
    SlotResponse,
    SlotUpdateRequest,
)
from config import get_settings
from storage import get_storage, new_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/therapist/availability", tags=["availability"])


def _minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def slot_times(start_time: str, end_time: str) -> list[str]:
    """Hourly start times whose full session fits before end_time."""
    duration = get_settings().slot_duration_minutes
    current = _minutes(start_time)
    if current % 60:
        current = (current // 60 + 1) * 60
    end = _minutes(end_time)

    times = []
    while current + duration <= end:
        times.append(f"{current // 60:02d}:{current % 60:02d}")
        current += 60
    return times


def _sunday_based(day: date) -> int:
    return (day.weekday() + 1) % 7


def applicable_dates(request: BulkAddRequest) -> list[date]:
    """Dates within the range selected by the recurrence rule."""
    start, end = request.start_date, request.end_date
    span = [start + timedelta(days=i) for i in range((end - start).days + 1)]

    if request.recurrence_type == RecurrenceType.NONE:
        return [start]
    if request.recurrence_type == RecurrenceType.DAILY:
        return span
    if request.recurrence_type == RecurrenceType.WEEKLY:
        return [d for d in span if d.weekday() == start.weekday()]
    if request.recurrence_type == RecurrenceType.CUSTOM:
        return [d for d in span if _sunday_based(d) in request.selected_days]

    # Monthly: same day of month; months without that day are skipped
    dates = []
    year, month = start.year, start.month
    while date(year, month, 1) <= end:
        if start.day <= monthrange(year, month)[1]:
            candidate = date(year, month, start.day)
            if start <= candidate <= end:
                dates.append(candidate)
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return dates


def _own_slot(slot_id: str, therapist: User) -> AvailabilitySlot:
    slot = get_storage().slots.get(slot_id)
    if slot is None or slot.therapist_id != therapist.id:
        raise HTTPException(status_code=404, detail="Availability slot not found")
    return slot


def _taken(therapist_id: str) -> set[tuple[date, str]]:
    return {
        (s.date, s.start_time)
        for s in get_storage().slots.filter(lambda s: s.therapist_id == therapist_id)
    }


@router.get("", response_model=SlotListResponse)
def list_slots(
    week_start: Optional[date] = Query(None, alias="weekStart"),
    therapist: User = Depends(require_therapist),
):
    """Slots of the acting therapist, optionally limited to one week."""
    slots = get_storage().slots.filter(lambda s: s.therapist_id == therapist.id)
    if week_start is not None:
        week_end = week_start + timedelta(days=6)
        slots = [s for s in slots if week_start <= s.date <= week_end]
    return SlotListResponse(slots=sorted(slots, key=lambda s: (s.date, s.start_time)))


@router.post("", response_model=SlotResponse, status_code=201)
def add_slot(request: CreateSlotRequest, therapist: User = Depends(require_therapist)):
    """Add a single slot."""
    if (request.date, request.start_time) in _taken(therapist.id):
        raise HTTPException(
            status_code=409,
            detail="A slot already exists at this date and time",
        )
    slot = AvailabilitySlot(
        id=new_id(),
        therapist_id=therapist.id,
        date=request.date,
        start_time=request.start_time,
        is_free=request.is_free,
    )
    get_storage().slots.create(slot)
    return SlotResponse(message="Availability slot created successfully", slot=slot)


@router.post("/bulk-add", response_model=BulkAddResponse, status_code=201)
def bulk_add(request: BulkAddRequest, therapist: User = Depends(require_therapist)):
    """
    Create slots across a date range following a recurrence rule.

    GOVERNANCE:
    - Conflicts are reported (first five plus the total) and nothing is created
    """
    times = slot_times(request.start_time, request.end_time)
    dates = applicable_dates(request) if times else []
    candidates = [(d, t) for d in dates for t in times]
    if not candidates:
        raise HTTPException(
            status_code=400,
            detail="No slots generated. Check your date range and recurrence settings.",
        )

    taken = _taken(therapist.id)
    conflicts = [
        f"{d.strftime('%m/%d/%Y')} at {t}" for d, t in candidates if (d, t) in taken
    ]
    if conflicts:
        raise HTTPException(
            status_code=409,
            detail={
                "error": "Some slots conflict with existing availability",
                "conflicts": conflicts[:5],
                "totalConflicts": len(conflicts),
            },
        )

    storage = get_storage()
    for slot_date, start_time in candidates:
        storage.slots.create(
            AvailabilitySlot(
                id=new_id(),
                therapist_id=therapist.id,
                date=slot_date,
                start_time=start_time,
                is_free=request.is_free,
            )
        )
    logger.info(
        "Therapist %s added %d slots (%s)",
        therapist.id,
        len(candidates),
        request.recurrence_type.value,
    )
    return BulkAddResponse(
        message="Availability slots created successfully",
        slots_created=len(candidates),
        date_range=DateRange(start=request.start_date, end=request.end_date),
    )


@router.patch("/{slot_id}", response_model=SlotResponse)
def update_slot(
    slot_id: str,
    request: SlotUpdateRequest,
    therapist: User = Depends(require_therapist),
):
    """Toggle whether an unbooked slot is offered free of charge."""
    slot = _own_slot(slot_id, therapist)
    if slot.is_booked:
        raise HTTPException(status_code=400, detail="Cannot modify a booked slot")
    slot.is_free = request.is_free
    get_storage().slots.update(slot)
    return SlotResponse(message="Availability slot updated successfully", slot=slot)


@router.delete("/{slot_id}")
def delete_slot(slot_id: str, therapist: User = Depends(require_therapist)):
    """Remove an unbooked slot."""
    slot = _own_slot(slot_id, therapist)
    if slot.is_booked:
        raise HTTPException(
            status_code=400,
            detail="Cannot delete a booked slot. Please cancel the session first.",
        )
    get_storage().slots.delete(slot.id)
    return {"message": "Availability slot deleted successfully"}
