"""Tests for therapist availability routes and the calendar helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from api.models import AvailabilitySlot, BulkAddRequest, RecurrenceType
from api.routes.availability import applicable_dates, slot_times
from conftest import OTHER_THERAPIST, THERAPIST
from portal.availability import (
    AvailabilityEditor,
    ensure_editable,
    slot_end,
    slots_for_week,
    week_days,
    week_start,
)
from portal.client import FormValidationError

URL = "/api/therapist/availability"
MONDAY = date(2030, 1, 7)


def bulk(**overrides) -> dict:
    body = {
        "startDate": "2030-01-07",
        "endDate": "2030-01-09",
        "startTime": "09:00",
        "endTime": "12:00",
        "recurrenceType": "Daily",
        "isFree": False,
    }
    body.update(overrides)
    return body


def next_monday() -> date:
    today = datetime.now(timezone.utc).date()
    return today - timedelta(days=today.weekday()) + timedelta(days=7)


class TestSlotGeneration:
    """Tests for slot_times() and applicable_dates()."""

    def test_hourly_slots_that_fit(self):
        assert slot_times("09:00", "12:00") == ["09:00", "10:00", "11:00"]
        assert slot_times("09:00", "11:44") == ["09:00", "10:00"]

    def test_start_rounds_up_to_the_hour(self):
        assert slot_times("09:30", "11:00") == ["10:00"]
        assert slot_times("09:10", "09:50") == []

    @pytest.mark.parametrize(
        "recurrence, start, end, days, expected",
        [
            ("None", "2030-01-07", "2030-01-31", [], [date(2030, 1, 7)]),
            ("Daily", "2030-01-07", "2030-01-09", [],
             [date(2030, 1, 7), date(2030, 1, 8), date(2030, 1, 9)]),
            ("Weekly", "2030-01-07", "2030-01-31", [],
             [date(2030, 1, 7), date(2030, 1, 14), date(2030, 1, 21), date(2030, 1, 28)]),
            ("Custom", "2030-01-07", "2030-01-13", [1, 3], [date(2030, 1, 7), date(2030, 1, 9)]),
            ("Custom", "2030-01-07", "2030-01-13", [0], [date(2030, 1, 13)]),
            ("Monthly", "2030-01-31", "2030-05-31", [],
             [date(2030, 1, 31), date(2030, 3, 31), date(2030, 5, 31)]),
        ],
    )
    def test_recurrence(self, recurrence, start, end, days, expected):
        request = BulkAddRequest.model_validate(
            bulk(startDate=start, endDate=end, recurrenceType=recurrence, selectedDays=days)
        )
        assert applicable_dates(request) == expected


class TestAvailabilityRoutes:
    """Tests for /api/therapist/availability."""

    def test_week_listing(self, client):
        response = client.get(f"{URL}?weekStart={next_monday().isoformat()}", headers=THERAPIST)
        assert response.status_code == 200
        assert [s["id"] for s in response.json()["slots"]] == ["slot-1", "slot-2", "slot-3"]

    def test_add_single_slot(self, client):
        response = client.post(
            URL, json={"date": "2030-01-07", "startTime": "9:00", "isFree": True}, headers=THERAPIST
        )
        assert response.status_code == 201
        slot = response.json()["slot"]
        assert slot["startTime"] == "09:00"
        assert slot["isFree"] is True
        assert slot["isBooked"] is False

    def test_duplicate_single_slot(self, client):
        body = {"date": "2030-01-07", "startTime": "09:00"}
        client.post(URL, json=body, headers=THERAPIST)
        response = client.post(URL, json=body, headers=THERAPIST)
        assert response.status_code == 409

    def test_bulk_add(self, client):
        response = client.post(f"{URL}/bulk-add", json=bulk(), headers=THERAPIST)
        assert response.status_code == 201
        assert response.json() == {
            "message": "Availability slots created successfully",
            "slotsCreated": 9,
            "dateRange": {"start": "2030-01-07", "end": "2030-01-09"},
        }
        week = client.get(f"{URL}?weekStart=2030-01-07", headers=THERAPIST).json()["slots"]
        assert len(week) == 9

    def test_bulk_add_conflicts_create_nothing(self, client, fresh_storage):
        client.post(URL, json={"date": "2030-01-08", "startTime": "10:00"}, headers=THERAPIST)
        before = len(fresh_storage.slots)
        response = client.post(f"{URL}/bulk-add", json=bulk(), headers=THERAPIST)
        assert response.status_code == 409
        assert response.json() == {
            "error": "Some slots conflict with existing availability",
            "conflicts": ["01/08/2030 at 10:00"],
            "totalConflicts": 1,
        }
        assert len(fresh_storage.slots) == before

    def test_bulk_conflicts_are_truncated_to_five(self, client):
        client.post(f"{URL}/bulk-add", json=bulk(), headers=THERAPIST)
        body = client.post(f"{URL}/bulk-add", json=bulk(), headers=THERAPIST).json()
        assert len(body["conflicts"]) == 5
        assert body["totalConflicts"] == 9

    def test_bulk_add_with_nothing_to_create(self, client):
        response = client.post(
            f"{URL}/bulk-add", json=bulk(startTime="09:10", endTime="09:50"), headers=THERAPIST
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "No slots generated. Check your date range and recurrence settings."
        }

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"recurrenceType": "Custom"}, "Custom recurrence requires selectedDays"),
            ({"startDate": "2030-01-10"}, "Start date must be before or equal to end date"),
            ({"startTime": "25:00"}, "Invalid time format. Use HH:MM format"),
            ({"selectedDays": [7], "recurrenceType": "Custom"}, "selectedDays must be between"),
        ],
    )
    def test_bulk_add_validation(self, client, overrides, message):
        response = client.post(f"{URL}/bulk-add", json=bulk(**overrides), headers=THERAPIST)
        assert response.status_code == 400
        assert any(message in error for error in response.json()["errors"])

    def test_booked_slot_is_read_only(self, client):
        patch = client.patch(f"{URL}/slot-3", json={"isFree": True}, headers=THERAPIST)
        assert patch.status_code == 400
        delete = client.delete(f"{URL}/slot-3", headers=THERAPIST)
        assert delete.status_code == 400
        assert delete.json() == {
            "error": "Cannot delete a booked slot. Please cancel the session first."
        }

    def test_toggle_and_delete_unbooked(self, client, fresh_storage):
        response = client.patch(f"{URL}/slot-1", json={"isFree": True}, headers=THERAPIST)
        assert response.json()["slot"]["isFree"] is True
        assert client.delete(f"{URL}/slot-1", headers=THERAPIST).status_code == 200
        assert fresh_storage.slots.get("slot-1") is None

    def test_other_therapists_slot(self, client):
        response = client.delete(f"{URL}/slot-1", headers=OTHER_THERAPIST)
        assert response.status_code == 404


class TestCalendarHelpers:
    def test_week_start_is_monday(self):
        assert week_start(date(2030, 1, 9)) == MONDAY
        assert week_start(date(2030, 1, 13)) == MONDAY
        assert week_start(MONDAY) == MONDAY

    def test_week_days(self):
        days = week_days(MONDAY)
        assert len(days) == 7
        assert days[-1] == date(2030, 1, 13)

    def test_slots_for_week_buckets_and_sorts(self):
        slots = [
            AvailabilitySlot(id="b", therapist_id="t", date=MONDAY, start_time="11:00"),
            AvailabilitySlot(id="a", therapist_id="t", date=MONDAY, start_time="09:00"),
            AvailabilitySlot(id="c", therapist_id="t", date=date(2030, 1, 20), start_time="09:00"),
        ]
        week = slots_for_week(slots, MONDAY)
        assert [s.id for s in week[MONDAY]] == ["a", "b"]
        assert sum(len(v) for v in week.values()) == 2

    def test_slot_end(self):
        assert slot_end("09:00") == "09:45"
        assert slot_end("23:00") == "23:45"

    def test_booked_slot_is_not_editable(self):
        slot = AvailabilitySlot(id="x", therapist_id="t", date=MONDAY, start_time="09:00", is_booked=True)
        with pytest.raises(FormValidationError):
            ensure_editable(slot)


class TestAvailabilityEditor:
    def test_toggle_delete_and_bulk(self, therapist_api):
        editor = AvailabilityEditor(therapist_api, next_monday())
        week = editor.load()
        assert sum(len(v) for v in week.values()) == 3

        updated = editor.toggle_free("slot-1")
        assert updated.is_free is True
        editor.delete("slot-2")
        assert [s.id for s in editor.slots] == ["slot-1", "slot-3"]

        with pytest.raises(FormValidationError):
            editor.delete("slot-3")

        start = editor.start
        result = editor.bulk_add(
            BulkAddRequest(
                start_date=start + timedelta(days=4),
                end_date=start + timedelta(days=4),
                start_time="13:00",
                end_time="15:00",
                recurrence_type=RecurrenceType.NONE,
            )
        )
        assert result.slots_created == 2
        assert len(editor.slots) == 4
