from datetime import date, datetime
from types import SimpleNamespace

import pytest

from randevu.domain.appointments.availability import (
    booked_slots,
    booking_end,
    build_day_slots,
    day_bounds,
    overlaps,
)
from randevu.domain.businesses.schemas import AppointmentSettings
from randevu.models import LeaveType

DAY = date(2030, 3, 4)
DAY_BEFORE = datetime(2030, 3, 3, 12, 0)


def at(hour, minute=0):
    return datetime(2030, 3, 4, hour, minute)


def settings(**overrides):
    values = {"slotDuration": 60, "minAdvanceBooking": 0, "allowSameDayBooking": True}
    values.update(overrides)
    return AppointmentSettings(**values)


def available_times(slots):
    return [s["time"] for s in slots if s["available"]]


class TestBookedSlots:
    def test_long_booking_covers_every_started_half_hour(self):
        assert booked_slots([(at(9), 75)]) == ["09:00", "09:30", "10:00"]

    def test_exact_multiple_does_not_spill_over(self):
        assert booked_slots([(at(9), 60)]) == ["09:00", "09:30"]

    def test_missing_duration_defaults_to_half_hour(self):
        assert booked_slots([(at(14, 30), None)]) == ["14:30"]
        assert booked_slots([(at(14, 30), 0)]) == ["14:30"]

    def test_overlapping_bookings_are_deduplicated(self):
        slots = booked_slots([(at(9), 60), (at(9, 30), 30), (at(11), 30)])
        assert slots == ["09:00", "09:30", "11:00"]

    def test_same_input_gives_same_output(self):
        bookings = [(at(10), 45), (at(9), 30)]
        assert booked_slots(bookings) == booked_slots(bookings) == ["10:00", "10:30", "09:00"]

    def test_empty(self):
        assert booked_slots([]) == []


def test_day_bounds_cover_whole_day():
    start, end = day_bounds(DAY)
    assert start == datetime(2030, 3, 4, 0, 0, 0)
    assert end == datetime(2030, 3, 4, 23, 59, 59)


class TestBuildDaySlots:
    def test_grid_follows_slot_duration(self):
        slots = build_day_slots(DAY, "09:00", "12:00", settings(), 60, [], [], DAY_BEFORE)
        assert slots == [
            {"time": "09:00", "available": True},
            {"time": "10:00", "available": True},
            {"time": "11:00", "available": True},
        ]

    def test_half_hour_grid(self):
        slots = build_day_slots(
            DAY, "09:00", "10:30", settings(slotDuration=30), 30, [], [], DAY_BEFORE
        )
        assert [s["time"] for s in slots] == ["09:00", "09:30", "10:00"]

    def test_existing_booking_blocks_overlapping_slots(self):
        slots = build_day_slots(DAY, "09:00", "13:00", settings(), 90, [at(10)], [], DAY_BEFORE)
        assert available_times(slots) == ["09:00", "12:00"]

    def test_booking_ending_at_slot_start_does_not_block(self):
        slots = build_day_slots(DAY, "09:00", "11:00", settings(), 60, [at(9)], [], DAY_BEFORE)
        assert available_times(slots) == ["10:00"]

    def test_started_slots_are_unavailable(self):
        now = at(10, 30)
        slots = build_day_slots(DAY, "09:00", "12:00", settings(), 60, [], [], now)
        assert available_times(slots) == ["11:00"]

    def test_same_day_booking_disallowed(self):
        now = at(6)
        slots = build_day_slots(
            DAY, "09:00", "12:00", settings(allowSameDayBooking=False), 60, [], [], now
        )
        assert available_times(slots) == []

    def test_minimum_advance_booking(self):
        now = at(8, 30)
        slots = build_day_slots(
            DAY, "09:00", "12:00", settings(minAdvanceBooking=2), 60, [], [], now
        )
        assert available_times(slots) == ["11:00"]

    def test_partial_leave_blocks_covered_slots(self):
        leave = SimpleNamespace(type=LeaveType.PARTIAL, start_time="10:00", end_time="11:00")
        slots = build_day_slots(DAY, "09:00", "12:00", settings(), 60, [], [leave], DAY_BEFORE)
        assert available_times(slots) == ["09:00", "11:00"]

    def test_full_day_leave_blocks_everything(self):
        leave = SimpleNamespace(type=LeaveType.FULL_DAY, start_time=None, end_time=None)
        slots = build_day_slots(DAY, "09:00", "12:00", settings(), 60, [], [leave], DAY_BEFORE)
        assert len(slots) == 3
        assert available_times(slots) == []

    def test_closing_time_is_exclusive(self):
        slots = build_day_slots(DAY, "09:00", "09:00", settings(), 60, [], [], DAY_BEFORE)
        assert slots == []


class TestOverlap:
    @pytest.mark.parametrize(
        "start, end, expected",
        [
            (at(9, 30), at(10, 0), True),
            (at(8, 30), at(9, 30), True),
            (at(9, 0), at(12, 0), True),
            (at(10, 30), at(11, 0), False),
            (at(8, 0), at(9, 0), False),
        ],
    )
    def test_against_a_90_minute_booking(self, start, end, expected):
        existing_end = booking_end(at(9), 90)
        assert overlaps(at(9), existing_end, start, end) is expected

    def test_missing_duration_counts_as_30_minutes(self):
        assert booking_end(at(9), None) == at(9, 30)
        assert booking_end(at(9), 0) == at(9, 30)
