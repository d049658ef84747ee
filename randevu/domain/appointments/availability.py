"""
Slot arithmetic for appointment availability.

Two views of a day are computed here:

* ``booked_slots`` - the fixed 30-minute grid cells occupied by existing
  bookings, used by booking widgets to grey out times.
* ``build_day_slots`` - the bookable grid of a working day, stepped by the
  business's configured ``slotDuration`` and filtered by its booking rules.

Both are pure; callers load appointments, hours and leaves from the database.
"""

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from typing import Optional

from ...models import LeaveType

OCCUPANCY_SLOT_MINUTES = 30
DEFAULT_DURATION_MINUTES = 30


def booking_end(start: datetime, duration: Optional[int]) -> datetime:
    return start + timedelta(minutes=duration or DEFAULT_DURATION_MINUTES)


def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Whether half-open intervals ``[start_a, end_a)`` and ``[start_b, end_b)`` intersect"""
    return start_a < end_b and end_a > start_b


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last second of a calendar day (inclusive range)"""
    return datetime.combine(day, time.min), datetime.combine(day, time(23, 59, 59))


def booked_slots(bookings: Iterable[tuple[datetime, Optional[int]]]) -> list[str]:
    """
    Expand bookings into the ``HH:MM`` grid cells they occupy.

    Args:
        bookings: ``(start, duration_minutes)`` pairs. A missing or zero
            duration counts as ``DEFAULT_DURATION_MINUTES``.

    Returns:
        Distinct labels in first-seen order. A booking occupies its start
        plus every ``start + k*30`` with ``k*30 < duration``.
    """
    seen = set()
    slots = []
    for start, duration in bookings:
        duration = duration or DEFAULT_DURATION_MINUTES
        offset = 0
        while offset < duration:
            label = (start + timedelta(minutes=offset)).strftime("%H:%M")
            if label not in seen:
                seen.add(label)
                slots.append(label)
            offset += OCCUPANCY_SLOT_MINUTES
    return slots


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def is_on_leave(slot_minutes: int, leaves) -> bool:
    """Whether any approved leave covers the slot start"""
    for leave in leaves:
        if leave.type in (LeaveType.FULL_DAY, LeaveType.MULTI_DAY):
            return True
        if leave.type == LeaveType.PARTIAL and leave.start_time and leave.end_time:
            if _minutes(leave.start_time) <= slot_minutes < _minutes(leave.end_time):
                return True
    return False


def build_day_slots(
    day: date,
    open_time: str,
    close_time: str,
    settings,
    service_duration: int,
    existing_starts: Iterable[datetime],
    leaves,
    now: datetime,
) -> list[dict]:
    """
    Walk ``[open_time, close_time)`` in steps of ``settings.slotDuration``.

    A slot is unavailable when it overlaps an existing booking (each booking
    assumed to last ``service_duration``), has already started, is same-day
    while same-day booking is off, starts sooner than
    ``settings.minAdvanceBooking`` hours from ``now``, or falls in a leave.
    """
    step = settings.slotDuration
    if step <= 0:
        return []

    booking_length = timedelta(minutes=service_duration or DEFAULT_DURATION_MINUTES)
    bookings = [(start, start + booking_length) for start in existing_starts]
    min_advance = timedelta(hours=settings.minAdvanceBooking)
    same_day_blocked = day == now.date() and not settings.allowSameDayBooking
    leaves = list(leaves)

    slots = []
    current = _minutes(open_time)
    close = _minutes(close_time)
    day_start = datetime.combine(day, time.min)
    while current < close:
        slot_start = day_start + timedelta(minutes=current)
        slot_end = slot_start + timedelta(minutes=step)

        conflict = any(slot_start < end and start < slot_end for start, end in bookings)
        in_past = slot_start <= now
        too_soon = slot_start - now < min_advance

        slots.append(
            {
                "time": slot_start.strftime("%H:%M"),
                "available": not (
                    conflict
                    or in_past
                    or same_day_blocked
                    or too_soon
                    or is_on_leave(current, leaves)
                ),
            }
        )
        current += step
    return slots
