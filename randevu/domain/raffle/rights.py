"""
Monthly raffle arithmetic.

Every COMPLETED appointment in a calendar month earns its customer one right
for that month's draw. Rights spent on participations are subtracted; the
draw happens on the last day of the month.
"""

import calendar
from datetime import date, datetime, time


def month_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last instant of the month containing ``day``"""
    return (
        datetime.combine(day.replace(day=1), time.min),
        datetime.combine(draw_date(day), time.max),
    )


def draw_date(day: date) -> date:
    """Last day of the month containing ``day``"""
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def available_rights(total: int, used: int) -> int:
    return max(0, total - used)
