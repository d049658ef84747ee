"""Day-over-day trend figures for the dashboard"""

import math
from dataclasses import dataclass
from typing import Union

from ...models import AppointmentStatus

Number = Union[int, float]


def calculate_trend(current: Number, previous: Number) -> str:
    """
    Percentage change label, e.g. ``"+25%"`` or ``"-50%"``.

    With no previous value any growth reads ``"+100%"`` and no growth ``"0%"``.
    Halves round up, as in ``"+13%"`` for 12.5.
    """
    if previous == 0:
        return "+100%" if current > 0 else "0%"

    percentage = (current - previous) / previous * 100
    sign = "+" if percentage >= 0 else ""
    return f"{sign}{math.floor(percentage + 0.5)}%"


@dataclass
class DayMetrics:
    appointments: int = 0
    completed: int = 0
    revenue: float = 0.0
    customers: int = 0

    @property
    def completion_rate(self) -> float:
        if not self.appointments:
            return 0.0
        return self.completed / self.appointments * 100

    @classmethod
    def from_appointments(cls, appointments) -> "DayMetrics":
        """Aggregate one day's appointments; revenue counts COMPLETED only"""
        completed = [a for a in appointments if a.status == AppointmentStatus.COMPLETED]
        return cls(
            appointments=len(appointments),
            completed=len(completed),
            revenue=sum((a.service.price or 0) if a.service else 0 for a in completed),
            customers=len({a.customer_email for a in appointments}),
        )


def build_trends(today: DayMetrics, yesterday: DayMetrics) -> dict:
    return {
        "appointments": calculate_trend(today.appointments, yesterday.appointments),
        "revenue": calculate_trend(today.revenue, yesterday.revenue),
        "customers": calculate_trend(today.customers, yesterday.customers),
        "completion": calculate_trend(today.completion_rate, yesterday.completion_rate),
    }
