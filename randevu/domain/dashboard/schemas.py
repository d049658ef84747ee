"""Dashboard schemas"""

from pydantic import BaseModel


class TrendsResponse(BaseModel):
    appointments: str
    revenue: str
    customers: str
    completion: str


class StatsResponse(BaseModel):
    date: str
    totalAppointments: int
    revenue: float
    appointmentsByStatus: dict[str, int]
    hourlyDistribution: dict[int, int]
    completedAppointments: int
