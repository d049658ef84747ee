"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import AppointmentStatus
from ...shared.validators import parse_day, validate_email, validate_hhmm


class AppointmentCreate(BaseModel):
    """Booking request from the public booking page or the dashboard"""

    businessId: int
    serviceId: int
    staffId: Optional[int] = None
    appointmentDate: str  # YYYY-MM-DD
    appointmentTime: str  # HH:MM
    notes: Optional[str] = None
    # Required for guests, optional for signed-in users
    customerName: Optional[str] = None
    customerPhone: Optional[str] = None
    customerEmail: Optional[str] = None

    @field_validator("appointmentDate")
    @classmethod
    def validate_date(cls, v):
        parse_day(v)
        return v

    @field_validator("appointmentTime")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v)

    @field_validator("customerEmail")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @property
    def start(self) -> datetime:
        return datetime.strptime(f"{self.appointmentDate} {self.appointmentTime}", "%Y-%m-%d %H:%M")


class AppointmentUpdate(BaseModel):
    """Dashboard edit of an existing appointment"""

    businessId: int
    customerName: Optional[str] = Field(None, min_length=2)
    customerPhone: Optional[str] = Field(None, min_length=10)
    customerEmail: Optional[str] = None
    serviceId: Optional[int] = None
    staffId: Optional[int] = None
    date: Optional[datetime] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None

    @field_validator("customerEmail")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)


class ServiceSummary(BaseModel):
    id: int
    name: str
    price: float
    duration: int


class StaffSummary(BaseModel):
    id: int
    name: str
    specialty: Optional[str] = None


class AppointmentResponse(BaseModel):
    id: int
    businessId: int
    businessName: Optional[str] = None
    date: datetime
    status: AppointmentStatus
    customerName: str
    customerPhone: Optional[str] = None
    customerEmail: Optional[str] = None
    notes: Optional[str] = None
    service: Optional[ServiceSummary] = None
    staff: Optional[StaffSummary] = None
    createdAt: Optional[datetime] = None


class AvailabilityResponse(BaseModel):
    bookedSlots: list[str]
    totalAppointments: int


class SlotResponse(BaseModel):
    time: str
    available: bool


class AvailableSlotsResponse(BaseModel):
    slots: list[SlotResponse]
