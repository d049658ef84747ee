"""Business domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import ServiceType
from ...shared.validators import validate_email, validate_hhmm, validate_tr_phone


class BusinessCreate(BaseModel):
    """Schema for registering a new business"""

    name: str = Field(..., min_length=2)
    # Legacy free-text category code
    category: Optional[str] = None
    categoryId: Optional[int] = None
    subcategoryId: Optional[int] = None
    province: Optional[str] = None
    district: Optional[str] = None
    phone: str
    email: str
    address: str = Field(..., min_length=10)
    description: Optional[str] = None
    serviceType: ServiceType = ServiceType.APPOINTMENT

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_tr_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v):
        if v:
            return v.strip().upper()
        return v


class BusinessResponse(BaseModel):
    id: int
    name: str
    slug: str
    category: Optional[str]
    categoryId: Optional[int] = None
    subcategoryId: Optional[int] = None
    province: Optional[str] = None
    district: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    serviceType: ServiceType = ServiceType.APPOINTMENT
    isActive: bool = True
    createdAt: Optional[datetime] = None


class WorkingHourItem(BaseModel):
    dayOfWeek: int = Field(..., ge=0, le=6)
    isOpen: bool
    openTime: str
    closeTime: str

    @field_validator("openTime", "closeTime")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v)


class AppointmentSettings(BaseModel):
    """Booking rules used when generating bookable slots"""

    slotDuration: int = 60  # minutes
    bufferTime: int = 15  # minutes
    maxAdvanceBooking: int = 30  # days
    minAdvanceBooking: int = 2  # hours
    allowSameDayBooking: bool = True
    maxDailyAppointments: int = 0  # 0 = unlimited
    autoConfirmation: bool = True


class WorkingHoursUpdate(BaseModel):
    # Raw dicts: malformed entries are dropped rather than rejecting the whole week
    workingHours: list[dict] = []
    appointmentSettings: Optional[AppointmentSettings] = None


class WorkingHoursResponse(BaseModel):
    workingHours: list[WorkingHourItem]
    appointmentSettings: AppointmentSettings


class SubcategoryResponse(BaseModel):
    id: int
    categoryId: int
    name: str
    slug: str
    orderIndex: int


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    orderIndex: int
    subcategories: Optional[list[SubcategoryResponse]] = None
