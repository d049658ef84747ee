"""Catalog domain schemas - services, staff and staff leave"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...models import LeaveStatus, LeaveType
from ...shared.validators import validate_email, validate_hhmm, validate_tr_phone

# ============================================================================
# SERVICES
# ============================================================================


class ServiceCreate(BaseModel):
    businessId: Optional[int] = None
    name: str = Field(..., min_length=2)
    description: Optional[str] = None
    category: Optional[str] = None
    price: float = Field(..., ge=0)
    duration: int = Field(..., ge=5)  # minutes


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    description: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=5)
    isActive: Optional[bool] = None


class ServiceResponse(BaseModel):
    id: int
    businessId: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: float
    duration: int
    isActive: bool
    createdAt: Optional[datetime] = None


# ============================================================================
# STAFF
# ============================================================================


class StaffCreate(BaseModel):
    businessId: Optional[int] = None
    name: str = Field(..., min_length=2)
    phone: Optional[str] = None
    email: Optional[str] = None
    specialty: Optional[str] = None
    experience: Optional[int] = Field(None, ge=0)
    bio: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_tr_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)


class StaffUpdate(StaffCreate):
    name: Optional[str] = Field(None, min_length=2)
    isActive: Optional[bool] = None


class StaffResponse(BaseModel):
    id: int
    businessId: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    specialty: Optional[str] = None
    experience: Optional[int] = None
    bio: Optional[str] = None
    isActive: bool
    todayAppointments: int = 0


# ============================================================================
# STAFF LEAVE
# ============================================================================


class StaffLeaveCreate(BaseModel):
    staffId: int
    startDate: date
    endDate: Optional[date] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    type: LeaveType
    reason: str = Field(..., min_length=1)
    status: LeaveStatus = LeaveStatus.APPROVED
    notes: Optional[str] = None

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v)

    @model_validator(mode="after")
    def check_range(self):
        if self.endDate is None:
            self.endDate = self.startDate
        if self.endDate < self.startDate:
            raise ValueError("Bitiş tarihi başlangıç tarihinden önce olamaz")
        if self.type == LeaveType.PARTIAL:
            if not self.startTime or not self.endTime:
                raise ValueError("Kısmi izin için başlangıç ve bitiş saati gerekli")
            if self.endTime <= self.startTime:
                raise ValueError("Bitiş saati başlangıç saatinden sonra olmalı")
        else:
            self.startTime = None
            self.endTime = None
        return self


class StaffLeaveResponse(BaseModel):
    id: int
    staffId: int
    staffName: Optional[str] = None
    startDate: date
    endDate: date
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    type: LeaveType
    reason: str
    status: LeaveStatus
    notes: Optional[str] = None
