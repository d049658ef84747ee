"""Service request domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import ResponseStatus, ServiceRequestStatus, Urgency
from ...shared.validators import validate_hhmm


class ServiceRequestCreate(BaseModel):
    """Customer request for quotes; required fields are checked by the service"""

    customerName: Optional[str] = None
    customerPhone: Optional[str] = None
    customerEmail: Optional[str] = None
    categoryId: Optional[int] = None
    subcategoryId: Optional[int] = None
    serviceName: Optional[str] = None
    serviceDetails: Optional[str] = None
    budget: Optional[float] = None
    urgency: Urgency = Urgency.NORMAL
    province: Optional[str] = None
    district: Optional[str] = None
    address: Optional[str] = None
    preferredDate: Optional[datetime] = None
    preferredTime: Optional[str] = None
    flexibleTiming: bool = True

    @field_validator("preferredTime")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v)


class ServiceRequestUpdate(BaseModel):
    status: ServiceRequestStatus


class ResponseCreate(BaseModel):
    businessId: int
    message: Optional[str] = None
    proposedPrice: Optional[float] = None
    proposedDate: Optional[datetime] = None
    proposedTime: Optional[str] = None
    availability: Optional[str] = None


class MyRequestAction(BaseModel):
    action: str
    responseId: Optional[int] = None


class BusinessSummary(BaseModel):
    id: int
    name: str
    slug: str
    phone: Optional[str] = None
    email: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    address: Optional[str] = None
    isPremium: bool = False


class ResponseOut(BaseModel):
    id: int
    serviceRequestId: int
    businessId: int
    status: ResponseStatus
    message: str
    proposedPrice: Optional[float] = None
    proposedDate: Optional[datetime] = None
    proposedTime: Optional[str] = None
    availability: Optional[str] = None
    customerViewed: bool = False
    createdAt: Optional[datetime] = None
    business: Optional[BusinessSummary] = None


class ServiceRequestOut(BaseModel):
    id: int
    customerName: str
    customerPhone: str
    customerEmail: Optional[str] = None
    categoryId: Optional[int] = None
    subcategoryId: Optional[int] = None
    serviceName: str
    serviceDetails: Optional[str] = None
    budget: Optional[float] = None
    urgency: Urgency
    province: Optional[str] = None
    district: Optional[str] = None
    address: Optional[str] = None
    preferredDate: Optional[datetime] = None
    preferredTime: Optional[str] = None
    flexibleTiming: bool = True
    status: ServiceRequestStatus
    expiresAt: datetime
    createdAt: Optional[datetime] = None
    requesterName: Optional[str] = None
    responses: list[ResponseOut] = []
