"""Inquiry domain schemas"""

import enum
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...models import InquiryStatus, MeetingType


class InquiryType(str, enum.Enum):
    CONSULTATION = "consultation"
    PROJECT = "project"


class ConsultationRequestCreate(BaseModel):
    # Required fields are checked in the service so a missing one is a 400
    businessId: Optional[int] = None
    customerName: Optional[str] = None
    customerPhone: Optional[str] = None
    customerEmail: Optional[str] = None
    consultationTopic: Optional[str] = None
    preferredDateTime: Optional[datetime] = None
    meetingType: MeetingType = MeetingType.FACE_TO_FACE
    notes: Optional[str] = None


class ContactInquiryCreate(BaseModel):
    businessId: Optional[int] = None
    inquiryType: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    contactName: Optional[str] = None
    contactPhone: Optional[str] = None
    contactEmail: Optional[str] = None


class ProjectRequestCreate(BaseModel):
    businessId: Optional[int] = None
    customerName: Optional[str] = None
    customerPhone: Optional[str] = None
    customerEmail: Optional[str] = None
    projectDescription: Optional[str] = None
    estimatedBudget: Optional[float] = None
    preferredDate: Optional[datetime] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class ProjectRequestReply(BaseModel):
    businessResponse: Optional[str] = None
    estimatedPrice: Optional[float] = None
    status: InquiryStatus = InquiryStatus.RESPONDED


class InquiryStatusUpdate(BaseModel):
    inquiryId: int
    type: InquiryType
    status: InquiryStatus
    businessResponse: Optional[str] = None


class ConsultationRequestResponse(BaseModel):
    id: int
    businessId: int
    customerName: str
    customerPhone: str
    customerEmail: Optional[str] = None
    consultationTopic: str
    preferredDateTime: Optional[datetime] = None
    meetingType: MeetingType
    notes: Optional[str] = None
    status: InquiryStatus
    businessResponse: Optional[str] = None
    proposedDateTime: Optional[datetime] = None
    responseDate: Optional[datetime] = None
    createdAt: Optional[datetime] = None


class ProjectRequestResponse(BaseModel):
    id: int
    businessId: int
    customerName: str
    customerPhone: str
    customerEmail: Optional[str] = None
    projectDescription: str
    estimatedBudget: Optional[float] = None
    preferredDate: Optional[datetime] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: InquiryStatus
    businessResponse: Optional[str] = None
    estimatedPrice: Optional[float] = None
    responseDate: Optional[datetime] = None
    createdAt: Optional[datetime] = None


class InquiryItem(BaseModel):
    """Consultation or project request in one calendar-friendly shape"""

    id: int
    type: InquiryType
    title: str
    description: str
    customerName: str
    customerPhone: str
    customerEmail: Optional[str] = None
    date: Optional[datetime] = None
    status: InquiryStatus
    businessResponse: Optional[str] = None
    meetingType: Optional[MeetingType] = None
    budget: Optional[float] = None
    location: Optional[str] = None
    estimatedPrice: Optional[float] = None
    createdAt: Optional[datetime] = None
