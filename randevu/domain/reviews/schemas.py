"""Review domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    appointmentId: int
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None
    customerName: Optional[str] = None
    customerPhone: Optional[str] = None
    customerEmail: Optional[str] = None


class ReviewUpdate(BaseModel):
    isApproved: Optional[bool] = None
    isVisible: Optional[bool] = None


class ReviewResponse(BaseModel):
    id: int
    appointmentId: int
    businessId: int
    rating: int
    comment: str
    customerName: str
    isApproved: bool
    isVisible: bool
    serviceName: Optional[str] = None
    staffName: Optional[str] = None
    createdAt: Optional[datetime] = None
