"""Inquiry router - FastAPI endpoints for consultation and project requests"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import ConsultationRequest, InquiryStatus, ProjectRequest, User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    ConsultationRequestCreate,
    ConsultationRequestResponse,
    ContactInquiryCreate,
    InquiryItem,
    InquiryStatusUpdate,
    InquiryType,
    ProjectRequestCreate,
    ProjectRequestReply,
    ProjectRequestResponse,
)
from .service import InquiryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Inquiries"])

limit_inquiries = create_rate_limiter(limit=10, window_seconds=3600, key_prefix="inquiry")


def get_inquiry_service(db: Session = Depends(get_db)) -> InquiryService:
    """Dependency injection for InquiryService"""
    return InquiryService(db)


def _consultation_response(c: ConsultationRequest) -> ConsultationRequestResponse:
    return ConsultationRequestResponse(
        id=c.id,
        businessId=c.business_id,
        customerName=c.customer_name,
        customerPhone=c.customer_phone,
        customerEmail=c.customer_email,
        consultationTopic=c.consultation_topic,
        preferredDateTime=c.preferred_datetime,
        meetingType=c.meeting_type,
        notes=c.notes,
        status=c.status,
        businessResponse=c.business_response,
        proposedDateTime=c.proposed_datetime,
        responseDate=c.response_date,
        createdAt=c.created_at,
    )


def _project_response(p: ProjectRequest) -> ProjectRequestResponse:
    return ProjectRequestResponse(
        id=p.id,
        businessId=p.business_id,
        customerName=p.customer_name,
        customerPhone=p.customer_phone,
        customerEmail=p.customer_email,
        projectDescription=p.project_description,
        estimatedBudget=p.estimated_budget,
        preferredDate=p.preferred_date,
        location=p.location,
        notes=p.notes,
        status=p.status,
        businessResponse=p.business_response,
        estimatedPrice=p.estimated_price,
        responseDate=p.response_date,
        createdAt=p.created_at,
    )


def _inquiry_item(kind: InquiryType, inquiry) -> InquiryItem:
    common = {
        "id": inquiry.id,
        "type": kind,
        "customerName": inquiry.customer_name,
        "customerPhone": inquiry.customer_phone,
        "customerEmail": inquiry.customer_email,
        "status": inquiry.status,
        "businessResponse": inquiry.business_response,
        "createdAt": inquiry.created_at,
    }
    if kind == InquiryType.CONSULTATION:
        return InquiryItem(
            title=inquiry.consultation_topic,
            description=inquiry.notes or "",
            date=inquiry.preferred_datetime,
            meetingType=inquiry.meeting_type,
            **common,
        )
    return InquiryItem(
        title="Proje Talebi",
        description=inquiry.project_description,
        date=inquiry.preferred_date,
        budget=inquiry.estimated_budget,
        location=inquiry.location,
        estimatedPrice=inquiry.estimated_price,
        **common,
    )


# ============================================================================
# CONSULTATION REQUESTS
# ============================================================================


@router.post("/consultation-requests")
async def create_consultation_request(
    data: ConsultationRequestCreate,
    service: InquiryService = Depends(get_inquiry_service),
    _: None = Depends(limit_inquiries),
):
    consultation = service.create_consultation(data)
    return {
        "success": True,
        "consultationRequest": _consultation_response(consultation),
        "message": "Danışmanlık talebiniz başarıyla gönderildi. "
        "İşletme sahibi en kısa sürede size dönüş yapacaktır.",
    }


@router.get("/consultation-requests")
async def get_consultation_requests(
    businessId: Optional[int] = Query(None),
    status: Optional[InquiryStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    service: InquiryService = Depends(get_inquiry_service),
):
    consultations = service.get_consultations(businessId, status, current_user)
    return {
        "success": True,
        "consultationRequests": [_consultation_response(c) for c in consultations],
    }


# ============================================================================
# PROJECT REQUESTS
# ============================================================================


@router.post("/project-requests")
async def create_project_request(
    data: ProjectRequestCreate,
    service: InquiryService = Depends(get_inquiry_service),
    _: None = Depends(limit_inquiries),
):
    project = service.create_project(data)
    return {
        "success": True,
        "projectRequest": _project_response(project),
        "message": "Proje talebiniz başarıyla gönderildi. "
        "İşletme sahibi en kısa sürede size dönüş yapacaktır.",
    }


@router.get("/project-requests")
async def get_project_requests(
    businessId: Optional[int] = Query(None),
    status: Optional[InquiryStatus] = Query(None),
    current_user: User = Depends(get_current_user),
    service: InquiryService = Depends(get_inquiry_service),
):
    projects = service.get_projects(businessId, status, current_user)
    return {"success": True, "projectRequests": [_project_response(p) for p in projects]}


@router.get("/project-requests/{project_id}")
async def get_project_request(
    project_id: int,
    service: InquiryService = Depends(get_inquiry_service),
):
    return {"success": True, "projectRequest": _project_response(service.get_project(project_id))}


@router.put("/project-requests/{project_id}")
async def reply_to_project_request(
    project_id: int,
    data: ProjectRequestReply,
    current_user: User = Depends(get_current_user),
    service: InquiryService = Depends(get_inquiry_service),
):
    """Owner's answer and price estimate for a project request"""
    project = service.reply_to_project(project_id, data, current_user)
    return {
        "success": True,
        "projectRequest": _project_response(project),
        "message": "Yanıt başarıyla gönderildi",
    }


# ============================================================================
# COMBINED INBOX
# ============================================================================


@router.post("/inquiries/contact")
async def create_contact_inquiry(
    data: ContactInquiryCreate,
    service: InquiryService = Depends(get_inquiry_service),
    _: None = Depends(limit_inquiries),
):
    inquiry = service.create_contact_inquiry(data)
    return {
        "success": True,
        "inquiry": {
            "id": inquiry.id,
            "subject": inquiry.consultation_topic,
            "contactName": inquiry.customer_name,
            "status": inquiry.status,
        },
    }


@router.get("/inquiries")
async def get_inquiries(
    businessId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: InquiryService = Depends(get_inquiry_service),
):
    """Consultation and project requests of a business, newest first"""
    inquiries = service.get_inquiries(businessId, current_user)
    return {"success": True, "inquiries": [_inquiry_item(kind, i) for kind, i in inquiries]}


@router.patch("/inquiries")
async def update_inquiry_status(
    data: InquiryStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: InquiryService = Depends(get_inquiry_service),
):
    kind, inquiry = service.update_status(data, current_user)
    return {"success": True, "inquiry": _inquiry_item(kind, inquiry)}


__all__ = ["router"]
