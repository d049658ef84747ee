"""Service request router - FastAPI endpoints for requests, offers and matching"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_business_owner, get_current_user, get_optional_user
from ...database import get_db
from ...models import (
    Business,
    ServiceRequest,
    ServiceRequestResponse,
    ServiceRequestStatus,
    Urgency,
    User,
)
from ...rate_limiter import create_rate_limiter
from ...shared.pagination import pagination
from .matching import MatchMode
from .schemas import (
    BusinessSummary,
    MyRequestAction,
    ResponseCreate,
    ResponseOut,
    ServiceRequestCreate,
    ServiceRequestOut,
    ServiceRequestUpdate,
)
from .service import ServiceRequestService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Service Requests"])

limit_requests = create_rate_limiter(limit=10, window_seconds=3600, key_prefix="service_request")


def get_service_request_service(db: Session = Depends(get_db)) -> ServiceRequestService:
    """Dependency injection for ServiceRequestService"""
    return ServiceRequestService(db)


def _business_summary(b: Business) -> BusinessSummary:
    return BusinessSummary(
        id=b.id,
        name=b.name,
        slug=b.slug,
        phone=b.phone,
        email=b.email,
        province=b.province,
        district=b.district,
        address=b.address,
        isPremium=b.is_premium,
    )


def _response_out(r: ServiceRequestResponse, with_business: bool = False) -> ResponseOut:
    return ResponseOut(
        id=r.id,
        serviceRequestId=r.service_request_id,
        businessId=r.business_id,
        status=r.status,
        message=r.message,
        proposedPrice=r.proposed_price,
        proposedDate=r.proposed_date,
        proposedTime=r.proposed_time,
        availability=r.availability,
        customerViewed=r.customer_viewed,
        createdAt=r.created_at,
        business=_business_summary(r.business) if with_business and r.business else None,
    )


def _request_out(sr: ServiceRequest, with_business: bool = False) -> ServiceRequestOut:
    return ServiceRequestOut(
        id=sr.id,
        customerName=sr.customer_name,
        customerPhone=sr.customer_phone,
        customerEmail=sr.customer_email,
        categoryId=sr.category_id,
        subcategoryId=sr.subcategory_id,
        serviceName=sr.service_name,
        serviceDetails=sr.service_details,
        budget=sr.budget,
        urgency=sr.urgency,
        province=sr.province,
        district=sr.district,
        address=sr.address,
        preferredDate=sr.preferred_date,
        preferredTime=sr.preferred_time,
        flexibleTiming=sr.flexible_timing,
        status=sr.status,
        expiresAt=sr.expires_at,
        createdAt=sr.created_at,
        requesterName=sr.user.full_name if sr.user else None,
        responses=[_response_out(r, with_business) for r in sr.responses],
    )


# ============================================================================
# PUBLIC REQUESTS
# ============================================================================


@router.post("/service-requests")
async def create_service_request(
    data: ServiceRequestCreate,
    current_user: Optional[User] = Depends(get_optional_user),
    service: ServiceRequestService = Depends(get_service_request_service),
    _: None = Depends(limit_requests),
):
    """Open a request for quotes (guests allowed)"""
    service_request = service.create_request(data, current_user)
    return {
        "success": True,
        "message": "Servis talebiniz başarıyla oluşturuldu",
        "serviceRequest": _request_out(service_request),
    }


@router.get("/service-requests")
async def browse_service_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[ServiceRequestStatus] = Query(None),
    urgency: Optional[Urgency] = Query(None),
    province: Optional[str] = Query(None),
    district: Optional[str] = Query(None),
    categoryId: Optional[int] = Query(None),
    subcategoryId: Optional[int] = Query(None),
    service: ServiceRequestService = Depends(get_service_request_service),
):
    """Unexpired requests, most urgent and newest first"""
    requests, total = service.browse_requests(
        page,
        limit,
        status=status,
        urgency=urgency,
        province=province,
        district=district,
        category_id=categoryId,
        subcategory_id=subcategoryId,
    )
    return {
        "success": True,
        "serviceRequests": [_request_out(r) for r in requests],
        "pagination": pagination(page, limit, total),
    }


@router.get("/service-requests/{request_id}")
async def get_service_request(
    request_id: int,
    service: ServiceRequestService = Depends(get_service_request_service),
):
    return {"success": True, "serviceRequest": _request_out(service.get_request(request_id), True)}


@router.put("/service-requests/{request_id}")
async def update_service_request(
    request_id: int,
    data: ServiceRequestUpdate,
    current_user: User = Depends(get_current_user),
    service: ServiceRequestService = Depends(get_service_request_service),
):
    service_request = service.update_status(request_id, data.status, current_user)
    return {
        "success": True,
        "message": "Servis talebi güncellendi",
        "serviceRequest": _request_out(service_request),
    }


# ============================================================================
# OFFERS
# ============================================================================


@router.get("/service-requests/{request_id}/responses")
async def get_responses(
    request_id: int,
    service: ServiceRequestService = Depends(get_service_request_service),
):
    """Offers on a request, premium businesses first"""
    responses = service.get_responses(request_id)
    return {"success": True, "responses": [_response_out(r, True) for r in responses]}


@router.post("/service-requests/{request_id}/responses")
async def create_response(
    request_id: int,
    data: ResponseCreate,
    current_user: User = Depends(get_current_user),
    service: ServiceRequestService = Depends(get_service_request_service),
):
    response = service.create_response(request_id, data, current_user)
    return {
        "success": True,
        "message": "Cevabınız başarıyla gönderildi",
        "response": _response_out(response, True),
    }


# ============================================================================
# BUSINESS DASHBOARD
# ============================================================================


@router.get("/dashboard/service-requests")
async def get_dashboard_service_requests(
    filter: MatchMode = Query(MatchMode.ACTIVE),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    business: Business = Depends(get_business_owner),
    service: ServiceRequestService = Depends(get_service_request_service),
):
    """Requests matching the caller's business in the selected view"""
    requests, total, limit = service.get_dashboard_requests(business, filter, page, limit)
    return {
        "success": True,
        "serviceRequests": [_request_out(r) for r in requests],
        "businessInfo": {
            "id": business.id,
            "categoryId": business.category_id,
            "subcategoryId": business.subcategory_id,
            "location": {"province": business.province, "district": business.district},
        },
        "filter": filter.value,
        "pagination": pagination(page, limit, total),
    }


# ============================================================================
# CUSTOMER REQUESTS
# ============================================================================


@router.get("/my-requests")
async def get_my_requests(
    phone: Optional[str] = Query(None),
    email: Optional[str] = Query(None),
    current_user: Optional[User] = Depends(get_optional_user),
    service: ServiceRequestService = Depends(get_service_request_service),
):
    requests = service.get_my_requests(current_user, phone, email)
    return {
        "success": True,
        "requests": [_request_out(r, True) for r in requests],
        "total": len(requests),
    }


@router.put("/my-requests/{request_id}")
async def update_my_request(
    request_id: int,
    data: MyRequestAction,
    service: ServiceRequestService = Depends(get_service_request_service),
):
    """Accept an offer or mark all offers as viewed"""
    message = service.handle_action(request_id, data.action, data.responseId)
    return {"success": True, "message": message}


__all__ = ["router"]
