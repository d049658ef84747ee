"""Review router - FastAPI endpoints for customer reviews"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Review, User
from ...rate_limiter import create_rate_limiter
from ...shared.pagination import pagination
from .schemas import ReviewCreate, ReviewResponse, ReviewUpdate
from .service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])

limit_reviews = create_rate_limiter(limit=10, window_seconds=3600, key_prefix="review")


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db)


def _review_response(r: Review) -> ReviewResponse:
    appointment = r.appointment
    return ReviewResponse(
        id=r.id,
        appointmentId=r.appointment_id,
        businessId=r.business_id,
        rating=r.rating,
        comment=r.comment,
        customerName=r.customer_name,
        isApproved=r.is_approved,
        isVisible=r.is_visible,
        serviceName=appointment.service.name if appointment and appointment.service else None,
        staffName=appointment.staff.name if appointment and appointment.staff else None,
        createdAt=r.created_at,
    )


@router.post("", response_model=ReviewResponse, status_code=201)
async def create_review(
    data: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
    _: None = Depends(limit_reviews),
):
    """Review a completed appointment"""
    return _review_response(service.create_review(data))


@router.get("")
async def get_reviews(
    businessId: Optional[int] = Query(None),
    approved: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: ReviewService = Depends(get_review_service),
):
    """Visible reviews of a business, newest first"""
    reviews, total = service.get_reviews(businessId, page, limit, approved)
    return {
        "reviews": [_review_response(r) for r in reviews],
        "pagination": pagination(page, limit, total),
    }


@router.get("/can-review")
async def can_review(
    appointmentId: Optional[int] = Query(None),
    customerPhone: Optional[str] = Query(None),
    service: ReviewService = Depends(get_review_service),
):
    status_code, body = service.can_review(appointmentId, customerPhone)
    return JSONResponse(status_code=status_code, content=body)


@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: int,
    data: ReviewUpdate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """Approve or hide a review of one of the caller's businesses"""
    return _review_response(service.update_review(review_id, data, current_user))


@router.delete("/{review_id}")
async def delete_review(
    review_id: int,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    return service.delete_review(review_id, current_user)


__all__ = ["router"]
