"""Business router - FastAPI endpoints for businesses, working hours and categories"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Business, Category, Subcategory, User, WorkingHour
from .schemas import (
    BusinessCreate,
    BusinessResponse,
    CategoryResponse,
    SubcategoryResponse,
    WorkingHourItem,
    WorkingHoursResponse,
    WorkingHoursUpdate,
)
from .service import BusinessService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Businesses"])


def get_business_service(db: Session = Depends(get_db)) -> BusinessService:
    """Dependency injection for BusinessService"""
    return BusinessService(db)


def _business_response(b: Business) -> BusinessResponse:
    return BusinessResponse(
        id=b.id,
        name=b.name,
        slug=b.slug,
        category=b.category,
        categoryId=b.category_id,
        subcategoryId=b.subcategory_id,
        province=b.province,
        district=b.district,
        phone=b.phone,
        email=b.email,
        address=b.address,
        description=b.description,
        serviceType=b.service_type,
        isActive=b.is_active,
        createdAt=b.created_at,
    )


def _working_hour_item(h: WorkingHour) -> WorkingHourItem:
    return WorkingHourItem(
        dayOfWeek=h.day_of_week,
        isOpen=h.is_open,
        openTime=h.open_time,
        closeTime=h.close_time,
    )


def _subcategory_response(s: Subcategory) -> SubcategoryResponse:
    return SubcategoryResponse(
        id=s.id,
        categoryId=s.category_id,
        name=s.name,
        slug=s.slug,
        orderIndex=s.order_index,
    )


def _category_response(c: Category, include_subcategories: bool) -> CategoryResponse:
    subcategories = None
    if include_subcategories:
        subcategories = [_subcategory_response(s) for s in c.subcategories if s.is_active]
    return CategoryResponse(
        id=c.id,
        name=c.name,
        slug=c.slug,
        orderIndex=c.order_index,
        subcategories=subcategories,
    )


# ============================================================================
# BUSINESSES
# ============================================================================


@router.get("/businesses", response_model=list[BusinessResponse])
async def get_businesses(
    current_user: User = Depends(get_current_user),
    service: BusinessService = Depends(get_business_service),
):
    """List the caller's businesses"""
    return [_business_response(b) for b in service.get_businesses(current_user)]


@router.post("/businesses", response_model=BusinessResponse, status_code=201)
async def create_business(
    data: BusinessCreate,
    current_user: User = Depends(get_current_user),
    service: BusinessService = Depends(get_business_service),
):
    """Register a new business for the caller"""
    return _business_response(service.create_business(data, current_user))


@router.get("/businesses/current", response_model=BusinessResponse)
async def get_current_business(
    current_user: User = Depends(get_current_user),
    service: BusinessService = Depends(get_business_service),
):
    return _business_response(service.get_current_business(current_user))


@router.get("/businesses/public/{slug}")
async def get_public_business(
    slug: str,
    service: BusinessService = Depends(get_business_service),
):
    """Public business profile with its bookable services"""
    business, services = service.get_public_business(slug)
    return {
        "business": _business_response(business),
        "services": [
            {
                "id": s.id,
                "name": s.name,
                "description": s.description,
                "price": s.price,
                "duration": s.duration,
            }
            for s in services
        ],
    }


# ============================================================================
# WORKING HOURS
# ============================================================================


@router.get("/settings/working-hours", response_model=WorkingHoursResponse)
async def get_working_hours(
    current_user: User = Depends(get_current_user),
    service: BusinessService = Depends(get_business_service),
):
    hours, settings = service.get_working_hours(current_user)
    return WorkingHoursResponse(
        workingHours=[_working_hour_item(h) for h in hours],
        appointmentSettings=settings,
    )


@router.put("/settings/working-hours", response_model=WorkingHoursResponse)
async def update_working_hours(
    data: WorkingHoursUpdate,
    current_user: User = Depends(get_current_user),
    service: BusinessService = Depends(get_business_service),
):
    """Replace the week's working hours and optionally the booking settings"""
    hours, settings = service.update_working_hours(
        data.workingHours, data.appointmentSettings, current_user
    )
    return WorkingHoursResponse(
        workingHours=[_working_hour_item(h) for h in hours],
        appointmentSettings=settings,
    )


# ============================================================================
# CATEGORIES
# ============================================================================


@router.get("/categories", response_model=list[CategoryResponse])
async def get_categories(
    include: Optional[str] = Query(None),
    service: BusinessService = Depends(get_business_service),
):
    include_subcategories = include == "subcategories"
    return [_category_response(c, include_subcategories) for c in service.get_categories()]


@router.get("/subcategories", response_model=list[SubcategoryResponse])
async def get_subcategories(
    categoryId: Optional[int] = Query(None),
    service: BusinessService = Depends(get_business_service),
):
    return [_subcategory_response(s) for s in service.get_subcategories(categoryId)]


__all__ = ["router"]
