"""Catalog router - FastAPI endpoints for services, staff and staff leave"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Service, Staff, StaffLeave, User
from .schemas import (
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
    StaffCreate,
    StaffLeaveCreate,
    StaffLeaveResponse,
    StaffResponse,
    StaffUpdate,
)
from .service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Catalog"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


def _service_response(s: Service) -> ServiceResponse:
    return ServiceResponse(
        id=s.id,
        businessId=s.business_id,
        name=s.name,
        description=s.description,
        category=s.category,
        price=s.price,
        duration=s.duration,
        isActive=s.is_active,
        createdAt=s.created_at,
    )


def _staff_response(s: Staff, today_count: int = 0) -> StaffResponse:
    return StaffResponse(
        id=s.id,
        businessId=s.business_id,
        name=s.name,
        phone=s.phone,
        email=s.email,
        specialty=s.specialty,
        experience=s.experience,
        bio=s.bio,
        isActive=s.is_active,
        todayAppointments=today_count,
    )


def _leave_response(leave: StaffLeave) -> StaffLeaveResponse:
    return StaffLeaveResponse(
        id=leave.id,
        staffId=leave.staff_id,
        staffName=leave.staff.name if leave.staff else None,
        startDate=leave.start_date,
        endDate=leave.end_date,
        startTime=leave.start_time,
        endTime=leave.end_time,
        type=leave.type,
        reason=leave.reason,
        status=leave.status,
        notes=leave.notes,
    )


# ============================================================================
# SERVICES
# ============================================================================


@router.get("/services", response_model=list[ServiceResponse])
async def get_services(
    businessId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return [_service_response(s) for s in service.get_services(businessId, current_user)]


@router.post("/services", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return _service_response(service.create_service(data, current_user))


@router.patch("/services/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    data: ServiceUpdate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return _service_response(service.update_service(service_id, data, current_user))


@router.delete("/services/{service_id}")
async def delete_service(
    service_id: int,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.delete_service(service_id, current_user)


# ============================================================================
# STAFF
# ============================================================================


@router.get("/staff", response_model=list[StaffResponse])
async def get_staff(
    businessId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """List staff with their appointment count for today"""
    staff, counts = service.get_staff_members(businessId, current_user)
    return [_staff_response(s, counts.get(s.id, 0)) for s in staff]


@router.post("/staff", response_model=StaffResponse, status_code=201)
async def create_staff(
    data: StaffCreate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return _staff_response(service.create_staff(data, current_user))


@router.patch("/staff/{staff_id}", response_model=StaffResponse)
async def update_staff(
    staff_id: int,
    data: StaffUpdate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return _staff_response(service.update_staff(staff_id, data, current_user))


@router.delete("/staff/{staff_id}")
async def delete_staff(
    staff_id: int,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.delete_staff(staff_id, current_user)


# ============================================================================
# STAFF LEAVE
# ============================================================================


@router.get("/staff-leave", response_model=list[StaffLeaveResponse])
async def get_staff_leaves(
    businessId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return [_leave_response(leave) for leave in service.get_leaves(businessId, current_user)]


@router.post("/staff-leave", response_model=StaffLeaveResponse, status_code=201)
async def create_staff_leave(
    data: StaffLeaveCreate,
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    """Record a leave; non-partial leaves cover whole days"""
    return _leave_response(service.create_leave(data, current_user))


@router.delete("/staff-leave/{leave_id}")
async def delete_staff_leave(
    leave_id: int,
    businessId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.delete_leave(leave_id, businessId, current_user)


__all__ = ["router"]
