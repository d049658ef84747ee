"""Appointment router - FastAPI endpoints for booking and availability"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_optional_user
from ...database import get_db
from ...models import Appointment, User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    AvailabilityResponse,
    AvailableSlotsResponse,
    ServiceSummary,
    StaffSummary,
)
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

limit_bookings = create_rate_limiter(limit=20, window_seconds=3600, key_prefix="appointment_booking")


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


def _appointment_response(a: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=a.id,
        businessId=a.business_id,
        businessName=a.business.name if a.business else None,
        date=a.date,
        status=a.status,
        customerName=a.customer_name,
        customerPhone=a.customer_phone,
        customerEmail=a.customer_email,
        notes=a.notes,
        service=(
            ServiceSummary(
                id=a.service.id,
                name=a.service.name,
                price=a.service.price,
                duration=a.service.duration,
            )
            if a.service
            else None
        ),
        staff=(
            StaffSummary(id=a.staff.id, name=a.staff.name, specialty=a.staff.specialty)
            if a.staff
            else None
        ),
        createdAt=a.created_at,
    )


# ============================================================================
# AVAILABILITY (public)
# ============================================================================


@router.get("/availability", response_model=AvailabilityResponse)
async def get_availability(
    businessId: Optional[int] = Query(None),
    date: Optional[str] = Query(None),
    staffId: Optional[int] = Query(None),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Booked 30-minute slots of a business on a day"""
    return service.get_availability(businessId, date, staffId)


@router.get("/available-slots", response_model=AvailableSlotsResponse)
async def get_available_slots(
    businessId: Optional[int] = Query(None),
    date: Optional[str] = Query(None),
    serviceId: Optional[int] = Query(None),
    staffId: Optional[int] = Query(None),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Bookable slots of a working day for a given service"""
    return {"slots": service.get_available_slots(businessId, date, serviceId, staffId)}


# ============================================================================
# BOOKING
# ============================================================================


@router.post("", status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: Optional[User] = Depends(get_optional_user),
    service: AppointmentService = Depends(get_appointment_service),
    _: None = Depends(limit_bookings),
):
    """Book an appointment as a guest or signed-in customer"""
    appointment = service.create_appointment(data, current_user)
    return {
        "message": "Randevu başarıyla oluşturuldu",
        "appointmentId": appointment.id,
        "appointment": _appointment_response(appointment),
    }


@router.get("")
async def get_appointments(
    businessId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Owner view with businessId, otherwise the caller's own appointments"""
    appointments = service.get_appointments(businessId, current_user)
    return {"appointments": [_appointment_response(a) for a in appointments]}


# ============================================================================
# SINGLE APPOINTMENT (owner)
# ============================================================================


@router.get("/{appointment_id}")
async def get_appointment(
    appointment_id: int,
    businessId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.get_appointment(appointment_id, businessId, current_user)
    return {"appointment": _appointment_response(appointment)}


@router.patch("/{appointment_id}")
async def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = service.update_appointment(appointment_id, data, current_user)
    return {
        "message": "Randevu başarıyla güncellendi",
        "appointment": _appointment_response(appointment),
    }


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: int,
    businessId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.delete_appointment(appointment_id, businessId, current_user)


__all__ = ["router"]
