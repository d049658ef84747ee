"""Appointment service - Business logic for booking and availability"""

import logging
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import FRONTEND_URL
from ...models import Appointment, AppointmentStatus, Business, User
from ...shared.validators import parse_day
from ..businesses.repository import BusinessRepository
from ..businesses.service import BusinessService, resolve_settings
from ..catalog.repository import CatalogRepository
from .availability import booked_slots, booking_end, build_day_slots, day_bounds
from .repository import BLOCKING_STATUSES, AppointmentRepository
from .schemas import AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)


def _parse_required_day(value: Optional[str]):
    try:
        return parse_day(value)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail="Geçersiz tarih formatı (YYYY-MM-DD)") from e


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.catalog = CatalogRepository()
        self.businesses = BusinessService(db)

    # ========================================================================
    # AVAILABILITY
    # ========================================================================

    def get_availability(
        self, business_id: Optional[int], day: Optional[str], staff_id: Optional[int] = None
    ) -> dict:
        """Occupied 30-minute cells of a business (or one staff member) on a day"""
        if business_id is None or not day:
            raise HTTPException(status_code=400, detail="İşletme ID ve tarih gerekli")
        start, end = day_bounds(_parse_required_day(day))

        appointments = self.repo.get_blocking_appointments(
            self.db, business_id, start, end, staff_id
        )
        slots = booked_slots(
            (a.date, a.service.duration if a.service else None) for a in appointments
        )
        return {"bookedSlots": slots, "totalAppointments": len(appointments)}

    def get_available_slots(
        self,
        business_id: Optional[int],
        day: Optional[str],
        service_id: Optional[int],
        staff_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> list[dict]:
        """Bookable grid of a working day under the business's booking rules"""
        if business_id is None or not day or service_id is None:
            raise HTTPException(status_code=400, detail="İşletme ID, tarih ve hizmet ID gerekli")
        requested = _parse_required_day(day)

        service = self.catalog.get_active_service(self.db, service_id, business_id)
        if not service:
            raise HTTPException(status_code=404, detail="Hizmet bulunamadı")

        business = self.db.get(Business, business_id)
        # Python weekday() is Monday=0; stored hours use Sunday=0
        day_of_week = (requested.weekday() + 1) % 7
        hours = BusinessRepository.get_open_hours_for_day(self.db, business_id, day_of_week)
        if not business or not hours:
            return []

        leaves = []
        if staff_id is not None:
            leaves = self.repo.get_approved_leaves(self.db, staff_id, business_id, requested)

        start, end = day_bounds(requested)
        existing = self.repo.get_blocking_appointments(self.db, business_id, start, end, staff_id)

        return build_day_slots(
            requested,
            hours.open_time,
            hours.close_time,
            resolve_settings(business),
            service.duration,
            [a.date for a in existing],
            leaves,
            now or datetime.now(),
        )

    # ========================================================================
    # BOOKING
    # ========================================================================

    def create_appointment(self, data: AppointmentCreate, user: Optional[User]) -> Appointment:
        """Book an appointment for a guest or a signed-in customer"""
        if user is None and (not data.customerName or not data.customerPhone):
            raise HTTPException(status_code=400, detail="Ad soyad ve telefon numarası gerekli")

        service = self.catalog.get_active_service(self.db, data.serviceId, data.businessId)
        if not service:
            raise HTTPException(status_code=404, detail="Hizmet bulunamadı")

        if data.staffId is not None:
            staff = self.catalog.get_active_staff(self.db, data.staffId, data.businessId)
            if not staff:
                raise HTTPException(status_code=404, detail="Personel bulunamadı")

        start = data.start
        end = booking_end(start, service.duration)
        conflict = self.repo.find_conflict(self.db, data.businessId, start, end, data.staffId)
        if conflict:
            logger.info(
                f"Booking conflict for business {data.businessId} at {start} "
                f"(existing appointment {conflict.id})"
            )
            raise HTTPException(status_code=409, detail="Seçilen saat müsait değil")

        appointment_data = {
            "business_id": data.businessId,
            "service_id": data.serviceId,
            "staff_id": data.staffId,
            "user_id": user.id if user else None,
            "date": start,
            "customer_name": data.customerName or (user.full_name if user else None) or "Müşteri",
            "customer_phone": data.customerPhone or (user.phone if user else None) or "",
            "customer_email": data.customerEmail or (user.email if user else None) or "",
            "notes": data.notes,
            "status": AppointmentStatus.PENDING,
        }

        try:
            appointment = self.repo.create_appointment(self.db, **appointment_data)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create appointment for business {data.businessId}: {str(e)}")
            raise HTTPException(
                status_code=500, detail="Randevu oluşturulurken bir hata oluştu"
            ) from e

        logger.info(f"Appointment created: {appointment.id} for business {data.businessId} at {start}")
        return appointment

    # ========================================================================
    # OWNER / CUSTOMER VIEWS
    # ========================================================================

    def get_appointments(self, business_id: Optional[int], user: User) -> list[Appointment]:
        """Business appointments for owners, otherwise the caller's own bookings"""
        if business_id is not None:
            business = self.businesses.get_owned_business(business_id, user)
            return self.repo.get_business_appointments(self.db, business.id)
        return self.repo.get_customer_appointments(self.db, user.email)

    def get_appointment(self, appointment_id: int, business_id: Optional[int], user: User) -> Appointment:
        if business_id is None:
            raise HTTPException(status_code=400, detail="İşletme ID gerekli")
        business = self.businesses.get_owned_business(business_id, user)
        appointment = self.repo.get_appointment(self.db, appointment_id, business.id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Randevu bulunamadı")
        return appointment

    def update_appointment(
        self, appointment_id: int, data: AppointmentUpdate, user: User
    ) -> Appointment:
        appointment = self.get_appointment(appointment_id, data.businessId, user)
        fields = data.model_dump(exclude_unset=True)

        service = appointment.service
        if fields.get("serviceId") is not None:
            service = self.catalog.get_active_service(self.db, data.serviceId, data.businessId)
            if not service:
                raise HTTPException(status_code=404, detail="Seçilen hizmet bulunamadı veya aktif değil")
        if fields.get("staffId") is not None:
            if not self.catalog.get_active_staff(self.db, data.staffId, data.businessId):
                raise HTTPException(status_code=404, detail="Seçilen personel bulunamadı veya aktif değil")

        column_map = {
            "customerName": "customer_name",
            "customerPhone": "customer_phone",
            "customerEmail": "customer_email",
            "serviceId": "service_id",
            "staffId": "staff_id",
            "date": "date",
            "status": "status",
            "notes": "notes",
        }
        updates = {column_map[k]: v for k, v in fields.items() if k in column_map}
        # Required columns are only changed when a value is provided
        for required in ("customer_name", "service_id", "date", "status"):
            if updates.get(required, "") is None:
                updates.pop(required)

        if {"date", "service_id", "staff_id"} & updates.keys():
            self._check_reschedule(appointment, updates, service)

        previous_status = appointment.status
        try:
            appointment = self.repo.update_appointment(self.db, appointment, **updates)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update appointment {appointment_id}: {str(e)}")
            raise HTTPException(
                status_code=500, detail="Randevu güncellenirken bir hata oluştu"
            ) from e

        if (
            appointment.status == AppointmentStatus.COMPLETED
            and previous_status != AppointmentStatus.COMPLETED
        ):
            self._log_review_link(appointment)
        return appointment

    def _check_reschedule(self, appointment: Appointment, updates: dict, service) -> None:
        """Reject a moved appointment that would overlap another booking"""
        if updates.get("status", appointment.status) not in BLOCKING_STATUSES:
            return
        start = updates.get("date", appointment.date)
        staff_id = updates.get("staff_id", appointment.staff_id)
        end = booking_end(start, service.duration if service else None)
        conflict = self.repo.find_conflict(
            self.db, appointment.business_id, start, end, staff_id, exclude_id=appointment.id
        )
        if conflict:
            logger.info(
                f"Reschedule conflict for appointment {appointment.id} at {start} "
                f"(existing appointment {conflict.id})"
            )
            raise HTTPException(status_code=409, detail="Seçilen saat müsait değil")

    def _log_review_link(self, appointment: Appointment) -> None:
        phone = (appointment.customer_phone or "").strip()
        if not phone:
            logger.warning(f"Appointment {appointment.id} completed without phone; no review link")
            return
        review_url = f"{FRONTEND_URL}/review?appointment={appointment.id}&phone={quote(phone)}"
        logger.info(f"Appointment {appointment.id} completed - review link: {review_url}")

    def delete_appointment(self, appointment_id: int, business_id: Optional[int], user: User) -> dict:
        appointment = self.get_appointment(appointment_id, business_id, user)
        try:
            self.repo.delete_appointment(self.db, appointment)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete appointment {appointment_id}: {str(e)}")
            raise HTTPException(
                status_code=500, detail="Randevu silinirken bir hata oluştu"
            ) from e
        logger.info(f"Appointment {appointment_id} deleted")
        return {"message": "Randevu başarıyla silindi"}
