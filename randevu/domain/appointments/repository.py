"""Appointment repository - Database operations for appointments"""

from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, AppointmentStatus, LeaveStatus, Staff, StaffLeave
from .availability import booking_end, overlaps

# Statuses that occupy a time slot
BLOCKING_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)

# Longest booking looked back over when searching for overlaps
MAX_BOOKING_SPAN = timedelta(hours=24)


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_blocking_appointments(
        db: Session,
        business_id: int,
        start: datetime,
        end: datetime,
        staff_id: Optional[int] = None,
    ) -> list[Appointment]:
        """PENDING/CONFIRMED appointments starting within ``[start, end]``"""
        query = (
            db.query(Appointment)
            .options(joinedload(Appointment.service))
            .filter(
                Appointment.business_id == business_id,
                Appointment.date >= start,
                Appointment.date <= end,
                Appointment.status.in_(BLOCKING_STATUSES),
            )
        )
        if staff_id is not None:
            query = query.filter(Appointment.staff_id == staff_id)
        return query.order_by(Appointment.date.asc()).all()

    @staticmethod
    def find_conflict(
        db: Session,
        business_id: int,
        start: datetime,
        end: datetime,
        staff_id: Optional[int] = None,
        exclude_id: Optional[int] = None,
    ) -> Optional[Appointment]:
        """First blocking appointment whose own duration overlaps ``[start, end)``"""
        query = (
            db.query(Appointment)
            .options(joinedload(Appointment.service))
            .filter(
                Appointment.business_id == business_id,
                Appointment.date > start - MAX_BOOKING_SPAN,
                Appointment.date < end,
                Appointment.status.in_(BLOCKING_STATUSES),
            )
        )
        if staff_id is not None:
            query = query.filter(Appointment.staff_id == staff_id)
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)
        for existing in query.order_by(Appointment.date.asc()):
            duration = existing.service.duration if existing.service else None
            if overlaps(existing.date, booking_end(existing.date, duration), start, end):
                return existing
        return None

    @staticmethod
    def get_approved_leaves(db: Session, staff_id: int, business_id: int, day: date) -> list[StaffLeave]:
        return (
            db.query(StaffLeave)
            .join(Staff, StaffLeave.staff_id == Staff.id)
            .filter(
                StaffLeave.staff_id == staff_id,
                Staff.business_id == business_id,
                Staff.is_active.is_(True),
                StaffLeave.status == LeaveStatus.APPROVED,
                StaffLeave.start_date <= day,
                StaffLeave.end_date >= day,
            )
            .all()
        )

    @staticmethod
    def get_business_appointments(db: Session, business_id: int) -> list[Appointment]:
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.service), joinedload(Appointment.staff))
            .filter(Appointment.business_id == business_id)
            .order_by(Appointment.date.desc())
            .all()
        )

    @staticmethod
    def get_customer_appointments(db: Session, email: str) -> list[Appointment]:
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.service), joinedload(Appointment.staff))
            .filter(Appointment.customer_email == email)
            .order_by(Appointment.date.desc())
            .all()
        )

    @staticmethod
    def get_appointment(db: Session, appointment_id: int, business_id: int) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.id == appointment_id, Appointment.business_id == business_id)
            .first()
        )

    @staticmethod
    def create_appointment(db: Session, **appointment_data) -> Appointment:
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        for key, value in updates.items():
            setattr(appointment, key, value)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()
