"""Catalog repository - Database operations for services, staff and leave"""

from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentStatus, Business, Service, Staff, StaffLeave


class CatalogRepository:
    """Repository for catalog database operations"""

    # Services

    @staticmethod
    def get_services(db: Session, business_id: int) -> list[Service]:
        return (
            db.query(Service)
            .filter(Service.business_id == business_id)
            .order_by(Service.name.asc())
            .all()
        )

    @staticmethod
    def get_owned_service(db: Session, service_id: int, owner_id: int) -> Optional[Service]:
        return (
            db.query(Service)
            .join(Business, Service.business_id == Business.id)
            .filter(Service.id == service_id, Business.owner_id == owner_id)
            .first()
        )

    @staticmethod
    def get_active_service(db: Session, service_id: int, business_id: int) -> Optional[Service]:
        return (
            db.query(Service)
            .filter(
                Service.id == service_id,
                Service.business_id == business_id,
                Service.is_active.is_(True),
            )
            .first()
        )

    # Staff

    @staticmethod
    def get_staff_members(db: Session, business_id: int) -> list[Staff]:
        return (
            db.query(Staff)
            .filter(Staff.business_id == business_id)
            .order_by(Staff.name.asc())
            .all()
        )

    @staticmethod
    def get_owned_staff(db: Session, staff_id: int, owner_id: int) -> Optional[Staff]:
        return (
            db.query(Staff)
            .join(Business, Staff.business_id == Business.id)
            .filter(Staff.id == staff_id, Business.owner_id == owner_id)
            .first()
        )

    @staticmethod
    def get_active_staff(db: Session, staff_id: int, business_id: int) -> Optional[Staff]:
        return (
            db.query(Staff)
            .filter(
                Staff.id == staff_id,
                Staff.business_id == business_id,
                Staff.is_active.is_(True),
            )
            .first()
        )

    @staticmethod
    def count_appointments_by_staff(db: Session, business_id: int, day: date) -> dict[int, int]:
        """Non-cancelled appointments per staff member on ``day``"""
        rows = (
            db.query(Appointment.staff_id, func.count(Appointment.id))
            .filter(
                Appointment.business_id == business_id,
                Appointment.staff_id.isnot(None),
                Appointment.date >= datetime.combine(day, time.min),
                Appointment.date <= datetime.combine(day, time(23, 59, 59)),
                Appointment.status != AppointmentStatus.CANCELLED,
            )
            .group_by(Appointment.staff_id)
            .all()
        )
        return {staff_id: count for staff_id, count in rows}

    # Shared write helpers

    @staticmethod
    def has_appointments(db: Session, column, value: int) -> bool:
        return db.query(Appointment.id).filter(column == value).first() is not None

    @staticmethod
    def save(db: Session, obj):
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    @staticmethod
    def update(db: Session, obj, **updates):
        for key, value in updates.items():
            setattr(obj, key, value)
        db.commit()
        db.refresh(obj)
        return obj

    @staticmethod
    def delete(db: Session, obj) -> None:
        db.delete(obj)
        db.commit()

    # Staff leave

    @staticmethod
    def get_leaves(db: Session, business_id: int) -> list[StaffLeave]:
        return (
            db.query(StaffLeave)
            .join(Staff, StaffLeave.staff_id == Staff.id)
            .filter(Staff.business_id == business_id)
            .order_by(StaffLeave.start_date.desc())
            .all()
        )

    @staticmethod
    def get_leave(db: Session, leave_id: int, business_id: int) -> Optional[StaffLeave]:
        return (
            db.query(StaffLeave)
            .join(Staff, StaffLeave.staff_id == Staff.id)
            .filter(StaffLeave.id == leave_id, Staff.business_id == business_id)
            .first()
        )
