"""Catalog service - Business logic for services, staff and staff leave"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Appointment, Service, Staff, StaffLeave, User
from ..businesses.service import BusinessService
from .repository import CatalogRepository
from .schemas import ServiceCreate, ServiceUpdate, StaffCreate, StaffLeaveCreate, StaffUpdate

logger = logging.getLogger(__name__)


class CatalogService:
    """Service layer for a business's services, staff and staff leave"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepository()
        self.businesses = BusinessService(db)

    def _write(self, action: str, fn, *args, **kwargs):
        try:
            return fn(self.db, *args, **kwargs)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action}: {str(e)}")
            raise HTTPException(status_code=500, detail="İşlem gerçekleştirilemedi") from e

    def _remove(self, obj, fk_column, label: str, display: str) -> dict:
        """Delete unreferenced rows; rows with appointment history are deactivated"""
        if self.repo.has_appointments(self.db, fk_column, obj.id):
            self._write(f"deactivate {label} {obj.id}", self.repo.update, obj, is_active=False)
            logger.info(f"{label.capitalize()} {obj.id} deactivated (has appointments)")
            return {"message": f"{display} pasif hale getirildi", "deactivated": True}

        self._write(f"delete {label} {obj.id}", self.repo.delete, obj)
        logger.info(f"{label.capitalize()} {obj.id} deleted")
        return {"message": f"{display} silindi", "deactivated": False}

    # ========================================================================
    # SERVICES
    # ========================================================================

    def get_services(self, business_id: Optional[int], user: User) -> list[Service]:
        business = self.businesses.resolve_business(business_id, user)
        return self.repo.get_services(self.db, business.id)

    def get_service(self, service_id: int, user: User) -> Service:
        service = self.repo.get_owned_service(self.db, service_id, user.id)
        if not service:
            raise HTTPException(status_code=404, detail="Hizmet bulunamadı")
        return service

    def create_service(self, data: ServiceCreate, user: User) -> Service:
        business = self.businesses.resolve_business(data.businessId, user)
        service = Service(
            business_id=business.id,
            name=data.name,
            description=data.description,
            category=data.category,
            price=data.price,
            duration=data.duration,
        )
        service = self._write("create service", self.repo.save, service)
        logger.info(f"Service created: {service.id} for business {business.id}")
        return service

    def update_service(self, service_id: int, data: ServiceUpdate, user: User) -> Service:
        service = self.get_service(service_id, user)
        fields = data.model_dump(exclude_unset=True)
        updates = {
            "name": fields.get("name"),
            "description": fields.get("description"),
            "category": fields.get("category"),
            "price": fields.get("price"),
            "duration": fields.get("duration"),
            "is_active": fields.get("isActive"),
        }
        updates = {k: v for k, v in updates.items() if v is not None}
        return self._write(f"update service {service_id}", self.repo.update, service, **updates)

    def delete_service(self, service_id: int, user: User) -> dict:
        service = self.get_service(service_id, user)
        return self._remove(service, Appointment.service_id, "service", "Hizmet")

    # ========================================================================
    # STAFF
    # ========================================================================

    def get_staff_members(
        self, business_id: Optional[int], user: User
    ) -> tuple[list[Staff], dict[int, int]]:
        """Staff of the business with today's appointment counts"""
        business = self.businesses.resolve_business(business_id, user)
        staff = self.repo.get_staff_members(self.db, business.id)
        counts = self.repo.count_appointments_by_staff(self.db, business.id, date.today())
        return staff, counts

    def get_staff(self, staff_id: int, user: User) -> Staff:
        staff = self.repo.get_owned_staff(self.db, staff_id, user.id)
        if not staff:
            raise HTTPException(status_code=404, detail="Personel bulunamadı")
        return staff

    def create_staff(self, data: StaffCreate, user: User) -> Staff:
        business = self.businesses.resolve_business(data.businessId, user)
        staff = Staff(
            business_id=business.id,
            name=data.name,
            phone=data.phone,
            email=data.email,
            specialty=data.specialty,
            experience=data.experience,
            bio=data.bio,
        )
        staff = self._write("create staff", self.repo.save, staff)
        logger.info(f"Staff created: {staff.id} for business {business.id}")
        return staff

    def update_staff(self, staff_id: int, data: StaffUpdate, user: User) -> Staff:
        staff = self.get_staff(staff_id, user)
        fields = data.model_dump(exclude_unset=True)
        fields.pop("businessId", None)
        if "isActive" in fields:
            fields["is_active"] = fields.pop("isActive")
        updates = {k: v for k, v in fields.items() if v is not None}
        return self._write(f"update staff {staff_id}", self.repo.update, staff, **updates)

    def delete_staff(self, staff_id: int, user: User) -> dict:
        staff = self.get_staff(staff_id, user)
        return self._remove(staff, Appointment.staff_id, "staff", "Personel")

    # ========================================================================
    # STAFF LEAVE
    # ========================================================================

    def get_leaves(self, business_id: Optional[int], user: User) -> list[StaffLeave]:
        business = self.businesses.resolve_business(business_id, user)
        return self.repo.get_leaves(self.db, business.id)

    def create_leave(self, data: StaffLeaveCreate, user: User) -> StaffLeave:
        staff = self.get_staff(data.staffId, user)
        leave = StaffLeave(
            staff_id=staff.id,
            start_date=data.startDate,
            end_date=data.endDate or data.startDate,
            start_time=data.startTime,
            end_time=data.endTime,
            type=data.type,
            reason=data.reason,
            status=data.status,
            notes=data.notes,
        )
        leave = self._write("create staff leave", self.repo.save, leave)
        logger.info(
            f"Staff leave created: {leave.id} for staff {staff.id} "
            f"({leave.type.value} {leave.start_date} - {leave.end_date})"
        )
        return leave

    def delete_leave(self, leave_id: int, business_id: Optional[int], user: User) -> dict:
        business = self.businesses.resolve_business(business_id, user)
        leave = self.repo.get_leave(self.db, leave_id, business.id)
        if not leave:
            raise HTTPException(status_code=404, detail="İzin kaydı bulunamadı")
        self._write(f"delete staff leave {leave_id}", self.repo.delete, leave)
        return {"message": "İzin kaydı silindi"}
