"""Business service - Business logic for businesses, working hours and categories"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Business, Service, User, UserRole
from ...shared.validators import TIME_PATTERN, slugify
from .repository import BusinessRepository
from .schemas import AppointmentSettings, BusinessCreate

logger = logging.getLogger(__name__)


def resolve_settings(business: Business) -> AppointmentSettings:
    """Stored appointment settings merged over the defaults"""
    return AppointmentSettings(**(business.appointment_settings or {}))


def _is_valid_hour_entry(entry: dict) -> bool:
    day = entry.get("dayOfWeek")
    open_time = entry.get("openTime")
    close_time = entry.get("closeTime")
    return (
        isinstance(day, int)
        and not isinstance(day, bool)
        and 0 <= day <= 6
        and isinstance(entry.get("isOpen"), bool)
        and isinstance(open_time, str)
        and isinstance(close_time, str)
        and bool(TIME_PATTERN.match(open_time))
        and bool(TIME_PATTERN.match(close_time))
    )


class BusinessService:
    """Service layer for business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BusinessRepository()

    def get_owned_business(self, business_id: int, user: User) -> Business:
        """Ownership-scoped lookup; 404 for unknown and foreign businesses alike"""
        business = self.repo.get_owned_business(self.db, business_id, user.id)
        if not business:
            raise HTTPException(status_code=404, detail="İşletme bulunamadı")
        return business

    def resolve_business(self, business_id: Optional[int], user: User) -> Business:
        """Explicit business when given, otherwise the caller's first one"""
        if business_id is not None:
            return self.get_owned_business(business_id, user)
        business = self.repo.get_first_business(self.db, user.id)
        if not business:
            raise HTTPException(status_code=404, detail="İşletme bulunamadı")
        return business

    def get_businesses(self, user: User) -> list[Business]:
        return self.repo.list_owned(self.db, user.id)

    def _unique_slug(self, name: str) -> str:
        base = slugify(name) or "isletme"
        slug = base
        counter = 1
        while self.repo.slug_exists(self.db, slug):
            slug = f"{base}-{counter}"
            counter += 1
        return slug

    def create_business(self, data: BusinessCreate, user: User) -> Business:
        """Create a business with a unique slug and default working hours"""
        slug = self._unique_slug(data.name)
        logger.info(f"Creating business '{data.name}' ({slug}) for user_id: {user.id}")

        business_data = {
            "name": data.name,
            "slug": slug,
            "category": data.category or "OTHER",
            "category_id": data.categoryId,
            "subcategory_id": data.subcategoryId,
            "province": data.province,
            "district": data.district,
            "phone": data.phone,
            "email": data.email,
            "address": data.address,
            "description": data.description,
            "service_type": data.serviceType,
        }

        try:
            if user.role == UserRole.USER:
                user.role = UserRole.BUSINESS_OWNER
            business = self.repo.create_business(self.db, user.id, **business_data)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create business for user_id {user.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="İşletme oluşturulamadı") from e

        logger.info(f"Business created: {business.id}")
        return business

    def get_current_business(self, user: User) -> Business:
        business = self.repo.get_first_business(self.db, user.id)
        if not business:
            raise HTTPException(status_code=404, detail="İşletme bulunamadı")
        return business

    def get_public_business(self, slug: str) -> tuple[Business, list[Service]]:
        business = self.repo.get_by_slug(self.db, slug)
        if not business or not business.is_active:
            raise HTTPException(status_code=404, detail="İşletme bulunamadı")
        services = [s for s in business.services if s.is_active]
        return business, services

    # Working hours

    def get_working_hours(self, user: User):
        business = self.get_current_business(user)
        return self.repo.get_working_hours(self.db, business.id), resolve_settings(business)

    def update_working_hours(
        self, hours: list[dict], settings: Optional[AppointmentSettings], user: User
    ):
        business = self.get_current_business(user)

        valid_hours = []
        for entry in hours:
            if not _is_valid_hour_entry(entry):
                logger.warning(f"Skipping invalid working hour entry for business {business.id}: {entry}")
                continue
            valid_hours.append(
                {
                    "day_of_week": entry["dayOfWeek"],
                    "is_open": entry["isOpen"],
                    "open_time": entry["openTime"],
                    "close_time": entry["closeTime"],
                }
            )

        try:
            saved = self.repo.replace_working_hours(
                self.db,
                business,
                valid_hours,
                settings.model_dump() if settings is not None else None,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update working hours for business {business.id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Çalışma saatleri güncellenemedi") from e

        logger.info(f"Working hours updated for business {business.id}: {len(saved)} entries")
        return saved, resolve_settings(business)

    # Categories

    def get_categories(self):
        return self.repo.get_categories(self.db)

    def get_subcategories(self, category_id: Optional[int]):
        if category_id is None:
            raise HTTPException(status_code=400, detail="categoryId parametresi gerekli")
        return self.repo.get_subcategories(self.db, category_id)
