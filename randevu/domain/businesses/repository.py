"""Business repository - Database operations for businesses, hours and categories"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Business, Category, Subcategory, WorkingHour

# Mon-Fri 09:00-18:00, Sat 09:00-17:00, Sunday closed
DEFAULT_WORKING_HOURS = [
    (1, True, "09:00", "18:00"),
    (2, True, "09:00", "18:00"),
    (3, True, "09:00", "18:00"),
    (4, True, "09:00", "18:00"),
    (5, True, "09:00", "18:00"),
    (6, True, "09:00", "17:00"),
    (0, False, "10:00", "16:00"),
]


class BusinessRepository:
    """Repository for business database operations"""

    @staticmethod
    def get_owned_business(db: Session, business_id: int, owner_id: int) -> Optional[Business]:
        """Get a business only if it belongs to the given owner"""
        return (
            db.query(Business)
            .filter(Business.id == business_id, Business.owner_id == owner_id)
            .first()
        )

    @staticmethod
    def get_first_business(db: Session, owner_id: int) -> Optional[Business]:
        return (
            db.query(Business)
            .filter(Business.owner_id == owner_id)
            .order_by(Business.id.asc())
            .first()
        )

    @staticmethod
    def list_owned(db: Session, owner_id: int) -> list[Business]:
        return (
            db.query(Business)
            .filter(Business.owner_id == owner_id)
            .order_by(Business.created_at.desc(), Business.id.desc())
            .all()
        )

    @staticmethod
    def get_by_slug(db: Session, slug: str) -> Optional[Business]:
        return db.query(Business).filter(Business.slug == slug).first()

    @staticmethod
    def slug_exists(db: Session, slug: str) -> bool:
        return db.query(Business.id).filter(Business.slug == slug).first() is not None

    @staticmethod
    def create_business(db: Session, owner_id: int, **business_data) -> Business:
        """Create a business together with its default working hours"""
        business = Business(owner_id=owner_id, **business_data)
        db.add(business)
        db.flush()

        for day, is_open, open_time, close_time in DEFAULT_WORKING_HOURS:
            db.add(
                WorkingHour(
                    business_id=business.id,
                    day_of_week=day,
                    is_open=is_open,
                    open_time=open_time,
                    close_time=close_time,
                )
            )

        db.commit()
        db.refresh(business)
        return business

    @staticmethod
    def get_working_hours(db: Session, business_id: int) -> list[WorkingHour]:
        return (
            db.query(WorkingHour)
            .filter(WorkingHour.business_id == business_id)
            .order_by(WorkingHour.day_of_week.asc())
            .all()
        )

    @staticmethod
    def get_open_hours_for_day(
        db: Session, business_id: int, day_of_week: int
    ) -> Optional[WorkingHour]:
        return (
            db.query(WorkingHour)
            .filter(
                WorkingHour.business_id == business_id,
                WorkingHour.day_of_week == day_of_week,
                WorkingHour.is_open.is_(True),
            )
            .first()
        )

    @staticmethod
    def replace_working_hours(
        db: Session, business: Business, hours: list[dict], settings: Optional[dict]
    ) -> list[WorkingHour]:
        """Replace the whole week in one transaction"""
        db.query(WorkingHour).filter(WorkingHour.business_id == business.id).delete(
            synchronize_session=False
        )
        for hour in hours:
            db.add(WorkingHour(business_id=business.id, **hour))

        if settings is not None:
            business.appointment_settings = settings

        db.commit()
        return BusinessRepository.get_working_hours(db, business.id)

    @staticmethod
    def get_categories(db: Session) -> list[Category]:
        return (
            db.query(Category)
            .filter(Category.is_active.is_(True))
            .order_by(Category.order_index.asc())
            .all()
        )

    @staticmethod
    def get_subcategories(db: Session, category_id: int) -> list[Subcategory]:
        return (
            db.query(Subcategory)
            .filter(Subcategory.category_id == category_id, Subcategory.is_active.is_(True))
            .order_by(Subcategory.order_index.asc())
            .all()
        )
