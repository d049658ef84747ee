"""Review repository - Database operations for reviews"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, AppointmentStatus, Review


class ReviewRepository:
    """Repository for review database operations"""

    @staticmethod
    def get_completed_appointment(
        db: Session, appointment_id: int, customer_phone: Optional[str] = None
    ) -> Optional[Appointment]:
        query = db.query(Appointment).filter(
            Appointment.id == appointment_id,
            Appointment.status == AppointmentStatus.COMPLETED,
        )
        if customer_phone is not None:
            query = query.filter(Appointment.customer_phone == customer_phone)
        return query.first()

    @staticmethod
    def get_by_appointment(db: Session, appointment_id: int) -> Optional[Review]:
        return db.query(Review).filter(Review.appointment_id == appointment_id).first()

    @staticmethod
    def get_review(db: Session, review_id: int) -> Optional[Review]:
        return db.query(Review).filter(Review.id == review_id).first()

    @staticmethod
    def create_review(db: Session, **review_data) -> Review:
        review = Review(**review_data)
        db.add(review)
        db.commit()
        db.refresh(review)
        return review

    @staticmethod
    def list_visible(
        db: Session, business_id: int, page: int, limit: int, approved: Optional[bool] = None
    ) -> tuple[list[Review], int]:
        query = db.query(Review).filter(
            Review.business_id == business_id, Review.is_visible.is_(True)
        )
        if approved is not None:
            query = query.filter(Review.is_approved.is_(approved))

        total = query.count()
        reviews = (
            query.options(joinedload(Review.appointment).joinedload(Appointment.service))
            .order_by(Review.created_at.desc(), Review.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return reviews, total

    @staticmethod
    def update_review(db: Session, review: Review, **updates) -> Review:
        for key, value in updates.items():
            setattr(review, key, value)
        db.commit()
        db.refresh(review)
        return review

    @staticmethod
    def delete_review(db: Session, review: Review) -> None:
        db.delete(review)
        db.commit()
