"""Review service - Business logic for customer reviews"""

import logging
import re
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import REVIEW_WINDOW_DAYS
from ...models import Appointment, AppointmentStatus, Review, User
from .repository import ReviewRepository
from .schemas import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)


class ReviewService:
    """Service layer for review business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepository()

    def create_review(self, data: ReviewCreate) -> Review:
        """One review per completed appointment; auto-approved"""
        if not data.rating or not data.comment or not data.comment.strip():
            raise HTTPException(status_code=400, detail="Randevu ID, puan ve yorum gerekli")
        if not data.customerName or not data.customerName.strip():
            raise HTTPException(status_code=400, detail="Müşteri adı eksik")

        appointment = self.db.get(Appointment, data.appointmentId)
        if not appointment:
            raise HTTPException(status_code=404, detail="Randevu bulunamadı")
        if appointment.status != AppointmentStatus.COMPLETED:
            raise HTTPException(
                status_code=400,
                detail="Sadece tamamlanmış randevular için değerlendirme yapılabilir",
            )
        if self.repo.get_by_appointment(self.db, appointment.id):
            raise HTTPException(
                status_code=400, detail="Bu randevu için zaten değerlendirme yapılmış"
            )

        review_data = {
            "appointment_id": appointment.id,
            "business_id": appointment.business_id,
            "rating": data.rating,
            "comment": data.comment.strip(),
            "customer_name": data.customerName.strip(),
            "customer_phone": (data.customerPhone or "").strip() or None,
            "customer_email": (data.customerEmail or "").strip() or None,
            "is_approved": True,
            "is_visible": True,
        }
        try:
            review = self.repo.create_review(self.db, **review_data)
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=400, detail="Bu randevu için zaten değerlendirme yapılmış"
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create review for appointment {appointment.id}: {str(e)}")
            raise HTTPException(
                status_code=500, detail="Değerlendirme oluşturulurken hata oluştu"
            ) from e

        logger.info(f"Review {review.id} created for business {review.business_id} ({review.rating}/5)")
        return review

    def get_reviews(
        self, business_id: Optional[int], page: int, limit: int, approved: Optional[bool]
    ) -> tuple[list[Review], int]:
        if business_id is None:
            raise HTTPException(status_code=400, detail="Business ID gerekli")
        return self.repo.list_visible(self.db, business_id, page, limit, approved)

    def can_review(
        self,
        appointment_id: Optional[int],
        customer_phone: Optional[str],
        now: Optional[datetime] = None,
    ) -> tuple[int, dict]:
        """
        Whether the holder of ``customer_phone`` may review the appointment.

        Returns:
            Tuple of (HTTP status, body)
        """
        if appointment_id is None or not customer_phone:
            raise HTTPException(status_code=400, detail="Randevu ID ve telefon numarası gerekli")

        phone = re.sub(r"\s", "", customer_phone)
        appointment = self.repo.get_completed_appointment(self.db, appointment_id, phone)
        if not appointment:
            return 404, {
                "canReview": False,
                "reason": "Randevu bulunamadı veya henüz tamamlanmamış",
            }

        if appointment.review:
            return 200, {
                "canReview": False,
                "reason": "Bu randevu için zaten değerlendirme yapılmış",
                "existingReviewId": appointment.review.id,
            }

        now = now or datetime.now()
        if appointment.date < now - timedelta(days=REVIEW_WINDOW_DAYS):
            return 200, {
                "canReview": False,
                "reason": f"Değerlendirme süresi dolmuş ({REVIEW_WINDOW_DAYS} gün)",
            }

        return 200, {
            "canReview": True,
            "appointment": {
                "id": appointment.id,
                "date": appointment.date.isoformat(),
                "businessName": appointment.business.name if appointment.business else None,
                "serviceName": appointment.service.name if appointment.service else None,
                "staffName": appointment.staff.name if appointment.staff else None,
            },
        }

    def _get_owned_review(self, review_id: int, user: User) -> Review:
        review = self.repo.get_review(self.db, review_id)
        if not review:
            raise HTTPException(status_code=404, detail="Değerlendirme bulunamadı")
        if review.appointment.business.owner_id != user.id:
            raise HTTPException(status_code=403, detail="Bu işlem için yetkiniz yok")
        return review

    def update_review(self, review_id: int, data: ReviewUpdate, user: User) -> Review:
        """Business owner moderates a review"""
        review = self._get_owned_review(review_id, user)
        updates = {}
        if data.isApproved is not None:
            updates["is_approved"] = data.isApproved
        if data.isVisible is not None:
            updates["is_visible"] = data.isVisible
        return self.repo.update_review(self.db, review, **updates)

    def delete_review(self, review_id: int, user: User) -> dict:
        review = self._get_owned_review(review_id, user)
        self.repo.delete_review(self.db, review)
        logger.info(f"Review {review_id} deleted by user {user.id}")
        return {"message": "Değerlendirme silindi"}
