"""Service request service - Business logic for requests, offers and matching"""

import logging
import re
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import SERVICE_REQUEST_DEFAULT_LIMIT
from ...models import (
    Business,
    ServiceRequest,
    ServiceRequestResponse,
    ServiceRequestStatus,
    Urgency,
    User,
    UserRole,
)
from ...shared.validators import validate_email, validate_tr_phone
from ..businesses.repository import BusinessRepository
from .matching import OPEN_STATUSES, MatchMode, find_matching_requests
from .repository import ServiceRequestRepository
from .schemas import ResponseCreate, ServiceRequestCreate

logger = logging.getLogger(__name__)

# Time a request stays open, by urgency
URGENCY_TTL_HOURS = {
    Urgency.URGENT: 24,
    Urgency.HIGH: 72,
    Urgency.NORMAL: 168,
    Urgency.LOW: 336,
}


class ServiceRequestService:
    """Service layer for service request business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRequestRepository()

    # ========================================================================
    # CREATE / BROWSE
    # ========================================================================

    def create_request(
        self, data: ServiceRequestCreate, user: Optional[User], now: Optional[datetime] = None
    ) -> ServiceRequest:
        """Open a new request; expiry depends on urgency"""
        if not data.customerName or not data.customerPhone or not data.serviceName:
            raise HTTPException(status_code=400, detail="Müşteri adı, telefon ve hizmet adı gerekli")
        if not data.province:
            raise HTTPException(status_code=400, detail="İl seçimi gerekli")

        try:
            phone = validate_tr_phone(data.customerPhone)
            email = validate_email(data.customerEmail) or None
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        now = now or datetime.now()
        request_data = {
            "user_id": user.id if user else None,
            "customer_name": data.customerName,
            "customer_phone": phone,
            "customer_email": email,
            "category_id": data.categoryId,
            "subcategory_id": data.subcategoryId,
            "service_name": data.serviceName,
            "service_details": data.serviceDetails,
            "budget": data.budget,
            "urgency": data.urgency,
            "province": data.province,
            "district": data.district,
            "address": data.address,
            "preferred_date": data.preferredDate,
            "preferred_time": data.preferredTime,
            "flexible_timing": data.flexibleTiming,
            "status": ServiceRequestStatus.ACTIVE,
            "expires_at": now + timedelta(hours=URGENCY_TTL_HOURS[data.urgency]),
        }

        try:
            service_request = self.repo.create_request(self.db, **request_data)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create service request: {str(e)}")
            raise HTTPException(
                status_code=500, detail="Servis talebi oluşturulurken hata oluştu"
            ) from e

        logger.info(
            f"Service request created: {service_request.id} "
            f"({service_request.urgency.value}, expires {service_request.expires_at})"
        )
        self._notify_matching_businesses(service_request)
        return service_request

    def _notify_matching_businesses(self, service_request: ServiceRequest) -> None:
        try:
            count = self.repo.count_matching_businesses(self.db, service_request)
        except SQLAlchemyError as e:
            logger.error(f"Error finding businesses for service request {service_request.id}: {str(e)}")
            return
        logger.info(f"Found {count} matching businesses for service request {service_request.id}")

    def browse_requests(
        self,
        page: int,
        limit: int,
        status: Optional[ServiceRequestStatus] = None,
        urgency: Optional[Urgency] = None,
        province: Optional[str] = None,
        district: Optional[str] = None,
        category_id: Optional[int] = None,
        subcategory_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> tuple[list[ServiceRequest], int]:
        return self.repo.browse(
            self.db,
            now or datetime.now(),
            page,
            limit,
            status=status,
            urgency=urgency,
            province=province,
            district=district,
            category_id=category_id,
            subcategory_id=subcategory_id,
        )

    def get_request(self, request_id: int) -> ServiceRequest:
        service_request = self.repo.get_request(self.db, request_id)
        if not service_request:
            raise HTTPException(status_code=404, detail="Servis talebi bulunamadı")
        return service_request

    def update_status(
        self, request_id: int, status: ServiceRequestStatus, user: User
    ) -> ServiceRequest:
        """Requester (or an admin) changes the request status"""
        service_request = self.get_request(request_id)
        if service_request.user_id != user.id and user.role != UserRole.ADMIN:
            raise HTTPException(status_code=403, detail="Bu işlemi yapmaya yetkiniz yok")
        logger.info(f"Service request {request_id} status {service_request.status.value} -> {status.value}")
        return self.repo.update_status(self.db, service_request, status)

    # ========================================================================
    # BUSINESS SIDE
    # ========================================================================

    def get_dashboard_requests(
        self,
        business: Business,
        mode: MatchMode,
        page: int = 1,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> tuple[list[ServiceRequest], int, int]:
        limit = limit or SERVICE_REQUEST_DEFAULT_LIMIT
        requests, total = find_matching_requests(self.db, business, mode, page, limit, now)
        return requests, total, limit

    def get_responses(self, request_id: int) -> list[ServiceRequestResponse]:
        return self.repo.get_responses(self.db, request_id)

    def create_response(
        self, request_id: int, data: ResponseCreate, user: User, now: Optional[datetime] = None
    ) -> ServiceRequestResponse:
        """Submit a business's offer on an open request"""
        business = BusinessRepository.get_owned_business(self.db, data.businessId, user.id)
        if not business:
            raise HTTPException(status_code=403, detail="Bu işletme için yetkiniz yok")

        service_request = self.get_request(request_id)
        if service_request.status not in OPEN_STATUSES:
            raise HTTPException(status_code=400, detail="Bu talep artık aktif değil")

        now = now or datetime.now()
        if service_request.expires_at <= now:
            raise HTTPException(status_code=400, detail="Bu talebin süresi dolmuş")

        if self.repo.get_business_response(self.db, request_id, business.id):
            raise HTTPException(status_code=400, detail="Bu talebe daha önce cevap vermişsiniz")

        if not data.message or not data.message.strip():
            raise HTTPException(status_code=400, detail="Mesaj gerekli")

        try:
            response = self.repo.create_response(
                self.db,
                service_request,
                business_id=business.id,
                message=data.message,
                proposed_price=data.proposedPrice,
                proposed_date=data.proposedDate,
                proposed_time=data.proposedTime,
                availability=data.availability,
            )
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Duplicate response from business {business.id} on request {request_id}")
            raise HTTPException(status_code=400, detail="Bu talebe daha önce cevap vermişsiniz") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create response for request {request_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Cevap gönderilirken hata oluştu") from e

        logger.info(f"Business {business.id} responded to service request {request_id}")
        return response

    # ========================================================================
    # CUSTOMER SIDE
    # ========================================================================

    def get_my_requests(
        self, user: Optional[User], phone: Optional[str], email: Optional[str]
    ) -> list[ServiceRequest]:
        """Requests of the signed-in user plus those matching a phone or e-mail"""
        found = []
        if user is not None:
            found.extend(self.repo.get_user_requests(self.db, user.id))

        phone = re.sub(r"\s", "", phone) if phone else None
        email = email.strip().lower() if email else None
        if phone or email:
            found.extend(self.repo.get_contact_requests(self.db, phone, email))

        unique = {}
        for service_request in found:
            unique.setdefault(service_request.id, service_request)
        return sorted(
            unique.values(),
            key=lambda r: (r.created_at or datetime.min, r.id),
            reverse=True,
        )

    def handle_action(self, request_id: int, action: str, response_id: Optional[int]) -> str:
        service_request = self.get_request(request_id)

        if action == "accept_offer" and response_id is not None:
            response = next((r for r in service_request.responses if r.id == response_id), None)
            if response is None:
                raise HTTPException(status_code=404, detail="Teklif bulunamadı")
            try:
                self.repo.accept_offer(self.db, service_request, response)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to accept offer {response_id} on request {request_id}: {str(e)}")
                raise HTTPException(status_code=500, detail="İşlem gerçekleştirilemedi") from e
            logger.info(f"Offer {response_id} accepted on service request {request_id}")
            return "Teklif kabul edildi!"

        if action == "mark_viewed":
            try:
                updated = self.repo.mark_viewed(self.db, request_id)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to mark offers viewed on request {request_id}: {str(e)}")
                raise HTTPException(status_code=500, detail="İşlem gerçekleştirilemedi") from e
            logger.debug(f"Marked {updated} offers viewed on service request {request_id}")
            return "Teklifler görüldü olarak işaretlendi"

        raise HTTPException(status_code=400, detail="Geçersiz işlem")
