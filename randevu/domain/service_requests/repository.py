"""Service request repository - Database operations for requests and offers"""

from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import (
    Business,
    ResponseStatus,
    ServiceRequest,
    ServiceRequestResponse,
    ServiceRequestStatus,
)
from .matching import OPEN_STATUSES, urgency_order

BROWSE_STATUSES = OPEN_STATUSES


class ServiceRequestRepository:
    """Repository for service request database operations"""

    @staticmethod
    def create_request(db: Session, **request_data) -> ServiceRequest:
        service_request = ServiceRequest(**request_data)
        db.add(service_request)
        db.commit()
        db.refresh(service_request)
        return service_request

    @staticmethod
    def get_request(db: Session, request_id: int) -> Optional[ServiceRequest]:
        return (
            db.query(ServiceRequest)
            .options(selectinload(ServiceRequest.responses))
            .filter(ServiceRequest.id == request_id)
            .first()
        )

    @staticmethod
    def count_matching_businesses(db: Session, service_request: ServiceRequest) -> int:
        """Active businesses sharing the request's location and category"""
        query = db.query(Business).filter(Business.is_active.is_(True))
        if service_request.province:
            query = query.filter(Business.province == service_request.province)
        if service_request.district:
            query = query.filter(Business.district == service_request.district)
        if service_request.category_id is not None:
            query = query.filter(Business.category_id == service_request.category_id)
        if service_request.subcategory_id is not None:
            query = query.filter(Business.subcategory_id == service_request.subcategory_id)
        return query.count()

    @staticmethod
    def browse(
        db: Session,
        now: datetime,
        page: int,
        limit: int,
        status: Optional[ServiceRequestStatus] = None,
        urgency=None,
        province: Optional[str] = None,
        district: Optional[str] = None,
        category_id: Optional[int] = None,
        subcategory_id: Optional[int] = None,
    ) -> tuple[list[ServiceRequest], int]:
        query = db.query(ServiceRequest).filter(ServiceRequest.expires_at > now)
        if status is not None:
            query = query.filter(ServiceRequest.status == status)
        else:
            query = query.filter(ServiceRequest.status.in_(BROWSE_STATUSES))
        if urgency is not None:
            query = query.filter(ServiceRequest.urgency == urgency)
        if province:
            query = query.filter(ServiceRequest.province == province)
        if district:
            query = query.filter(ServiceRequest.district == district)
        if category_id is not None:
            query = query.filter(ServiceRequest.category_id == category_id)
        if subcategory_id is not None:
            query = query.filter(ServiceRequest.subcategory_id == subcategory_id)

        total = query.count()
        items = (
            query.options(selectinload(ServiceRequest.responses))
            .order_by(urgency_order(), ServiceRequest.created_at.desc(), ServiceRequest.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    # Responses

    @staticmethod
    def get_responses(db: Session, request_id: int) -> list[ServiceRequestResponse]:
        """Offers for a request, premium businesses first, newest first"""
        return (
            db.query(ServiceRequestResponse)
            .join(Business, ServiceRequestResponse.business_id == Business.id)
            .options(joinedload(ServiceRequestResponse.business))
            .filter(ServiceRequestResponse.service_request_id == request_id)
            .order_by(
                Business.is_premium.desc(),
                ServiceRequestResponse.created_at.desc(),
                ServiceRequestResponse.id.desc(),
            )
            .all()
        )

    @staticmethod
    def get_business_response(
        db: Session, request_id: int, business_id: int
    ) -> Optional[ServiceRequestResponse]:
        return (
            db.query(ServiceRequestResponse)
            .filter(
                ServiceRequestResponse.service_request_id == request_id,
                ServiceRequestResponse.business_id == business_id,
            )
            .first()
        )

    @staticmethod
    def create_response(
        db: Session, service_request: ServiceRequest, **response_data
    ) -> ServiceRequestResponse:
        """Store an offer and mark the request RESPONDED in one commit"""
        response = ServiceRequestResponse(service_request_id=service_request.id, **response_data)
        db.add(response)
        service_request.status = ServiceRequestStatus.RESPONDED
        db.commit()
        db.refresh(response)
        return response

    # Customer side

    @staticmethod
    def get_user_requests(db: Session, user_id: int) -> list[ServiceRequest]:
        return (
            db.query(ServiceRequest)
            .options(selectinload(ServiceRequest.responses))
            .filter(ServiceRequest.user_id == user_id)
            .order_by(ServiceRequest.created_at.desc(), ServiceRequest.id.desc())
            .all()
        )

    @staticmethod
    def get_contact_requests(
        db: Session, phone: Optional[str], email: Optional[str]
    ) -> list[ServiceRequest]:
        conditions = []
        if phone:
            conditions.append(ServiceRequest.customer_phone == phone)
        if email:
            conditions.append(ServiceRequest.customer_email == email)
        if not conditions:
            return []
        return (
            db.query(ServiceRequest)
            .options(selectinload(ServiceRequest.responses))
            .filter(or_(*conditions))
            .order_by(ServiceRequest.created_at.desc(), ServiceRequest.id.desc())
            .all()
        )

    @staticmethod
    def accept_offer(
        db: Session, service_request: ServiceRequest, response: ServiceRequestResponse
    ) -> None:
        """Accept one offer, reject the rest and close the request atomically"""
        response.status = ResponseStatus.ACCEPTED
        response.customer_viewed = True
        (
            db.query(ServiceRequestResponse)
            .filter(
                ServiceRequestResponse.service_request_id == service_request.id,
                ServiceRequestResponse.id != response.id,
            )
            .update({ServiceRequestResponse.status: ResponseStatus.REJECTED}, synchronize_session="fetch")
        )
        service_request.status = ServiceRequestStatus.ACCEPTED
        db.commit()

    @staticmethod
    def mark_viewed(db: Session, request_id: int) -> int:
        updated = (
            db.query(ServiceRequestResponse)
            .filter(ServiceRequestResponse.service_request_id == request_id)
            .update({ServiceRequestResponse.customer_viewed: True}, synchronize_session="fetch")
        )
        db.commit()
        return updated

    @staticmethod
    def update_status(
        db: Session, service_request: ServiceRequest, status: ServiceRequestStatus
    ) -> ServiceRequest:
        service_request.status = status
        db.commit()
        db.refresh(service_request)
        return service_request
