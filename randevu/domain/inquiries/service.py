"""Inquiry service - Business logic for consultation and project requests"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import (
    Business,
    ConsultationRequest,
    InquiryStatus,
    ProjectRequest,
    ServiceType,
    User,
)
from ...shared.validators import validate_email, validate_tr_phone
from ..businesses.service import BusinessService
from .repository import InquiryRepository
from .schemas import (
    ConsultationRequestCreate,
    ContactInquiryCreate,
    InquiryStatusUpdate,
    InquiryType,
    ProjectRequestCreate,
    ProjectRequestReply,
)

logger = logging.getLogger(__name__)

CONSULTATION_SERVICE_TYPES = (ServiceType.CONSULTATION, ServiceType.HYBRID)
PROJECT_SERVICE_TYPES = (ServiceType.PROJECT, ServiceType.HYBRID)


def _contact(phone: str, email: Optional[str]) -> tuple[str, Optional[str]]:
    try:
        return validate_tr_phone(phone), validate_email(email) or None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


class InquiryService:
    """Service layer for inquiries addressed to one business"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InquiryRepository()
        self.businesses = BusinessService(db)

    def _get_business(self, business_id: int) -> Business:
        business = self.db.get(Business, business_id)
        if not business:
            raise HTTPException(status_code=404, detail="İşletme bulunamadı")
        return business

    def _save(self, create, label: str, business_id: int, /, **data):
        try:
            return create(self.db, **data)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create {label} for business {business_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Sunucu hatası oluştu") from e

    # ========================================================================
    # INTAKE
    # ========================================================================

    def create_consultation(self, data: ConsultationRequestCreate) -> ConsultationRequest:
        if not (data.businessId and data.customerName and data.customerPhone and data.consultationTopic):
            raise HTTPException(status_code=400, detail="Gerekli alanlar eksik")

        business = self._get_business(data.businessId)
        if business.service_type not in CONSULTATION_SERVICE_TYPES:
            raise HTTPException(status_code=400, detail="Bu işletme danışmanlık hizmeti vermiyor")

        phone, email = _contact(data.customerPhone, data.customerEmail)
        consultation = self._save(
            self.repo.create_consultation,
            "consultation request",
            business.id,
            business_id=business.id,
            customer_name=data.customerName.strip(),
            customer_phone=phone,
            customer_email=email,
            consultation_topic=data.consultationTopic.strip(),
            preferred_datetime=data.preferredDateTime,
            meeting_type=data.meetingType,
            notes=data.notes,
            status=InquiryStatus.PENDING,
        )
        logger.info(f"Consultation request {consultation.id} created for business {business.id}")
        return consultation

    def create_contact_inquiry(self, data: ContactInquiryCreate) -> ConsultationRequest:
        """General contact form message, stored as a consultation request"""
        if not (
            data.businessId and data.subject and data.message and data.contactName and data.contactPhone
        ):
            raise HTTPException(status_code=400, detail="Lütfen tüm zorunlu alanları doldurun")

        business = self._get_business(data.businessId)
        phone, email = _contact(data.contactPhone, data.contactEmail)
        prefix = f"[{data.inquiryType}] " if data.inquiryType else ""
        inquiry = self._save(
            self.repo.create_consultation,
            "contact inquiry",
            business.id,
            business_id=business.id,
            customer_name=data.contactName.strip(),
            customer_phone=phone,
            customer_email=email,
            consultation_topic=data.subject.strip(),
            notes=f"{prefix}{data.message}",
            status=InquiryStatus.PENDING,
        )
        logger.info(f"Contact inquiry {inquiry.id} created for business {business.id}")
        return inquiry

    def create_project(self, data: ProjectRequestCreate) -> ProjectRequest:
        if not (data.businessId and data.customerName and data.customerPhone and data.projectDescription):
            raise HTTPException(status_code=400, detail="Gerekli alanlar eksik")

        business = self._get_business(data.businessId)
        if business.service_type not in PROJECT_SERVICE_TYPES:
            raise HTTPException(status_code=400, detail="Bu işletme proje bazlı hizmet vermiyor")

        phone, email = _contact(data.customerPhone, data.customerEmail)
        project = self._save(
            self.repo.create_project,
            "project request",
            business.id,
            business_id=business.id,
            customer_name=data.customerName.strip(),
            customer_phone=phone,
            customer_email=email,
            project_description=data.projectDescription.strip(),
            estimated_budget=data.estimatedBudget,
            preferred_date=data.preferredDate,
            location=data.location,
            notes=data.notes,
            status=InquiryStatus.PENDING,
        )
        logger.info(f"Project request {project.id} created for business {business.id}")
        return project

    # ========================================================================
    # OWNER VIEWS
    # ========================================================================

    def get_consultations(
        self, business_id: Optional[int], status: Optional[InquiryStatus], user: User
    ) -> list[ConsultationRequest]:
        if business_id is None:
            raise HTTPException(status_code=400, detail="Business ID gerekli")
        business = self.businesses.get_owned_business(business_id, user)
        return self.repo.list_consultations(self.db, business.id, status)

    def get_projects(
        self, business_id: Optional[int], status: Optional[InquiryStatus], user: User
    ) -> list[ProjectRequest]:
        if business_id is None:
            raise HTTPException(status_code=400, detail="Business ID gerekli")
        business = self.businesses.get_owned_business(business_id, user)
        return self.repo.list_projects(self.db, business.id, status)

    def get_project(self, project_id: int) -> ProjectRequest:
        project = self.repo.get_project(self.db, project_id)
        if not project:
            raise HTTPException(status_code=404, detail="Proje talebi bulunamadı")
        return project

    def get_inquiries(
        self, business_id: Optional[int], user: User
    ) -> list[tuple[InquiryType, object]]:
        """Consultation and project requests of a business, newest first"""
        if business_id is None:
            raise HTTPException(status_code=400, detail="Business ID gerekli")
        business = self.businesses.get_owned_business(business_id, user)
        inquiries = [
            (InquiryType.CONSULTATION, c) for c in self.repo.list_consultations(self.db, business.id)
        ]
        inquiries += [(InquiryType.PROJECT, p) for p in self.repo.list_projects(self.db, business.id)]
        inquiries.sort(key=lambda item: item[1].created_at or datetime.min, reverse=True)
        return inquiries

    # ========================================================================
    # REPLIES
    # ========================================================================

    def reply_to_project(
        self, project_id: int, data: ProjectRequestReply, user: User, now: Optional[datetime] = None
    ) -> ProjectRequest:
        if not data.businessResponse or not data.businessResponse.strip():
            raise HTTPException(status_code=400, detail="Yanıt mesajı gerekli")

        project = self.get_project(project_id)
        if project.business.owner_id != user.id:
            raise HTTPException(status_code=403, detail="Bu proje talebi size ait değil")

        project = self.repo.update(
            self.db,
            project,
            business_response=data.businessResponse.strip(),
            estimated_price=data.estimatedPrice,
            status=data.status,
            response_date=now or datetime.now(),
        )
        logger.info(f"Project request {project.id} answered by business {project.business_id}")
        return project

    def update_status(
        self, data: InquiryStatusUpdate, user: User, now: Optional[datetime] = None
    ) -> tuple[InquiryType, object]:
        if data.type == InquiryType.CONSULTATION:
            inquiry = self.repo.get_consultation(self.db, data.inquiryId)
        else:
            inquiry = self.repo.get_project(self.db, data.inquiryId)
        if not inquiry:
            raise HTTPException(status_code=404, detail="Talep bulunamadı")
        if inquiry.business.owner_id != user.id:
            raise HTTPException(status_code=403, detail="Bu işlem için yetkiniz yok")

        updates = {"status": data.status}
        if data.businessResponse:
            updates["business_response"] = data.businessResponse
            updates["response_date"] = now or datetime.now()
        inquiry = self.repo.update(self.db, inquiry, **updates)
        logger.info(f"{data.type.value} inquiry {inquiry.id} moved to {inquiry.status.value}")
        return data.type, inquiry
