"""Inquiry repository - Database operations for consultation and project requests"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import ConsultationRequest, InquiryStatus, ProjectRequest


class InquiryRepository:
    """Repository for inquiry database operations"""

    @staticmethod
    def create_consultation(db: Session, **data) -> ConsultationRequest:
        consultation = ConsultationRequest(**data)
        db.add(consultation)
        db.commit()
        db.refresh(consultation)
        return consultation

    @staticmethod
    def create_project(db: Session, **data) -> ProjectRequest:
        project = ProjectRequest(**data)
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    @staticmethod
    def list_consultations(
        db: Session, business_id: int, status: Optional[InquiryStatus] = None
    ) -> list[ConsultationRequest]:
        query = db.query(ConsultationRequest).filter(ConsultationRequest.business_id == business_id)
        if status is not None:
            query = query.filter(ConsultationRequest.status == status)
        return query.order_by(
            ConsultationRequest.created_at.desc(), ConsultationRequest.id.desc()
        ).all()

    @staticmethod
    def list_projects(
        db: Session, business_id: int, status: Optional[InquiryStatus] = None
    ) -> list[ProjectRequest]:
        query = db.query(ProjectRequest).filter(ProjectRequest.business_id == business_id)
        if status is not None:
            query = query.filter(ProjectRequest.status == status)
        return query.order_by(ProjectRequest.created_at.desc(), ProjectRequest.id.desc()).all()

    @staticmethod
    def get_consultation(db: Session, consultation_id: int) -> Optional[ConsultationRequest]:
        return db.query(ConsultationRequest).filter(ConsultationRequest.id == consultation_id).first()

    @staticmethod
    def get_project(db: Session, project_id: int) -> Optional[ProjectRequest]:
        return db.query(ProjectRequest).filter(ProjectRequest.id == project_id).first()

    @staticmethod
    def update(db: Session, inquiry, **updates):
        for key, value in updates.items():
            setattr(inquiry, key, value)
        db.commit()
        db.refresh(inquiry)
        return inquiry
