import enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class UserRole(str, enum.Enum):
    USER = "USER"
    BUSINESS_OWNER = "BUSINESS_OWNER"
    ADMIN = "ADMIN"


class AppointmentStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class ServiceRequestStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    RESPONDED = "RESPONDED"
    ACCEPTED = "ACCEPTED"
    CLOSED = "CLOSED"
    EXPIRED = "EXPIRED"


class ResponseStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class Urgency(str, enum.Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class LeaveType(str, enum.Enum):
    FULL_DAY = "FULL_DAY"
    MULTI_DAY = "MULTI_DAY"
    PARTIAL = "PARTIAL"


class LeaveStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ServiceType(str, enum.Enum):
    APPOINTMENT = "APPOINTMENT"
    CONSULTATION = "CONSULTATION"
    PROJECT = "PROJECT"
    HYBRID = "HYBRID"


class InquiryStatus(str, enum.Enum):
    PENDING = "PENDING"
    RESPONDED = "RESPONDED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"


class MeetingType(str, enum.Enum):
    FACE_TO_FACE = "FACE_TO_FACE"
    ONLINE = "ONLINE"
    PHONE = "PHONE"


def _enum_column(enum_cls, **kwargs):
    """Store enums by value as plain strings so invalid values fail on write"""
    return Column(
        Enum(
            enum_cls,
            native_enum=False,
            length=20,
            validate_strings=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        **kwargs,
    )


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    role = _enum_column(UserRole, default=UserRole.USER, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    businesses = relationship("Business", back_populates="owner")


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    order_index = Column(Integer, default=0, nullable=False)

    subcategories = relationship(
        "Subcategory", back_populates="category", order_by="Subcategory.order_index"
    )


class Subcategory(Base):
    __tablename__ = "subcategories"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    order_index = Column(Integer, default=0, nullable=False)

    category = relationship("Category", back_populates="subcategories")


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    # Legacy free-text category code (BARBER, BEAUTY_SALON, ...)
    category = Column(String(50), nullable=True, default="OTHER")
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    subcategory_id = Column(Integer, ForeignKey("subcategories.id"), nullable=True)
    province = Column(String(100), nullable=True)
    district = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_premium = Column(Boolean, default=False, nullable=False)
    service_type = _enum_column(ServiceType, default=ServiceType.APPOINTMENT, nullable=False)
    appointment_settings = Column(JSON, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    owner = relationship("User", back_populates="businesses")
    working_hours = relationship(
        "WorkingHour", back_populates="business", cascade="all, delete-orphan"
    )
    services = relationship("Service", back_populates="business", cascade="all, delete-orphan")
    staff = relationship("Staff", back_populates="business", cascade="all, delete-orphan")


class WorkingHour(Base):
    __tablename__ = "working_hours"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday
    is_open = Column(Boolean, default=True, nullable=False)
    open_time = Column(String(5), nullable=False)  # HH:MM
    close_time = Column(String(5), nullable=False)  # HH:MM

    business = relationship("Business", back_populates="working_hours")


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    price = Column(Float, nullable=False, default=0)
    duration = Column(Integer, nullable=False, default=30)  # minutes
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    business = relationship("Business", back_populates="services")


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    specialty = Column(String(255), nullable=True)
    experience = Column(Integer, nullable=True)  # years
    bio = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    business = relationship("Business", back_populates="staff")
    leaves = relationship("StaffLeave", back_populates="staff", cascade="all, delete-orphan")


class StaffLeave(Base):
    __tablename__ = "staff_leaves"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=True)  # PARTIAL leaves only
    end_time = Column(String(5), nullable=True)
    type = _enum_column(LeaveType, nullable=False)
    reason = Column(String(255), nullable=False)
    status = _enum_column(LeaveStatus, default=LeaveStatus.APPROVED, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    staff = relationship("Staff", back_populates="leaves")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=True, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    date = Column(DateTime, nullable=False, index=True)  # start instant
    status = _enum_column(AppointmentStatus, default=AppointmentStatus.PENDING, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=True)
    customer_email = Column(String(255), nullable=True, index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    business = relationship("Business")
    service = relationship("Service")
    staff = relationship("Staff")
    review = relationship(
        "Review", back_populates="appointment", uselist=False, cascade="all, delete-orphan"
    )


class ServiceRequest(Base):
    __tablename__ = "service_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=False, index=True)
    customer_email = Column(String(255), nullable=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    subcategory_id = Column(Integer, ForeignKey("subcategories.id"), nullable=True)
    service_name = Column(String(255), nullable=False)
    service_details = Column(Text, nullable=True)
    budget = Column(Float, nullable=True)
    urgency = _enum_column(Urgency, default=Urgency.NORMAL, nullable=False)
    province = Column(String(100), nullable=True)
    district = Column(String(100), nullable=True)
    address = Column(String(500), nullable=True)
    preferred_date = Column(DateTime, nullable=True)
    preferred_time = Column(String(5), nullable=True)
    flexible_timing = Column(Boolean, default=True, nullable=False)
    status = _enum_column(
        ServiceRequestStatus, default=ServiceRequestStatus.ACTIVE, nullable=False
    )
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User")
    responses = relationship(
        "ServiceRequestResponse",
        back_populates="service_request",
        cascade="all, delete-orphan",
        order_by="ServiceRequestResponse.created_at.desc()",
    )


class ServiceRequestResponse(Base):
    __tablename__ = "service_request_responses"
    __table_args__ = (
        UniqueConstraint("service_request_id", "business_id", name="uq_response_request_business"),
    )

    id = Column(Integer, primary_key=True, index=True)
    service_request_id = Column(
        Integer, ForeignKey("service_requests.id"), nullable=False, index=True
    )
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    status = _enum_column(ResponseStatus, default=ResponseStatus.PENDING, nullable=False)
    message = Column(Text, nullable=False)
    proposed_price = Column(Float, nullable=True)
    proposed_date = Column(DateTime, nullable=True)
    proposed_time = Column(String(5), nullable=True)
    availability = Column(String(255), nullable=True)
    customer_viewed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    service_request = relationship("ServiceRequest", back_populates="responses")
    business = relationship("Business")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), unique=True, nullable=False)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=True)
    customer_email = Column(String(255), nullable=True)
    is_approved = Column(Boolean, default=True, nullable=False)
    is_visible = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    appointment = relationship("Appointment", back_populates="review")


class ConsultationRequest(Base):
    __tablename__ = "consultation_requests"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=False)
    customer_email = Column(String(255), nullable=True)
    consultation_topic = Column(String(255), nullable=False)
    preferred_datetime = Column(DateTime, nullable=True)
    meeting_type = _enum_column(MeetingType, default=MeetingType.FACE_TO_FACE, nullable=False)
    notes = Column(Text, nullable=True)
    status = _enum_column(InquiryStatus, default=InquiryStatus.PENDING, nullable=False)
    business_response = Column(Text, nullable=True)
    proposed_datetime = Column(DateTime, nullable=True)
    response_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    business = relationship("Business")


class ProjectRequest(Base):
    __tablename__ = "project_requests"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("businesses.id"), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(20), nullable=False)
    customer_email = Column(String(255), nullable=True)
    project_description = Column(Text, nullable=False)
    estimated_budget = Column(Float, nullable=True)
    preferred_date = Column(DateTime, nullable=True)
    location = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)
    status = _enum_column(InquiryStatus, default=InquiryStatus.PENDING, nullable=False)
    business_response = Column(Text, nullable=True)
    estimated_price = Column(Float, nullable=True)
    response_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    business = relationship("Business")


class Prize(Base):
    __tablename__ = "prizes"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    value = Column(Float, nullable=True)
    image = Column(String(500), nullable=True)
    sponsor = Column(String(255), nullable=True)
    category = Column(String(100), nullable=True)


class Raffle(Base):
    __tablename__ = "raffles"
    __table_args__ = (UniqueConstraint("month", "year", name="uq_raffle_month_year"),)

    id = Column(Integer, primary_key=True, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    prize_id = Column(Integer, ForeignKey("prizes.id"), nullable=False)
    draw_date = Column(Date, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    winner_announced = Column(Boolean, default=False, nullable=False)

    prize = relationship("Prize")
    participations = relationship("RaffleParticipation", back_populates="raffle")


class RaffleParticipation(Base):
    __tablename__ = "raffle_participations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    raffle_id = Column(Integer, ForeignKey("raffles.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    rights_used = Column(Integer, nullable=False)
    won = Column(Boolean, default=False, nullable=False)
    participated_at = Column(DateTime, server_default=func.now())

    raffle = relationship("Raffle", back_populates="participations")
