import os

# Must be set before the randevu package reads its configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("FIREBASE_PROJECT_ID", "randevu-test")

from datetime import date, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi import Depends  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from randevu.auth import get_current_user, get_optional_user  # noqa: E402
from randevu.database import Base, SessionLocal, engine, get_db  # noqa: E402
from randevu.domain.businesses.repository import BusinessRepository  # noqa: E402
from randevu.main import app  # noqa: E402
from randevu.models import (  # noqa: E402
    Appointment,
    AppointmentStatus,
    Category,
    ResponseStatus,
    Service,
    ServiceRequest,
    ServiceRequestResponse,
    ServiceRequestStatus,
    Staff,
    Subcategory,
    Urgency,
    User,
    UserRole,
)


def next_weekday(weekday: int, start: date = None) -> date:
    """First date after ``start`` (default: 30 days from today) with Python ``weekday``"""
    day = (start or date.today() + timedelta(days=30)) + timedelta(days=1)
    while day.weekday() != weekday:
        day += timedelta(days=1)
    return day


class Factory:
    """Creates committed rows for tests"""

    def __init__(self, db: Session):
        self.db = db
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def user(self, email=None, role=UserRole.USER, **kwargs) -> User:
        n = self._next()
        return self._save(
            User(
                firebase_uid=f"uid-{n}",
                email=email or f"user{n}@example.com",
                full_name=kwargs.pop("full_name", f"User {n}"),
                role=role,
                **kwargs,
            )
        )

    def business(self, owner: User, name=None, **kwargs):
        n = self._next()
        data = {
            "name": name or f"Business {n}",
            "slug": kwargs.pop("slug", f"business-{n}"),
            "category": kwargs.pop("category", "OTHER"),
            "phone": "05321234567",
            "email": f"biz{n}@example.com",
            "address": "Moda Caddesi No: 1",
        }
        data.update(kwargs)
        return BusinessRepository.create_business(self.db, owner.id, **data)

    def category(self, name="Güzellik", **kwargs) -> Category:
        n = self._next()
        return self._save(Category(name=name, slug=f"category-{n}", **kwargs))

    def subcategory(self, category: Category, name="Saç", **kwargs) -> Subcategory:
        n = self._next()
        return self._save(
            Subcategory(category_id=category.id, name=name, slug=f"subcategory-{n}", **kwargs)
        )

    def service(self, business, name="Saç Kesimi", price=100.0, duration=30, **kwargs) -> Service:
        return self._save(
            Service(business_id=business.id, name=name, price=price, duration=duration, **kwargs)
        )

    def staff(self, business, name="Ayşe Yılmaz", **kwargs) -> Staff:
        return self._save(Staff(business_id=business.id, name=name, **kwargs))

    def appointment(
        self,
        business,
        service,
        start: datetime,
        status=AppointmentStatus.CONFIRMED,
        staff=None,
        **kwargs,
    ) -> Appointment:
        n = self._next()
        data = {
            "customer_name": f"Customer {n}",
            "customer_phone": "05321234567",
            "customer_email": f"customer{n}@example.com",
        }
        data.update(kwargs)
        return self._save(
            Appointment(
                business_id=business.id,
                service_id=service.id if service else None,
                staff_id=staff.id if staff else None,
                date=start,
                status=status,
                **data,
            )
        )

    def service_request(self, **kwargs) -> ServiceRequest:
        n = self._next()
        now = datetime.now()
        data = {
            "customer_name": "Mehmet Demir",
            "customer_phone": "05329876543",
            "service_name": "Berber hizmeti",
            "urgency": Urgency.NORMAL,
            "province": "İstanbul",
            "district": "Kadıköy",
            "status": ServiceRequestStatus.ACTIVE,
            "expires_at": now + timedelta(days=7),
            "created_at": now - timedelta(minutes=1000 - n),
        }
        data.update(kwargs)
        return self._save(ServiceRequest(**data))

    def response(
        self, service_request, business, status=ResponseStatus.PENDING, **kwargs
    ) -> ServiceRequestResponse:
        data = {"message": "Yarın 10:00'da gelebiliriz", "created_at": datetime.now()}
        data.update(kwargs)
        return self._save(
            ServiceRequestResponse(
                service_request_id=service_request.id,
                business_id=business.id,
                status=status,
                **data,
            )
        )


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def client(db):
    app.dependency_overrides.clear()
    with_client = TestClient(app)
    yield with_client
    app.dependency_overrides.clear()


@pytest.fixture
def login():
    """Authenticate requests as ``user``; ``None`` makes the caller a guest"""

    def _login(user):
        user_id = user.id if user is not None else None

        def current_user(db: Session = Depends(get_db)):
            return db.get(User, user_id) if user_id is not None else None

        if user is not None:
            app.dependency_overrides[get_current_user] = current_user
        else:
            app.dependency_overrides.pop(get_current_user, None)
        app.dependency_overrides[get_optional_user] = current_user

    return _login
