"""Dashboard service - daily statistics and trends for business owners"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, AppointmentStatus, User
from ...shared.validators import parse_day
from ..businesses.service import BusinessService
from .trends import DayMetrics, build_trends

logger = logging.getLogger(__name__)

STATUS_BREAKDOWN = (
    AppointmentStatus.PENDING,
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.COMPLETED,
    AppointmentStatus.CANCELLED,
)


class DashboardService:
    """Service layer for dashboard figures"""

    def __init__(self, db: Session):
        self.db = db
        self.businesses = BusinessService(db)

    def _day_appointments(self, business_id: int, day: date) -> list[Appointment]:
        """Appointments starting on ``day`` (half-open day range), earliest first"""
        start = datetime.combine(day, time.min)
        return (
            self.db.query(Appointment)
            .options(joinedload(Appointment.service), joinedload(Appointment.staff))
            .filter(
                Appointment.business_id == business_id,
                Appointment.date >= start,
                Appointment.date < start + timedelta(days=1),
            )
            .order_by(Appointment.date.asc(), Appointment.id.asc())
            .all()
        )

    def get_trends(
        self, business_id: Optional[int], user: User, today: Optional[date] = None
    ) -> dict:
        """Today vs yesterday: appointments, revenue, customers, completion rate"""
        business = self.businesses.resolve_business(business_id, user)
        today = today or date.today()

        current = DayMetrics.from_appointments(self._day_appointments(business.id, today))
        previous = DayMetrics.from_appointments(
            self._day_appointments(business.id, today - timedelta(days=1))
        )
        logger.debug(f"Trends for business {business.id}: today={current} yesterday={previous}")
        return build_trends(current, previous)

    def get_stats(self, business_id: Optional[int], day: Optional[str], user: User) -> dict:
        if business_id is None:
            raise HTTPException(status_code=400, detail="Business ID required")
        business = self.businesses.get_owned_business(business_id, user)

        if day:
            try:
                target = parse_day(day)
            except ValueError as e:
                raise HTTPException(status_code=400, detail="Geçersiz tarih formatı (YYYY-MM-DD)") from e
        else:
            target = date.today()

        appointments = self._day_appointments(business.id, target)
        metrics = DayMetrics.from_appointments(appointments)

        hourly = {}
        for a in appointments:
            hourly[a.date.hour] = hourly.get(a.date.hour, 0) + 1

        return {
            "date": target.isoformat(),
            "totalAppointments": metrics.appointments,
            "revenue": metrics.revenue,
            "appointmentsByStatus": {
                status.value: sum(1 for a in appointments if a.status == status)
                for status in STATUS_BREAKDOWN
            },
            "hourlyDistribution": hourly,
            "completedAppointments": metrics.completed,
        }

    def get_today_appointments(
        self, business_id: Optional[int], user: User, today: Optional[date] = None
    ) -> list[dict]:
        business = self.businesses.resolve_business(business_id, user)
        appointments = self._day_appointments(business.id, today or date.today())
        return [
            {
                "id": a.id,
                "time": a.date.strftime("%H:%M"),
                "clientName": a.customer_name or "Bilinmeyen Müşteri",
                "clientEmail": a.customer_email,
                "serviceName": a.service.name if a.service else "Hizmet Belirtilmemiş",
                "staffName": a.staff.name if a.staff else None,
                "status": a.status.value,
                "duration": a.service.duration if a.service else None,
                "price": a.service.price if a.service else None,
            }
            for a in appointments
        ]
