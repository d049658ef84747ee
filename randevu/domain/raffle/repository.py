"""Raffle repository - Database operations for raffles and participations"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import and_, func, not_
from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, AppointmentStatus, Prize, Raffle, RaffleParticipation


class RaffleRepository:
    """Repository for raffle database operations"""

    @staticmethod
    def get_completed_appointments(
        db: Session, email: str, start: datetime, end: datetime
    ) -> list[Appointment]:
        return (
            db.query(Appointment)
            .options(
                joinedload(Appointment.business),
                joinedload(Appointment.service),
                joinedload(Appointment.staff),
            )
            .filter(
                Appointment.customer_email == email,
                Appointment.status == AppointmentStatus.COMPLETED,
                Appointment.date >= start,
                Appointment.date <= end,
            )
            .order_by(Appointment.date.desc())
            .all()
        )

    @staticmethod
    def count_completed_appointments(db: Session, email: str, start: datetime, end: datetime) -> int:
        return (
            db.query(Appointment)
            .filter(
                Appointment.customer_email == email,
                Appointment.status == AppointmentStatus.COMPLETED,
                Appointment.date >= start,
                Appointment.date <= end,
            )
            .count()
        )

    @staticmethod
    def used_rights(db: Session, user_id: int, month: int, year: int) -> int:
        used = (
            db.query(func.coalesce(func.sum(RaffleParticipation.rights_used), 0))
            .filter(
                RaffleParticipation.user_id == user_id,
                RaffleParticipation.month == month,
                RaffleParticipation.year == year,
            )
            .scalar()
        )
        return int(used)

    @staticmethod
    def get_history(db: Session, user_id: int, month: int, year: int) -> list[RaffleParticipation]:
        """Participations of earlier (and later) months, newest month first"""
        return (
            db.query(RaffleParticipation)
            .options(joinedload(RaffleParticipation.raffle).joinedload(Raffle.prize))
            .filter(
                RaffleParticipation.user_id == user_id,
                not_(and_(RaffleParticipation.month == month, RaffleParticipation.year == year)),
            )
            .order_by(RaffleParticipation.year.desc(), RaffleParticipation.month.desc())
            .all()
        )

    @staticmethod
    def get_raffle(db: Session, month: int, year: int) -> Optional[Raffle]:
        return db.query(Raffle).filter(Raffle.month == month, Raffle.year == year).first()

    @staticmethod
    def create_raffle(db: Session, month: int, year: int, draw_date: date, **prize_data) -> Raffle:
        """Create the month's raffle with its prize; flushed, not committed"""
        prize = Prize(**prize_data)
        db.add(prize)
        db.flush()
        raffle = Raffle(month=month, year=year, prize_id=prize.id, draw_date=draw_date)
        db.add(raffle)
        db.flush()
        return raffle

    @staticmethod
    def create_participation(db: Session, **participation_data) -> RaffleParticipation:
        participation = RaffleParticipation(**participation_data)
        db.add(participation)
        db.commit()
        db.refresh(participation)
        return participation
