"""Raffle service - Business logic for the monthly customer raffle"""

import logging
from datetime import date
from types import MappingProxyType
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import RaffleParticipation, User
from .repository import RaffleRepository
from .rights import available_rights, draw_date, month_bounds

logger = logging.getLogger(__name__)

# Prize offered every month until prizes are managed per raffle
MONTHLY_PRIZE = MappingProxyType(
    {
        "title": "iPhone 15 Pro Max",
        "description": "256GB Titan Blue renk iPhone 15 Pro Max.",
        "value": 65000.0,
        "image": "https://images.unsplash.com/photo-1556656793-08538906a9f8?w=512&h=512&fit=crop",
        "sponsor": "RandeVur",
        "category": "Teknoloji",
    }
)


class RaffleService:
    """Service layer for raffle rights and participation"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RaffleRepository()

    def _rights(self, user: User, today: date) -> tuple[int, int]:
        start, end = month_bounds(today)
        total = self.repo.count_completed_appointments(self.db, user.email, start, end)
        used = self.repo.used_rights(self.db, user.id, today.month, today.year)
        return total, used

    def get_raffle_data(self, user: User, today: Optional[date] = None) -> dict:
        """Rights, qualifying appointments, prize and history for the current month"""
        today = today or date.today()
        start, end = month_bounds(today)
        appointments = self.repo.get_completed_appointments(self.db, user.email, start, end)
        used = self.repo.used_rights(self.db, user.id, today.month, today.year)
        history = self.repo.get_history(self.db, user.id, today.month, today.year)

        return {
            "currentMonth": f"{today.month:02d}",
            "year": today.year,
            "totalRights": len(appointments),
            "usedRights": used,
            "availableRights": available_rights(len(appointments), used),
            "eligibleAppointments": [
                {
                    "id": a.id,
                    "date": a.date.isoformat(),
                    "time": a.date.strftime("%H:%M"),
                    "business": {
                        "name": a.business.name,
                        "slug": a.business.slug,
                        "category": a.business.category,
                    },
                    "service": {
                        "name": a.service.name,
                        "price": a.service.price,
                        "duration": a.service.duration,
                    },
                    "staff": {"name": a.staff.name} if a.staff else None,
                    "raffleRightEarned": True,
                }
                for a in appointments
            ],
            "currentPrize": {"id": f"prize-{today.month:02d}-{today.year}", **MONTHLY_PRIZE},
            "raffleHistory": [_history_item(p) for p in history],
            "nextDrawDate": draw_date(today).isoformat(),
        }

    def participate(
        self, rights_to_use: Optional[int], user: User, today: Optional[date] = None
    ) -> RaffleParticipation:
        """Spend rights on this month's draw, creating the raffle on first entry"""
        if not rights_to_use or rights_to_use <= 0:
            raise HTTPException(status_code=400, detail="Geçersiz hak sayısı")

        today = today or date.today()
        total, used = self._rights(user, today)
        available = available_rights(total, used)
        if rights_to_use > available:
            raise HTTPException(
                status_code=400, detail=f"Sadece {available} adet hakkınız bulunuyor"
            )

        try:
            raffle = self.repo.get_raffle(self.db, today.month, today.year)
            if not raffle:
                raffle = self.repo.create_raffle(
                    self.db, today.month, today.year, draw_date(today), **MONTHLY_PRIZE
                )
                logger.info(f"Raffle created for {today.month:02d}/{today.year}")
            participation = self.repo.create_participation(
                self.db,
                user_id=user.id,
                raffle_id=raffle.id,
                month=today.month,
                year=today.year,
                rights_used=rights_to_use,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Raffle participation failed for user {user.id}: {str(e)}")
            raise HTTPException(
                status_code=500, detail="Çekilişe katılırken bir hata oluştu"
            ) from e

        logger.info(f"User {user.id} entered raffle {raffle.id} with {rights_to_use} rights")
        return participation


def _history_item(participation: RaffleParticipation) -> dict:
    raffle = participation.raffle
    prize = raffle.prize if raffle else None
    return {
        "id": participation.id,
        "month": str(participation.month),
        "year": participation.year,
        "participatedRights": participation.rights_used,
        "won": participation.won,
        "prize": {
            "title": prize.title,
            "description": prize.description,
            "value": prize.value,
            "image": prize.image,
        }
        if prize
        else None,
        "winnerAnnounced": raffle.winner_announced if raffle else False,
        "drawDate": raffle.draw_date.isoformat() if raffle else None,
    }
