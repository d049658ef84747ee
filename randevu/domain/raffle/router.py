"""Raffle router - FastAPI endpoints for the monthly customer raffle"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import ParticipationCreate
from .service import RaffleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/raffle", tags=["Raffle"])


def get_raffle_service(db: Session = Depends(get_db)) -> RaffleService:
    """Dependency injection for RaffleService"""
    return RaffleService(db)


@router.get("/data")
async def get_raffle_data(
    current_user: User = Depends(get_current_user),
    service: RaffleService = Depends(get_raffle_service),
):
    return service.get_raffle_data(current_user)


@router.post("/participate")
async def participate(
    data: ParticipationCreate,
    current_user: User = Depends(get_current_user),
    service: RaffleService = Depends(get_raffle_service),
):
    participation = service.participate(data.rightsToUse, current_user)
    return {
        "success": True,
        "rightsUsed": participation.rights_used,
        "participationId": participation.id,
        "message": f"{participation.rights_used} adet hakkınızla çekilişe başarıyla katıldınız!",
    }


__all__ = ["router"]
