"""Dashboard router - statistics endpoints for business owners"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import StatsResponse, TrendsResponse
from .service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    """Dependency injection for DashboardService"""
    return DashboardService(db)


@router.get("/trends", response_model=TrendsResponse)
async def get_trends(
    businessId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Day-over-day change labels for the overview cards"""
    return service.get_trends(businessId, current_user)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    businessId: Optional[int] = Query(None),
    date: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    return service.get_stats(businessId, date, current_user)


@router.get("/appointments/today")
async def get_today_appointments(
    businessId: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    appointments = service.get_today_appointments(businessId, current_user)
    return {"success": True, "data": appointments, "count": len(appointments)}


__all__ = ["router"]
