"""
Analytics Routes (ccpd/admin only)

GET /analytics/summary - Totals and unique company count
GET /analytics/domain-stats - Internships per domain (top 10)
GET /analytics/platform-growth - Daily signups and postings over N days
GET /analytics/popular-internships - Top 5 internships by applications
GET /analytics/application-status - Applications per status
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from app.core.auth import get_current_user
from app.services import analytics_service
from app.schemas.schemas import (
    AnalyticsSummary, CurrentUser, DomainStat, PlatformGrowth, PopularInternship, StatusCount
)

router = APIRouter(prefix="/analytics", tags=["Analytics"])


def _parse_days(days: Optional[str]) -> int:
    """
    Missing, non-numeric or non-positive values fall back to the default
    window. Values above MAX_GROWTH_DAYS pass through and are rejected.
    """
    try:
        value = int(days)
    except (TypeError, ValueError):
        return analytics_service.DEFAULT_GROWTH_DAYS
    return value if value > 0 else analytics_service.DEFAULT_GROWTH_DAYS


@router.get("/summary", response_model=AnalyticsSummary)
def summary(user: CurrentUser = Depends(get_current_user)):
    return analytics_service.get_summary(user)


@router.get("/domain-stats", response_model=List[DomainStat])
def domain_stats(user: CurrentUser = Depends(get_current_user)):
    return analytics_service.get_domain_stats(user)


@router.get("/platform-growth", response_model=PlatformGrowth)
def platform_growth(
    days: Optional[str] = Query(None, description="Window size in days (default 30)"),
    user: CurrentUser = Depends(get_current_user)
):
    return analytics_service.get_platform_growth(user, _parse_days(days))


@router.get("/popular-internships", response_model=List[PopularInternship])
def popular_internships(user: CurrentUser = Depends(get_current_user)):
    return analytics_service.get_popular_internships(user)


@router.get("/application-status", response_model=List[StatusCount])
def application_status(user: CurrentUser = Depends(get_current_user)):
    return analytics_service.get_status_breakdown(user)
