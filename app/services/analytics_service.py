"""
Analytics Service - read-only platform statistics for CCPD/admin.

All numbers come from MongoDB aggregation pipelines over the users,
internships and applications collections. Nothing here writes.
"""

from datetime import timedelta
from typing import List

from app.core.errors import ValidationError
from app.core.policy import Action, authorize
from app.db.mongodb import COLLECTIONS
from app.schemas.schemas import (
    AnalyticsSummary, CurrentUser, DomainStat, InternshipGrowthPoint, PlatformGrowth,
    PopularInternship, StatusCount, UserGrowthPoint,
)
from app.services.mongo_service import ApplicationStore, InternshipStore, UserStore
from app.utils.dates import utcnow

DEFAULT_GROWTH_DAYS = 30
# About a century; larger windows overflow datetime arithmetic
MAX_GROWTH_DAYS = 36500
TOP_DOMAINS = 10
TOP_INTERNSHIPS = 5
DAY_FORMAT = "%Y-%m-%d"


def get_summary(caller: CurrentUser) -> AnalyticsSummary:
    authorize(Action.view_analytics, caller)
    internships = InternshipStore()

    distinct_companies = list(internships.collection.aggregate([
        {"$group": {"_id": "$company_name"}},
        {"$count": "unique_companies"},
    ]))

    return AnalyticsSummary(
        total_internships=internships.count(),
        total_applications=ApplicationStore().count(),
        total_users=UserStore().count(),
        unique_companies=distinct_companies[0]["unique_companies"] if distinct_companies else 0,
    )


def get_domain_stats(caller: CurrentUser) -> List[DomainStat]:
    """Internships per domain tag, top 10. A posting counts once per tag."""
    authorize(Action.view_analytics, caller)
    rows = InternshipStore().collection.aggregate([
        {"$unwind": "$domain"},
        {"$group": {"_id": "$domain", "count": {"$sum": 1}}},
        {"$sort": {"count": -1, "_id": 1}},
        {"$limit": TOP_DOMAINS},
        {"$project": {"_id": 0, "domain": "$_id", "count": 1}},
    ])
    return [DomainStat(**row) for row in rows]


def _daily_counts(collection, since) -> List[dict]:
    """Documents created per calendar day since ``since``, oldest day first."""
    return list(collection.aggregate([
        {"$match": {"created_at": {"$gte": since}}},
        {"$group": {
            "_id": {"$dateToString": {"format": DAY_FORMAT, "date": "$created_at"}},
            "count": {"$sum": 1},
        }},
        {"$sort": {"_id": 1}},
    ]))


def get_platform_growth(caller: CurrentUser, days: int = DEFAULT_GROWTH_DAYS) -> PlatformGrowth:
    """
    New users and new internships per day over the trailing window.
    Days with no activity are omitted rather than zero-filled.
    """
    authorize(Action.view_analytics, caller)
    if days < 1 or days > MAX_GROWTH_DAYS:
        raise ValidationError(f"days must be between 1 and {MAX_GROWTH_DAYS}")
    since = utcnow() - timedelta(days=days)

    users = _daily_counts(UserStore().collection, since)
    internships = _daily_counts(InternshipStore().collection, since)

    return PlatformGrowth(
        user_growth=[UserGrowthPoint(date=row["_id"], user_signups=row["count"]) for row in users],
        internship_growth=[
            InternshipGrowthPoint(date=row["_id"], internships_posted=row["count"]) for row in internships
        ],
        days=days,
    )


def get_popular_internships(caller: CurrentUser) -> List[PopularInternship]:
    """Top 5 internships by number of applications."""
    authorize(Action.view_analytics, caller)
    rows = ApplicationStore().collection.aggregate([
        {"$group": {"_id": "$internship_id", "application_count": {"$sum": 1}}},
        {"$sort": {"application_count": -1, "_id": 1}},
        {"$lookup": {
            "from": COLLECTIONS["internships"],
            "localField": "_id",
            "foreignField": "_id",
            "as": "internship",
        }},
        # Drops applications whose internship is gone
        {"$unwind": "$internship"},
        {"$limit": TOP_INTERNSHIPS},
        {"$project": {
            "_id": 0,
            "internship_id": "$_id",
            "title": "$internship.title",
            "company_name": "$internship.company_name",
            "application_count": 1,
        }},
    ])
    return [
        PopularInternship(**{**row, "internship_id": str(row["internship_id"])})
        for row in rows
    ]


def get_status_breakdown(caller: CurrentUser) -> List[StatusCount]:
    authorize(Action.view_analytics, caller)
    rows = ApplicationStore().collection.aggregate([
        {"$group": {"_id": "$status", "count": {"$sum": 1}}},
        {"$project": {"_id": 0, "status": "$_id", "count": 1}},
        {"$sort": {"count": -1, "status": 1}},
    ])
    return [StatusCount(**row) for row in rows]
