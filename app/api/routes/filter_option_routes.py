"""
Filter Option Routes

GET /filter-options - Distinct domains, locations, companies and CGPA cutoffs
"""

from fastapi import APIRouter

from app.services import internship_service
from app.schemas.schemas import FilterOptionsResponse

router = APIRouter(prefix="/filter-options", tags=["Filter Options"])


@router.get("", response_model=FilterOptionsResponse)
def filter_options():
    """Values for populating the internship filter controls."""
    return internship_service.get_filter_options()
