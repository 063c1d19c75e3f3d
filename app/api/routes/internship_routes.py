"""
Internship Routes

GET /internships - List internships with filters and pagination
GET /internships/mine - Internships posted by the caller (ccpd/admin)
GET /internships/{internship_id} - Get internship details
POST /internships - Create internship (ccpd/admin)
PUT /internships/{internship_id} - Update internship (ccpd/admin)
DELETE /internships/{internship_id} - Delete internship and its applications (ccpd/admin)
"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from app.core.auth import get_current_user, get_optional_user
from app.core.config import get_settings
from app.services import internship_service
from app.services.query_builder import InternshipFilters
from app.schemas.schemas import (
    CurrentUser, InternshipCreate, InternshipUpdate, InternshipResponse,
    InternshipListResponse, InternshipCreatedResponse, MessageResponse
)

router = APIRouter(prefix="/internships", tags=["Internships"])
settings = get_settings()


@router.get("", response_model=InternshipListResponse)
def list_internships(
    q: Optional[str] = Query(None, description="Search title, company, location, description, skills, domain"),
    domain: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    company: Optional[str] = Query(None),
    cgpa_cutoff: Optional[str] = Query(None, alias="cgpaCutoff", description="Ignored unless numeric"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    user: Optional[CurrentUser] = Depends(get_optional_user)
):
    """
    List internships, newest first.

    Students only see postings open to their branch (or to all branches).
    """
    filters = InternshipFilters(q=q, domain=domain, location=location, company=company, cgpa_cutoff=cgpa_cutoff)
    return internship_service.list_internships(filters, user, page, limit)


@router.get("/mine", response_model=List[InternshipResponse])
def my_internships(user: CurrentUser = Depends(get_current_user)):
    """Internships posted by the calling CCPD/admin user."""
    return internship_service.list_posted_by(user)


@router.get("/{internship_id}", response_model=InternshipResponse)
def get_internship(internship_id: str):
    """Get details of a specific internship."""
    return internship_service.get_internship(internship_id)


@router.post("", response_model=InternshipCreatedResponse, status_code=201)
def create_internship(data: InternshipCreate, user: CurrentUser = Depends(get_current_user)):
    """Create a new internship posting. CCPD/admin only."""
    internship = internship_service.create_internship(data, user)
    return InternshipCreatedResponse(message="Internship posted successfully", internship=internship)


@router.put("/{internship_id}", response_model=InternshipResponse)
def update_internship(
    internship_id: str,
    data: InternshipUpdate,
    user: CurrentUser = Depends(get_current_user)
):
    """Update an internship posting. Only provided fields change."""
    return internship_service.update_internship(internship_id, data, user)


@router.delete("/{internship_id}", response_model=MessageResponse)
def delete_internship(internship_id: str, user: CurrentUser = Depends(get_current_user)):
    """Delete an internship. Cascades to its applications."""
    internship_service.delete_internship(internship_id, user)
    return MessageResponse(message="Internship and associated applications deleted successfully")
