"""
Application Routes

POST /applications - Apply to an internship (student only)
GET /applications/my - Get my applications (student only)
GET /applications/internship/{internship_id} - Applicants for an internship (ccpd/admin)
PATCH /applications/{application_id}/status - Update application status (ccpd/admin)
"""

from fastapi import APIRouter, Depends
from typing import List

from app.core.auth import get_current_user
from app.services import application_service
from app.schemas.schemas import (
    ApplicationCreate, ApplicationResponse, ApplicationStatusUpdate, CurrentUser
)

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("", response_model=ApplicationResponse, status_code=201)
def apply(data: ApplicationCreate, user: CurrentUser = Depends(get_current_user)):
    """Apply to an internship. Cannot apply twice or after the deadline."""
    return application_service.submit_application(user, data.internship_id, data.resume_url)


@router.get("/my", response_model=List[ApplicationResponse])
def my_applications(user: CurrentUser = Depends(get_current_user)):
    """Get all applications for the current student, newest first."""
    return application_service.list_my_applications(user)


@router.get("/internship/{internship_id}", response_model=List[ApplicationResponse])
def internship_applications(internship_id: str, user: CurrentUser = Depends(get_current_user)):
    """Get all applications received by an internship."""
    return application_service.list_internship_applications(internship_id, user)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
def update_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    user: CurrentUser = Depends(get_current_user)
):
    """Set the status of an application to any defined status."""
    return application_service.update_status(application_id, update.status, user)
