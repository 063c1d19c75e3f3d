"""
User Routes

PUT /users/update-profile - Update display name
PUT /users/update-password - Change password
PUT /users/update-profile-picture - Upload profile picture (JPEG/PNG/GIF, max 2MB)
"""

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.core.auth import get_current_user
from app.services import user_service
from app.utils.file_upload import save_profile_picture
from app.schemas.schemas import (
    CurrentUser, MessageResponse, PasswordUpdate, ProfileUpdate, UserUpdateResponse
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.put("/update-profile", response_model=UserUpdateResponse)
def update_profile(data: ProfileUpdate, user: CurrentUser = Depends(get_current_user)):
    """Update the caller's name."""
    updated = user_service.update_name(user, data.name)
    return UserUpdateResponse(message="Name updated successfully", user=updated)


@router.put("/update-password", response_model=MessageResponse)
def update_password(data: PasswordUpdate, user: CurrentUser = Depends(get_current_user)):
    """Change password. The current password must be supplied."""
    user_service.update_password(user, data.current_password, data.new_password)
    return MessageResponse(message="Password updated successfully.")


@router.put("/update-profile-picture", response_model=UserUpdateResponse)
async def update_profile_picture(
    profile_pic: UploadFile = File(..., alias="profilePic", description="Profile picture (JPEG, PNG or GIF)"),
    user: CurrentUser = Depends(get_current_user)
):
    """Upload a new profile picture; the stored path is returned on the user."""
    path = await save_profile_picture(profile_pic)
    updated = await run_in_threadpool(user_service.update_profile_picture, user, path)
    return UserUpdateResponse(message="Profile picture updated successfully", user=updated)
