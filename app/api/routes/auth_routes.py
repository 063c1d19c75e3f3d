"""
Authentication Routes

POST /auth/register - Register new user (returns token)
POST /auth/login - Login and get JWT token
GET /auth/profile - Get current user info
"""

from fastapi import APIRouter, Depends

from app.core.auth import get_current_user
from app.services import user_service
from app.schemas.schemas import (
    RegisterRequest, LoginRequest, AuthResponse, UserPublic, CurrentUser
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(request: RegisterRequest):
    """
    Register a new user account.

    Students must provide a branch; CCPD/admin accounts must provide
    the staff verification code as `ccpdCode`.
    """
    token, user = user_service.register(request)
    return AuthResponse(token=token, user=user)


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    token, user = user_service.login(request.email, request.password)
    return AuthResponse(token=token, user=user)


@router.get("/profile", response_model=UserPublic)
def get_profile(user: CurrentUser = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return user_service.get_profile(user)
