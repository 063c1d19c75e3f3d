"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies resolving the bearer token to a CurrentUser
"""

from datetime import timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import get_settings
from app.core.errors import UnauthorizedError
from app.schemas.schemas import CurrentUser
from app.services.mongo_service import UserStore
from app.utils.dates import utcnow

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor; missing headers are reported by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def token_for_user(user_doc: dict) -> str:
    return create_access_token(data={"sub": str(user_doc["_id"]), "role": user_doc["role"]})


def resolve_token(token: str) -> CurrentUser:
    """
    Turn a bearer token into the caller's identity.

    The user is reloaded on every request so role and branch changes
    take effect without re-login.
    """
    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        raise UnauthorizedError()

    user = UserStore().get_by_id(payload["sub"])
    if not user:
        raise UnauthorizedError()

    return CurrentUser(
        user_id=str(user["_id"]),
        name=user["name"],
        email=user["email"],
        role=user["role"],
        branch=user.get("branch"),
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> CurrentUser:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @app.get("/protected")
        def route(user: CurrentUser = Depends(get_current_user)):
            return user
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    return resolve_token(credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[CurrentUser]:
    """Dependency for public routes: the caller if a valid token was sent, else None."""
    if credentials is None:
        return None
    try:
        return resolve_token(credentials.credentials)
    except UnauthorizedError:
        return None
