"""
User Service - registration, login and profile management.
"""

import logging
from typing import Optional

from app.core.auth import hash_password, verify_password, token_for_user
from app.core.config import get_settings
from app.core.errors import NotFoundError, UnauthorizedError, ValidationError
from app.schemas.schemas import CurrentUser, RegisterRequest, UserPublic, UserRole
from app.services.mongo_service import UserStore, serialize_doc

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
STAFF_ROLES = {UserRole.ccpd, UserRole.admin}


def to_public_user(doc: dict) -> UserPublic:
    """Public view of a user document (no password hash)."""
    data = serialize_doc(doc)
    data.pop("password_hash", None)
    return UserPublic(**data)


def register(request: RegisterRequest) -> tuple[str, UserPublic]:
    """
    Create an account and return (token, user).

    Students must give a branch. CCPD and admin accounts need the staff
    verification code.
    """
    if request.role == UserRole.student and request.branch is None:
        raise ValidationError("Branch is required for student registration.")
    if request.role in STAFF_ROLES and request.ccpd_code != get_settings().staff_verification_code:
        raise ValidationError("Invalid CCPD verification code.")

    store = UserStore()
    doc = store.insert(
        name=request.name.strip(),
        email=request.email.lower(),
        password_hash=hash_password(request.password),
        role=request.role.value,
        branch=request.branch.value if request.role == UserRole.student else None,
    )
    logger.info("Registered %s user %s", doc["role"], doc["_id"])
    return token_for_user(doc), to_public_user(doc)


def login(email: str, password: str) -> tuple[str, UserPublic]:
    doc = UserStore().get_by_email(email.lower())
    if not doc or not verify_password(password, doc["password_hash"]):
        raise UnauthorizedError("Invalid email or password.")
    return token_for_user(doc), to_public_user(doc)


def _load(user: CurrentUser, store: Optional[UserStore] = None) -> dict:
    doc = (store or UserStore()).get_by_id(user.user_id)
    if not doc:
        raise NotFoundError("User not found")
    return doc


def get_profile(user: CurrentUser) -> UserPublic:
    return to_public_user(_load(user))


def update_name(user: CurrentUser, name: str) -> UserPublic:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name cannot be empty")
    doc = UserStore().update_fields(user.user_id, {"name": name})
    if not doc:
        raise NotFoundError("User not found")
    return to_public_user(doc)


def update_password(user: CurrentUser, current_password: str, new_password: str) -> None:
    if not current_password or not new_password:
        raise ValidationError("Please provide current and new passwords.")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters long.")

    store = UserStore()
    doc = _load(user, store)
    if not verify_password(current_password, doc["password_hash"]):
        raise ValidationError("Incorrect current password.")

    store.update_fields(user.user_id, {"password_hash": hash_password(new_password)})
    logger.info("Password changed for user %s", user.user_id)


def update_profile_picture(user: CurrentUser, public_path: str) -> UserPublic:
    doc = UserStore().update_fields(user.user_id, {"profile_pic": public_path})
    if not doc:
        raise NotFoundError("User not found")
    return to_public_user(doc)
