"""
Access policy - one table mapping each protected action to the roles
allowed to perform it.

Usage:
    authorize(Action.manage_internships, user)   # raises ForbiddenError
    if can(Action.view_analytics, user): ...
"""

from enum import Enum
from typing import Optional

from app.core.errors import ForbiddenError
from app.schemas.schemas import CurrentUser, UserRole


class Action(str, Enum):
    manage_internships = "manage_internships"
    apply = "apply"
    view_own_applications = "view_own_applications"
    view_internship_applications = "view_internship_applications"
    update_application_status = "update_application_status"
    view_analytics = "view_analytics"


STAFF = frozenset({UserRole.ccpd.value, UserRole.admin.value})
STUDENTS = frozenset({UserRole.student.value})

POLICY = {
    Action.manage_internships: STAFF,
    Action.apply: STUDENTS,
    Action.view_own_applications: STUDENTS,
    Action.view_internship_applications: STAFF,
    Action.update_application_status: STAFF,
    Action.view_analytics: STAFF,
}

DENIAL_MESSAGES = {
    Action.manage_internships: "Unauthorized: Only CCPD or Admin can manage internships.",
    Action.apply: "Only students can apply.",
    Action.view_own_applications: "Forbidden: Only students can view their applications.",
    Action.view_analytics: "Access denied. Only CCPD and Admin users can view analytics.",
}


def can(action: Action, user: Optional[CurrentUser]) -> bool:
    """Return True if the caller's role is allowed to perform ``action``."""
    if user is None:
        return False
    return user.role in POLICY[action]


def authorize(action: Action, user: Optional[CurrentUser]) -> None:
    """Raise ForbiddenError unless the caller may perform ``action``."""
    if not can(action, user):
        raise ForbiddenError(DENIAL_MESSAGES.get(action))
