"""
Application Service - the application lifecycle.

Submit (students), list own applications (students), list applicants of
an internship (staff), update status (staff). Any status may move to any
other status; ApplicationStatus only validates the value.
"""

import logging
from typing import List

from app.core.errors import (
    ConflictError, DeadlinePassedError, InvalidStatusError, NotFoundError, ValidationError,
)
from app.core.policy import Action, authorize
from app.schemas.schemas import (
    ApplicationResponse, ApplicationStatus, CurrentUser, InternshipSummary, StudentSummary,
)
from app.services.mongo_service import (
    ApplicationStore, InternshipStore, UserStore, serialize_doc, to_object_id,
)
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)

ALLOWED_STATUSES = [s.value for s in ApplicationStatus]

# Internship fields attached to a student's own applications
MY_APPLICATION_INTERNSHIP_FIELDS = {"title": 1, "company_name": 1, "domain": 1, "location": 1, "deadline": 1}
# Internship fields attached after submit / status update
BRIEF_INTERNSHIP_FIELDS = {"title": 1, "company_name": 1}


def _internship_summary(doc: dict) -> InternshipSummary:
    return InternshipSummary(**serialize_doc(doc))


def _student_summary(doc: dict) -> StudentSummary:
    return StudentSummary(**serialize_doc(doc))


def _to_response(app_doc: dict, internship: dict = None, student: dict = None) -> ApplicationResponse:
    data = serialize_doc(app_doc)
    data["internship"] = _internship_summary(internship) if internship else None
    data["student"] = _student_summary(student) if student else None
    return ApplicationResponse(**data)


def submit_application(caller: CurrentUser, internship_id: str, resume_url: str = None) -> ApplicationResponse:
    """
    Apply to an internship as the calling student.

    Raises:
        ForbiddenError: caller is not a student
        NotFoundError: internship does not exist
        DeadlinePassedError: internship deadline is in the past
        ConflictError: the student already applied
    """
    authorize(Action.apply, caller)
    if not internship_id:
        raise ValidationError("Internship ID is required.")

    internship = InternshipStore().get_by_id(internship_id)
    if not internship:
        raise NotFoundError("Internship not found.")

    deadline = internship.get("deadline")
    if deadline and deadline < utcnow():
        raise DeadlinePassedError()

    student_id = to_object_id(caller.user_id)
    applications = ApplicationStore()
    if applications.exists(student_id, internship["_id"]):
        raise ConflictError("You have already applied to this internship.")

    # Two concurrent submits can both pass the check; the unique index catches the loser
    doc = applications.insert(
        student_id=student_id,
        internship_id=internship["_id"],
        status=ApplicationStatus.applied.value,
        resume_url=resume_url,
    )
    logger.info("Student %s applied to internship %s", caller.user_id, internship["_id"])
    brief = {key: internship.get(key) for key in ("_id", *BRIEF_INTERNSHIP_FIELDS)}
    return _to_response(doc, internship=brief)


def list_my_applications(caller: CurrentUser) -> List[ApplicationResponse]:
    """The caller's applications, newest first, with internship details."""
    authorize(Action.view_own_applications, caller)
    apps = ApplicationStore().find_by_student(to_object_id(caller.user_id))
    internships = InternshipStore().get_many(
        (a["internship_id"] for a in apps), MY_APPLICATION_INTERNSHIP_FIELDS
    )
    return [_to_response(a, internship=internships.get(a["internship_id"])) for a in apps]


def list_internship_applications(internship_id: str, caller: CurrentUser) -> List[ApplicationResponse]:
    """
    Applicants for one internship, newest first, with student details.
    An unknown internship simply has no applications.
    """
    authorize(Action.view_internship_applications, caller)
    oid = to_object_id(internship_id)
    if oid is None:
        return []
    apps = ApplicationStore().find_by_internship(oid)
    students = UserStore().get_many(a["student_id"] for a in apps)
    return [_to_response(a, student=students.get(a["student_id"])) for a in apps]


def update_status(application_id: str, new_status: str, caller: CurrentUser) -> ApplicationResponse:
    authorize(Action.update_application_status, caller)
    if not new_status:
        raise ValidationError("Status is required.")
    if new_status not in ALLOWED_STATUSES:
        raise InvalidStatusError(f"Invalid status. Must be one of: {', '.join(ALLOWED_STATUSES)}")

    doc = ApplicationStore().update_status(application_id, new_status)
    if not doc:
        raise NotFoundError("Application not found.")

    logger.info("Application %s moved to %r by %s", doc["_id"], new_status, caller.user_id)
    internship = InternshipStore().get_many([doc["internship_id"]], BRIEF_INTERNSHIP_FIELDS)
    student = UserStore().get_many([doc["student_id"]])
    return _to_response(
        doc,
        internship=internship.get(doc["internship_id"]),
        student=student.get(doc["student_id"]),
    )
