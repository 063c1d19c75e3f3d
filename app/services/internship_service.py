"""
Internship Service - listing, CRUD and filter options for postings.
"""

import logging
from typing import List, Optional

from app.core.errors import NotFoundError
from app.core.policy import Action, authorize
from app.schemas.schemas import (
    CurrentUser, FilterOptionsResponse, InternshipCreate, InternshipListResponse,
    InternshipResponse, InternshipUpdate,
)
from app.services.mongo_service import ApplicationStore, InternshipStore, serialize_doc, to_object_id
from app.services.pagination import paginate
from app.services.query_builder import InternshipFilters, build_internship_query
from app.utils.dates import to_naive_utc

logger = logging.getLogger(__name__)

# Optional posting fields an update may reset to null
CLEARABLE_FIELDS = {"salary", "cgpa_cutoff", "internship_period"}


def to_internship_response(doc: dict) -> InternshipResponse:
    return InternshipResponse(**serialize_doc(doc))


def _to_document(fields: dict) -> dict:
    """Store-ready values: enums as plain strings, deadline as naive UTC."""
    out = {}
    for key, value in fields.items():
        if key == "deadline" and value is not None:
            value = to_naive_utc(value)
        elif key == "type" and value is not None:
            value = value.value
        elif key == "branch" and value is not None:
            value = [b.value for b in value]
        out[key] = value
    return out


def list_internships(
    filters: InternshipFilters,
    caller: Optional[CurrentUser],
    page: int,
    limit: int,
) -> InternshipListResponse:
    """Filtered, branch-scoped, newest-first page of internships."""
    query = build_internship_query(filters, caller)
    result = paginate(InternshipStore().collection, query.filter, page, limit, query.sort)
    return InternshipListResponse(
        internships=[to_internship_response(doc) for doc in result.items],
        current_page=result.current_page,
        total_pages=result.total_pages,
        total_items=result.total_items,
    )


def get_internship(internship_id: str) -> InternshipResponse:
    doc = InternshipStore().get_by_id(internship_id)
    if not doc:
        raise NotFoundError("Internship not found")
    return to_internship_response(doc)


def create_internship(data: InternshipCreate, caller: CurrentUser) -> InternshipResponse:
    authorize(Action.manage_internships, caller)
    doc = InternshipStore().insert(_to_document(data.model_dump()), posted_by=to_object_id(caller.user_id))
    logger.info("Internship %s posted by %s", doc["_id"], caller.user_id)
    return to_internship_response(doc)


def update_internship(internship_id: str, data: InternshipUpdate, caller: CurrentUser) -> InternshipResponse:
    """Partial update: only fields present in the request body are written."""
    authorize(Action.manage_internships, caller)
    store = InternshipStore()
    fields = {
        key: value
        for key, value in _to_document(data.model_dump(exclude_unset=True)).items()
        if value is not None or key in CLEARABLE_FIELDS
    }
    if fields:
        doc = store.update(internship_id, fields)
    else:
        doc = store.get_by_id(internship_id)
    if not doc:
        raise NotFoundError("Internship not found")
    return to_internship_response(doc)


def delete_internship(internship_id: str, caller: CurrentUser) -> int:
    """
    Delete an internship and every application to it.

    Two independent deletes, applications first: a failure in between
    leaves the internship with fewer applications, never applications
    pointing at a missing internship. Returns the number of applications
    removed.
    """
    authorize(Action.manage_internships, caller)
    store = InternshipStore()
    doc = store.get_by_id(internship_id)
    if not doc:
        raise NotFoundError("Internship not found")

    removed = ApplicationStore().delete_by_internship(doc["_id"])
    store.delete(doc["_id"])
    logger.info("Deleted internship %s and %d application(s)", doc["_id"], removed)
    return removed


def list_posted_by(caller: CurrentUser) -> List[InternshipResponse]:
    authorize(Action.manage_internships, caller)
    docs = InternshipStore().find_by_poster(to_object_id(caller.user_id))
    return [to_internship_response(doc) for doc in docs]


def get_filter_options() -> FilterOptionsResponse:
    """Distinct non-empty values used to populate the listing filters."""
    store = InternshipStore()
    domains = sorted(d for d in store.distinct("domain") if d)
    locations = sorted(loc for loc in store.distinct("location") if loc)
    company_names = sorted(c for c in store.distinct("company_name") if c)
    cgpa_cutoffs = sorted(
        float(c) for c in store.distinct("cgpa_cutoff")
        if isinstance(c, (int, float)) and not isinstance(c, bool)
    )
    return FilterOptionsResponse(
        domains=domains,
        locations=locations,
        company_names=company_names,
        cgpa_cutoffs=cgpa_cutoffs,
    )
