"""
Query Builder - turns internship listing parameters into a MongoDB filter.

Every active parameter becomes one clause and the clauses are ANDed.
Only the free-text ``q`` expands into an OR across several fields.

    filters = InternshipFilters(q="python", location="Hyderabad")
    query = build_internship_query(filters, caller)
    collection.count_documents(query.filter)
    collection.find(query.filter).sort(query.sort)

The builder is pure: no I/O, same inputs give the same query.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Optional, List

from app.schemas.schemas import Branch, CurrentUser, UserRole
from app.services.mongo_service import NEWEST_FIRST

BRANCH_VALUES = frozenset(b.value for b in Branch)

# Plain-string fields matched by free-text search
TEXT_SEARCH_FIELDS = ("title", "company_name", "location", "description")
# Array fields matched element-wise by free-text search
TAG_SEARCH_FIELDS = ("skills", "domain")


@dataclass
class InternshipFilters:
    """
    Listing parameters as received from the caller.

    All fields are optional and default to None (no filtering).
    Empty or whitespace-only strings count as absent. ``cgpa_cutoff`` is
    kept raw; a value that does not parse as a finite number is ignored.
    """
    q: Optional[str] = None
    domain: Optional[str] = None
    location: Optional[str] = None
    company: Optional[str] = None
    cgpa_cutoff: Optional[str] = None


@dataclass
class InternshipQuery:
    """A composed filter plus its sort order, shared by count and fetch."""
    filter: dict
    sort: List[tuple] = field(default_factory=lambda: list(NEWEST_FIRST))


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def contains(value: str) -> dict:
    """Case-insensitive literal substring match."""
    return {"$regex": re.escape(value), "$options": "i"}


def parse_cgpa(value: Optional[str]) -> Optional[float]:
    """Parse a CGPA filter value, returning None if it is not a finite number."""
    value = _clean(value)
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def branch_clause(caller: Optional[CurrentUser]) -> Optional[dict]:
    """
    Eligibility restriction for a student caller: postings open to the
    student's branch, or open to everyone (branch missing or empty).
    Returns None for non-students and students without a known branch.
    """
    if caller is None or caller.role != UserRole.student.value:
        return None
    if caller.branch not in BRANCH_VALUES:
        return None
    return {
        "$or": [
            {"branch": caller.branch},
            {"branch": {"$exists": False}},
            {"branch": {"$size": 0}},
        ]
    }


def text_search_clause(q: str) -> dict:
    pattern = contains(q)
    return {
        "$or": [{name: pattern} for name in TEXT_SEARCH_FIELDS + TAG_SEARCH_FIELDS]
    }


def build_internship_query(filters: InternshipFilters, caller: Optional[CurrentUser] = None) -> InternshipQuery:
    """Compose the listing filter for ``filters`` as seen by ``caller``."""
    clauses = []

    restriction = branch_clause(caller)
    if restriction:
        clauses.append(restriction)

    q = _clean(filters.q)
    if q:
        clauses.append(text_search_clause(q))

    domain = _clean(filters.domain)
    if domain:
        # A regex on an array field matches if any element matches
        clauses.append({"domain": contains(domain)})

    location = _clean(filters.location)
    if location:
        clauses.append({"location": contains(location)})

    company = _clean(filters.company)
    if company:
        clauses.append({"company_name": contains(company)})

    cgpa = parse_cgpa(filters.cgpa_cutoff)
    if cgpa is not None:
        clauses.append({"cgpa_cutoff": cgpa})

    return InternshipQuery(filter={"$and": clauses} if clauses else {})
