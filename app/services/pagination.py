"""
Pagination - slice a filtered, sorted collection into 1-indexed pages.

Page ``n`` of size ``limit`` holds records ``[(n-1)*limit, n*limit)``.
``paginate`` counts and fetches with two reads, so a write landing between
them can leave ``total_pages`` slightly stale. ``paginate_single_read``
does both in one ``$facet`` aggregation when that matters.
"""

import math
from dataclasses import dataclass, field
from typing import List

from pymongo.collection import Collection

from app.core.config import get_settings
from app.core.errors import ValidationError

# Largest offset a page request may start at
MAX_SKIP = 2 ** 31 - 1


@dataclass
class Page:
    items: List[dict] = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 0
    total_items: int = 0


def check_bounds(page: int, limit: int) -> None:
    """
    Reject page numbers below 1, limits outside [1, max_page_size] and
    pages that start further in than MAX_SKIP records.
    """
    max_limit = get_settings().max_page_size
    if page < 1:
        raise ValidationError("page must be 1 or greater")
    if limit < 1 or limit > max_limit:
        raise ValidationError(f"limit must be between 1 and {max_limit}")
    if (page - 1) * limit > MAX_SKIP:
        raise ValidationError("page is out of range")


def total_pages_for(total_items: int, limit: int) -> int:
    return math.ceil(total_items / limit)


def paginate(collection: Collection, query_filter: dict, page: int, limit: int, sort: list) -> Page:
    """Count matches, then fetch one sorted page of them."""
    check_bounds(page, limit)
    total_items = collection.count_documents(query_filter)
    cursor = collection.find(query_filter).sort(sort).skip((page - 1) * limit).limit(limit)
    return Page(
        items=list(cursor),
        current_page=page,
        total_pages=total_pages_for(total_items, limit),
        total_items=total_items,
    )


def paginate_single_read(collection: Collection, query_filter: dict, page: int, limit: int, sort: list) -> Page:
    """Same result as ``paginate`` but count and page come from one aggregation."""
    check_bounds(page, limit)
    pipeline = [
        {"$match": query_filter},
        {"$sort": dict(sort)},
        {"$facet": {
            "items": [{"$skip": (page - 1) * limit}, {"$limit": limit}],
            "total": [{"$count": "count"}],
        }},
    ]
    result = next(collection.aggregate(pipeline), {"items": [], "total": []})
    total_items = result["total"][0]["count"] if result["total"] else 0
    return Page(
        items=result["items"],
        current_page=page,
        total_pages=total_pages_for(total_items, limit),
        total_items=total_items,
    )
