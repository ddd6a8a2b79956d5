"""
Storefront Catalog - Pagination Resolver
==========================================

What:  Turns raw `page` / `limit` / `offset` query values into one resolved
       window, and builds the pagination metadata of the product listing.
How:   Every paginated endpoint goes through resolve_pagination(), so the
       defaults are the same everywhere:

           limit  = settings.default_page_limit (20) when omitted,
                    capped at settings.max_page_limit (100)
           offset = explicit offset, else (page - 1) * limit, else 0

Range checks (page >= 1, limit >= 1, offset >= 0) happen in FastAPI's
Query() declarations; values reaching this module are already in range,
with the exception of clamping limit to the configured cap.
"""

import math
from dataclasses import dataclass
from typing import Optional

from storefront.config import settings
from storefront.schemas.catalog import PaginationMeta


@dataclass(frozen=True)
class Pagination:
    """A resolved LIMIT/OFFSET window."""

    limit: int
    offset: int = 0

    @property
    def page(self) -> int:
        """1-based page number that contains `offset`."""
        return self.offset // self.limit + 1


def resolve_pagination(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    default_limit: Optional[int] = None,
    max_limit: Optional[int] = None,
) -> Pagination:
    """
    Resolve optional query parameters into a Pagination.

    Args:
        page:          1-based page number (ignored when offset is given)
        limit:         Requested page size
        offset:        Explicit row offset
        default_limit: Override for settings.default_page_limit
        max_limit:     Override for settings.max_page_limit

    Examples:
        resolve_pagination()                  → Pagination(limit=20, offset=0)
        resolve_pagination(page=3, limit=10)  → Pagination(limit=10, offset=20)
        resolve_pagination(page=3, offset=5)  → Pagination(limit=20, offset=5)
    """
    default_limit = default_limit or settings.default_page_limit
    max_limit = max_limit or settings.max_page_limit

    resolved_limit = limit if limit and limit > 0 else default_limit
    resolved_limit = min(resolved_limit, max_limit)

    if offset is not None and offset >= 0:
        resolved_offset = offset
    elif page is not None and page > 1:
        resolved_offset = (page - 1) * resolved_limit
    else:
        resolved_offset = 0

    return Pagination(limit=resolved_limit, offset=resolved_offset)


def total_pages(total_records: int, page_size: int) -> int:
    """Number of pages needed for `total_records` rows; 0 for an empty set."""
    if total_records <= 0:
        return 0
    return math.ceil(total_records / page_size)


def build_pagination_meta(pagination: Pagination, total_records: int) -> PaginationMeta:
    """Metadata for the product listing envelope, derived from request and result."""
    return PaginationMeta(
        current_page=pagination.page,
        current_page_size=pagination.limit,
        total_pages=total_pages(total_records, pagination.limit),
        total_records=total_records,
    )
