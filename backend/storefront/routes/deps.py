"""FastAPI dependencies shared by the catalog routers."""

from typing import Optional

from fastapi import Query

from storefront.config import settings
from storefront.models.catalog import Product
from storefront.schemas.catalog import ProductListItem
from storefront.services.pagination import Pagination, resolve_pagination


def pagination_params(
    page: Optional[int] = Query(
        default=None, ge=1, description="1-based page number (ignored when offset is set)"
    ),
    limit: Optional[int] = Query(
        default=None,
        ge=1,
        le=settings.max_page_limit,
        description=f"Items per page (default {settings.default_page_limit})",
    ),
    offset: Optional[int] = Query(default=None, ge=0, description="Rows to skip"),
) -> Pagination:
    """Resolve page/limit/offset query parameters into a Pagination."""
    return resolve_pagination(page=page, limit=limit, offset=offset)


def description_length_param(
    description_length: int = Query(
        default=settings.description_length,
        ge=1,
        le=10000,
        description="Maximum length of product descriptions in the response",
    ),
) -> int:
    return description_length


def truncate_description(description: Optional[str], length: int) -> str:
    """Cut a description to `length` characters, marking the cut with '...'."""
    if not description:
        return ""
    if len(description) <= length:
        return description
    return description[:length] + "..."


def to_list_item(product: Product, description_length: int) -> ProductListItem:
    item = ProductListItem.model_validate(product)
    return item.model_copy(
        update={"description": truncate_description(item.description, description_length)}
    )
