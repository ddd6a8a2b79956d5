"""
Storefront Catalog - Product & Review Routes
==============================================

What:  Product listing, search, filtered listings, product detail and reviews.

Route Inventory:
    GET  /products                               paginated envelope
    GET  /products/search                        substring search
    GET  /products/inCategory/{category_id}      products of a category
    GET  /products/inDepartment/{department_id}  products of a department
    POST /products/reviews                       add a review (201)
    GET  /products/{product_id}                  product detail
    GET  /products/{product_id}/reviews          reviews of a product

Literal paths are registered before /products/{product_id} so that
"search" is never parsed as a product id.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db_session
from storefront.routes.deps import description_length_param, pagination_params, to_list_item
from storefront.schemas.catalog import (
    ErrorResponse,
    ProductDetailResponse,
    ProductListItem,
    ProductListResponse,
    ReviewCreate,
    ReviewReceipt,
    ReviewResponse,
)
from storefront.services.catalog_service import CatalogService, MatchMode, get_catalog_service
from storefront.services.pagination import Pagination, build_pagination_meta

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

# all_words query values → search mode
ALL_WORDS_MODES = {
    "on": MatchMode.ALL_FIELDS,
    "off": MatchMode.NAME_ONLY,
}


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products with pagination metadata",
    description=(
        "Returns one page of products wrapped in an envelope whose paginationMeta "
        "is computed from the requested window and the total product count."
    ),
)
async def list_products(
    pagination: Pagination = Depends(pagination_params),
    description_length: int = Depends(description_length_param),
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> ProductListResponse:
    page = await service.list_products(db, pagination)
    return ProductListResponse(
        pagination_meta=build_pagination_meta(pagination, page.total),
        rows=[to_list_item(product, description_length) for product in page.items],
    )


@router.get(
    "/search",
    response_model=List[ProductListItem],
    responses={
        400: {"description": "all_words is not 'on' or 'off' (USR_11)", "model": ErrorResponse},
        404: {"description": "Missing query_string or all_words (USR_10)", "model": ErrorResponse},
    },
    summary="Search products",
    description=(
        "all_words=on searches every text field ignoring case; all_words=off "
        "searches the product name only."
    ),
)
async def search_products(
    query_string: Optional[str] = Query(default=None, description="Text to look for"),
    all_words: Optional[str] = Query(default=None, description="'on' or 'off'"),
    description_length: int = Depends(description_length_param),
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[ProductListItem]:
    if all_words is None:
        raise service.errors.missing("all_words")
    if not query_string or not query_string.strip():
        raise service.errors.missing("query_string")

    match_mode = ALL_WORDS_MODES.get(all_words.strip().lower())
    if match_mode is None:
        raise service.errors.invalid("all_words", "expected 'on' or 'off'")

    products = await service.search_products(db, query_string, match_mode)
    return [to_list_item(product, description_length) for product in products]


@router.get(
    "/inCategory/{category_id}",
    response_model=List[ProductListItem],
    responses={404: {"description": "No products in category (PRD_02)", "model": ErrorResponse}},
    summary="List products of a category",
)
async def list_products_by_category(
    category_id: int,
    pagination: Pagination = Depends(pagination_params),
    description_length: int = Depends(description_length_param),
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[ProductListItem]:
    page = await service.list_products_by_category(db, category_id, pagination)
    return [to_list_item(product, description_length) for product in page.items]


@router.get(
    "/inDepartment/{department_id}",
    response_model=List[ProductListItem],
    responses={404: {"description": "No products in department (PRD_03)", "model": ErrorResponse}},
    summary="List products of a department",
)
async def list_products_by_department(
    department_id: int,
    pagination: Pagination = Depends(pagination_params),
    description_length: int = Depends(description_length_param),
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[ProductListItem]:
    page = await service.list_products_by_department(db, department_id, pagination)
    return [to_list_item(product, description_length) for product in page.items]


@router.post(
    "/reviews",
    status_code=201,
    response_model=ReviewReceipt,
    responses={
        201: {"description": "Review stored", "model": ReviewReceipt},
        404: {"description": "Unknown product (PRD_01)", "model": ErrorResponse},
    },
    summary="Add a review to a product",
)
async def create_product_review(
    payload: ReviewCreate,
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> ReviewReceipt:
    return await service.create_product_review(
        db,
        product_id=payload.product_id,
        review=payload.review,
        rating=payload.rating,
    )


@router.get(
    "/{product_id}",
    response_model=ProductDetailResponse,
    responses={404: {"description": "Unknown product (PRD_01)", "model": ErrorResponse}},
    summary="Get product details",
)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> ProductDetailResponse:
    product = await service.get_product(db, product_id)
    return ProductDetailResponse.model_validate(product)


@router.get(
    "/{product_id}/reviews",
    response_model=List[ReviewResponse],
    responses={404: {"description": "Unknown product (REV_01)", "model": ErrorResponse}},
    summary="List the reviews of a product",
)
async def get_product_reviews(
    product_id: int,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[ReviewResponse]:
    page = await service.get_product_reviews(db, product_id, pagination)
    return [ReviewResponse.model_validate(review) for review in page.items]
