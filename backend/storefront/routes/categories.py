"""
Storefront Catalog - Category Routes
======================================

    GET /categories                               all categories
    GET /categories/{category_id}                 single category (404 CAT_01)
    GET /categories/inDepartment/{department_id}  categories of a department (404 DEP_02)
    GET /categories/inProduct/{product_id}        categories of a product (404 CAT_02)
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db_session
from storefront.routes.deps import pagination_params
from storefront.schemas.catalog import CategoryResponse, ErrorResponse
from storefront.services.catalog_service import CatalogService, get_catalog_service
from storefront.services.pagination import Pagination

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryResponse], summary="List categories")
async def list_categories(
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[CategoryResponse]:
    categories = await service.list_categories(db)
    return [CategoryResponse.model_validate(category) for category in categories]


@router.get(
    "/inDepartment/{department_id}",
    response_model=List[CategoryResponse],
    responses={404: {"description": "Department has no categories (DEP_02)", "model": ErrorResponse}},
    summary="List the categories of a department",
)
async def list_categories_by_department(
    department_id: int,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[CategoryResponse]:
    page = await service.list_categories_by_department(db, department_id, pagination)
    return [CategoryResponse.model_validate(category) for category in page.items]


@router.get(
    "/inProduct/{product_id}",
    response_model=List[CategoryResponse],
    responses={404: {"description": "Product is in no category (CAT_02)", "model": ErrorResponse}},
    summary="List the categories of a product",
)
async def get_category_of_product(
    product_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[CategoryResponse]:
    categories = await service.get_category_of_product(db, product_id)
    return [CategoryResponse.model_validate(category) for category in categories]


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"description": "Unknown category (CAT_01)", "model": ErrorResponse}},
    summary="Get a single category",
)
async def get_category(
    category_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> CategoryResponse:
    category = await service.get_category(db, category_id)
    return CategoryResponse.model_validate(category)
