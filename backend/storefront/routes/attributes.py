"""
Storefront Catalog - Attribute Routes
=======================================

    GET /attributes                          list attribute types
    GET /attributes/{attribute_id}           single attribute type
    GET /attributes/values/{attribute_id}    values of one attribute
    GET /attributes/inProduct/{product_id}   attribute values of a product
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db_session
from storefront.routes.deps import pagination_params
from storefront.schemas.catalog import (
    AttributeResponse,
    AttributeValueResponse,
    ErrorResponse,
    ProductAttributeResponse,
)
from storefront.services.catalog_service import CatalogService, get_catalog_service
from storefront.services.pagination import Pagination

router = APIRouter(prefix="/attributes", tags=["Attributes"])


@router.get(
    "",
    response_model=List[AttributeResponse],
    summary="List attribute types",
)
async def list_attributes(
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[AttributeResponse]:
    page = await service.list_attributes(db, pagination)
    return [AttributeResponse.model_validate(attribute) for attribute in page.items]


@router.get(
    "/values/{attribute_id}",
    response_model=List[AttributeValueResponse],
    responses={404: {"description": "Attribute has no values (ATR_01)", "model": ErrorResponse}},
    summary="List the values of an attribute",
)
async def list_attribute_values(
    attribute_id: int,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[AttributeValueResponse]:
    page = await service.list_attribute_values(db, attribute_id, pagination)
    return [AttributeValueResponse.model_validate(value) for value in page.items]


@router.get(
    "/inProduct/{product_id}",
    response_model=List[ProductAttributeResponse],
    responses={404: {"description": "Product has no attributes (ATR_02)", "model": ErrorResponse}},
    summary="List the attribute values of a product",
)
async def list_product_attributes(
    product_id: int,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[ProductAttributeResponse]:
    page = await service.list_product_attributes(db, product_id, pagination)
    return [ProductAttributeResponse.model_validate(row) for row in page.items]


@router.get(
    "/{attribute_id}",
    response_model=AttributeResponse,
    responses={404: {"description": "Unknown attribute (ATR_01)", "model": ErrorResponse}},
    summary="Get a single attribute type",
)
async def get_attribute(
    attribute_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> AttributeResponse:
    attribute = await service.get_attribute(db, attribute_id)
    return AttributeResponse.model_validate(attribute)
