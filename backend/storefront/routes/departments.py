"""
Storefront Catalog - Department Routes
========================================

    GET /departments                  all departments
    GET /departments/{department_id}  single department (404 DEP_02)
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.database import get_db_session
from storefront.schemas.catalog import DepartmentResponse, ErrorResponse
from storefront.services.catalog_service import CatalogService, get_catalog_service

router = APIRouter(prefix="/departments", tags=["Departments"])


@router.get("", response_model=List[DepartmentResponse], summary="List departments")
async def list_departments(
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> List[DepartmentResponse]:
    departments = await service.list_departments(db)
    return [DepartmentResponse.model_validate(department) for department in departments]


@router.get(
    "/{department_id}",
    response_model=DepartmentResponse,
    responses={404: {"description": "Unknown department (DEP_02)", "model": ErrorResponse}},
    summary="Get a single department",
)
async def get_department(
    department_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: CatalogService = Depends(get_catalog_service),
) -> DepartmentResponse:
    department = await service.get_department(db, department_id)
    return DepartmentResponse.model_validate(department)
