"""
Storefront Catalog - Pydantic Request/Response Schemas
========================================================

What:  Pydantic models defining the API contract of the catalog endpoints.
How:   FastAPI validates request bodies against these models, serializes
       responses through them and generates OpenAPI docs from them.

Schemas are kept separate from the ORM models so the API controls exactly
which columns are exposed (e.g. product list rows carry a truncated
description, product detail adds nested attribute values, review receipts
add the product name).
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ══════════════════════════════════════════════════════════════════════════
# Catalog Entities
# ══════════════════════════════════════════════════════════════════════════


class DepartmentResponse(BaseModel):
    department_id: int
    name: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class CategoryResponse(BaseModel):
    category_id: int
    department_id: int
    name: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class AttributeResponse(BaseModel):
    attribute_id: int
    name: str

    model_config = {"from_attributes": True}


class AttributeValueResponse(BaseModel):
    """A value row as returned by GET /attributes/values/{attribute_id}."""
    attribute_value_id: int
    value: str

    model_config = {"from_attributes": True}


class ProductAttributeResponse(BaseModel):
    """An attribute value attached to a product, flattened with its type name."""
    attribute_name: str
    attribute_value_id: int
    attribute_value: str

    model_config = {"from_attributes": True}


class ProductResponse(BaseModel):
    product_id: int
    name: str
    description: str
    price: Decimal
    discounted_price: Decimal
    image: Optional[str] = None
    image_2: Optional[str] = None
    thumbnail: Optional[str] = None
    display: int

    model_config = {"from_attributes": True}


class ProductListItem(BaseModel):
    """
    Product row in list and search responses.

    `description` is truncated to the request's description_length.
    """
    product_id: int
    name: str
    description: str
    price: Decimal
    discounted_price: Decimal
    thumbnail: Optional[str] = None

    model_config = {"from_attributes": True}


class ProductAttributeValue(BaseModel):
    """Nested attribute value inside ProductDetailResponse."""
    attribute_value_id: int
    value: str
    attribute_type: AttributeResponse = Field(
        validation_alias=AliasChoices("attribute", "attribute_type"),
    )

    model_config = {"from_attributes": True}


class ProductDetailResponse(ProductResponse):
    attributes: List[ProductAttributeValue] = Field(
        default_factory=list,
        validation_alias=AliasChoices("attribute_values", "attributes"),
        description="Attribute values of the product with their attribute type",
    )


# ══════════════════════════════════════════════════════════════════════════
# Reviews
# ══════════════════════════════════════════════════════════════════════════


class ReviewResponse(BaseModel):
    review_id: int
    product_id: int
    customer_id: int
    review: str
    rating: int
    created_on: datetime

    model_config = {"from_attributes": True}


class ReviewCreate(BaseModel):
    """Body of POST /products/reviews."""
    product_id: int = Field(ge=1, description="Product being reviewed")
    review: str = Field(min_length=1, max_length=5000, description="Review text")
    rating: int = Field(ge=1, le=5, description="Rating from 1 to 5")


class ReviewReceipt(BaseModel):
    """Returned with 201 after a review is stored."""
    name: str = Field(description="Name of the reviewed product")
    review: str
    rating: int
    created_on: datetime = Field(description="Insert time assigned by the database")


# ══════════════════════════════════════════════════════════════════════════
# Pagination Envelope
# ══════════════════════════════════════════════════════════════════════════


class PaginationMeta(BaseModel):
    """
    Serialized with camelCase keys:

        {"currentPage": 2, "currentPageSize": 20,
         "totalPages": 3, "totalRecords": 45}
    """
    current_page: int = Field(ge=1)
    current_page_size: int = Field(ge=1)
    total_pages: int = Field(ge=0)
    total_records: int = Field(ge=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductListResponse(BaseModel):
    pagination_meta: PaginationMeta
    rows: List[ProductListItem]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Errors & Health
# ══════════════════════════════════════════════════════════════════════════


class ErrorBody(BaseModel):
    status: int = Field(description="HTTP status code")
    code: str = Field(description="Machine-readable error code, e.g. PRD_01")
    message: str = Field(description="Human-readable error description")
    field: Optional[str] = Field(default=None, description="Offending request parameter")


class ErrorResponse(BaseModel):
    """
    Uniform error format for all API errors.

    Example:
        {
            "error": {
                "status": 404,
                "code": "DEP_02",
                "message": "Don't exist department with this ID: 99",
                "field": "department_id"
            }
        }
    """
    error: ErrorBody


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    dialect: str = Field(description="SQLAlchemy dialect of the catalog store, e.g. postgresql")
    database_latency_ms: Optional[float] = Field(
        default=None, description="Round trip of the probe query; null when unreachable"
    )
    uptime_seconds: float = Field(description="Seconds since service started")
