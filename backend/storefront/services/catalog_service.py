"""
Storefront Catalog - Catalog Query Service
============================================

What:  Every read operation of the catalog API plus the single write
       (appending a product review).
How:   Each method builds one SQLAlchemy statement (equality filter on a
       foreign key, substring search, or primary-key lookup), runs it on the
       session it is handed, and either returns ORM objects or raises a
       NotFoundError built from the injected ErrorCatalog.
Who:   Called by the route modules; tests call it directly with mock or
       SQLite-backed sessions.

Listing pattern (paginated operations):
    1. SELECT count(*) FROM (<filtered statement>)
    2. total == 0  → NotFoundError for the filtering id (or empty Page for
                     unfiltered listings)
    3. <filtered statement> ORDER BY pk LIMIT :limit OFFSET :offset

The service is stateless; a single module-level instance is shared by all
requests. Database errors are not caught here.
"""

import logging
from enum import Enum
from typing import Any, List, NamedTuple, Optional

from sqlalchemy import Select, String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.config import settings
from storefront.models.catalog import (
    Attribute,
    AttributeValue,
    Category,
    Department,
    Product,
    Review,
    product_attribute,
)
from storefront.schemas.catalog import ReviewReceipt
from storefront.services.error_catalog import ErrorCatalog
from storefront.services.pagination import Pagination, resolve_pagination

logger = logging.getLogger(__name__)


class MatchMode(str, Enum):
    """How search_products() compares the query string."""

    ALL_FIELDS = "all_fields"
    NAME_ONLY = "name_only"


class Page(NamedTuple):
    """One page of results plus the size of the whole filtered set."""

    items: List[Any]
    total: int


# ALL_FIELDS matches against every column of the product row; non-text
# columns are compared through their string form (e.g. price "14.99").
PRODUCT_TEXT_COLUMNS = (
    Product.name,
    Product.description,
    Product.image,
    Product.image_2,
    Product.thumbnail,
)
PRODUCT_NUMERIC_COLUMNS = (
    Product.product_id,
    Product.price,
    Product.discounted_price,
    Product.display,
)

# Identifier columns are INTEGER; ids outside this range cannot exist and
# would overflow the driver
MIN_ID = 1
MAX_ID = 2_147_483_647


class CatalogService:
    """
    Query layer for products, categories, departments, attributes and reviews.

    Args:
        errors:                  Error message catalog (code → template)
        anonymous_customer_id:   customer_id stored on new reviews
        name_search_case_sensitive: NAME_ONLY search compares case when True
    """

    def __init__(
        self,
        errors: Optional[ErrorCatalog] = None,
        anonymous_customer_id: Optional[int] = None,
        name_search_case_sensitive: Optional[bool] = None,
    ):
        self.errors = errors or ErrorCatalog()
        self.anonymous_customer_id = (
            settings.anonymous_customer_id
            if anonymous_customer_id is None
            else anonymous_customer_id
        )
        self.name_search_case_sensitive = (
            settings.search_name_case_sensitive
            if name_search_case_sensitive is None
            else name_search_case_sensitive
        )

    # ══════════════════════════════════════════════════════════════════════
    # Helpers
    # ══════════════════════════════════════════════════════════════════════

    async def _paginate(
        self,
        db: AsyncSession,
        stmt: Select,
        pagination: Optional[Pagination],
        scalars: bool = True,
    ) -> Page:
        """Run the count query, then the windowed query if anything matched."""
        pagination = pagination or resolve_pagination()

        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        total = (await db.execute(count_stmt)).scalar_one()
        if not total:
            return Page(items=[], total=0)

        result = await db.execute(stmt.limit(pagination.limit).offset(pagination.offset))
        items = list(result.scalars().all()) if scalars else list(result.all())
        return Page(items=items, total=total)

    def _require_id(self, value: int, code: str, field: str) -> int:
        """Raise the resource's NotFoundError for ids no row can have."""
        if not MIN_ID <= value <= MAX_ID:
            raise self.errors.not_found(code, field, value)
        return value

    async def _get_one(self, db: AsyncSession, stmt: Select) -> Any:
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    # ══════════════════════════════════════════════════════════════════════
    # Attributes
    # ══════════════════════════════════════════════════════════════════════

    async def list_attributes(
        self, db: AsyncSession, pagination: Optional[Pagination] = None
    ) -> Page:
        stmt = select(Attribute).order_by(Attribute.attribute_id)
        return await self._paginate(db, stmt, pagination)

    async def get_attribute(self, db: AsyncSession, attribute_id: int) -> Attribute:
        self._require_id(attribute_id, "ATR_01", "attribute_id")
        attribute = await self._get_one(
            db, select(Attribute).where(Attribute.attribute_id == attribute_id)
        )
        if attribute is None:
            raise self.errors.not_found("ATR_01", "attribute_id", attribute_id)
        return attribute

    async def list_attribute_values(
        self,
        db: AsyncSession,
        attribute_id: int,
        pagination: Optional[Pagination] = None,
    ) -> Page:
        """
        Values belonging to one attribute.

        Raises:
            NotFoundError (ATR_01): the attribute has no values, which also
            covers attribute ids that do not exist
        """
        self._require_id(attribute_id, "ATR_01", "attribute_id")
        stmt = (
            select(AttributeValue)
            .where(AttributeValue.attribute_id == attribute_id)
            .order_by(AttributeValue.attribute_value_id)
        )
        page = await self._paginate(db, stmt, pagination)
        if page.total == 0:
            raise self.errors.not_found("ATR_01", "attribute_id", attribute_id)
        return page

    async def list_product_attributes(
        self,
        db: AsyncSession,
        product_id: int,
        pagination: Optional[Pagination] = None,
    ) -> Page:
        """
        Attribute values attached to a product, each row flattened to
        (attribute_name, attribute_value_id, attribute_value).

        Raises:
            NotFoundError (ATR_02): the product has no attribute values
        """
        self._require_id(product_id, "ATR_02", "product_id")
        stmt = (
            select(
                Attribute.name.label("attribute_name"),
                AttributeValue.attribute_value_id,
                AttributeValue.value.label("attribute_value"),
            )
            .select_from(AttributeValue)
            .join(Attribute, AttributeValue.attribute_id == Attribute.attribute_id)
            .join(
                product_attribute,
                product_attribute.c.attribute_value_id == AttributeValue.attribute_value_id,
            )
            .where(product_attribute.c.product_id == product_id)
            .order_by(AttributeValue.attribute_value_id)
        )
        page = await self._paginate(db, stmt, pagination, scalars=False)
        if page.total == 0:
            raise self.errors.not_found("ATR_02", "product_id", product_id)
        return page

    # ══════════════════════════════════════════════════════════════════════
    # Products
    # ══════════════════════════════════════════════════════════════════════

    async def list_products(
        self, db: AsyncSession, pagination: Optional[Pagination] = None
    ) -> Page:
        stmt = select(Product).order_by(Product.product_id)
        return await self._paginate(db, stmt, pagination)

    async def search_products(
        self,
        db: AsyncSession,
        query_string: str,
        match_mode: MatchMode,
    ) -> List[Product]:
        """
        Substring search over products.

        ALL_FIELDS: case-insensitive match on any column of the row; numeric
                    columns match through their string form.
        NAME_ONLY:  match on the name only. Case-sensitive unless the service
                    was built with name_search_case_sensitive=False.

        The SQL filter is always case-insensitive (ILIKE with escaped
        wildcards); the case-sensitive NAME_ONLY check runs on the fetched
        rows, which keeps behaviour identical on dialects whose LIKE ignores
        case.
        """
        stmt = select(Product).order_by(Product.product_id)
        if match_mode is MatchMode.ALL_FIELDS:
            stmt = stmt.where(
                or_(
                    *(
                        column.icontains(query_string, autoescape=True)
                        for column in PRODUCT_TEXT_COLUMNS
                    ),
                    *(
                        cast(column, String).icontains(query_string, autoescape=True)
                        for column in PRODUCT_NUMERIC_COLUMNS
                    ),
                )
            )
        else:
            stmt = stmt.where(Product.name.icontains(query_string, autoescape=True))

        result = await db.execute(stmt)
        products = list(result.scalars().all())

        if match_mode is MatchMode.NAME_ONLY and self.name_search_case_sensitive:
            products = [product for product in products if query_string in product.name]

        logger.debug(
            "Product search %r (%s) matched %d rows",
            query_string,
            match_mode.value,
            len(products),
        )
        return products

    async def list_products_by_category(
        self,
        db: AsyncSession,
        category_id: int,
        pagination: Optional[Pagination] = None,
    ) -> Page:
        """
        Raises:
            NotFoundError (PRD_02): no product is linked to the category
        """
        self._require_id(category_id, "PRD_02", "category_id")
        stmt = (
            select(Product)
            .join(Product.categories)
            .where(Category.category_id == category_id)
            .order_by(Product.product_id)
        )
        page = await self._paginate(db, stmt, pagination)
        if page.total == 0:
            raise self.errors.not_found("PRD_02", "category_id", category_id)
        return page

    async def list_products_by_department(
        self,
        db: AsyncSession,
        department_id: int,
        pagination: Optional[Pagination] = None,
    ) -> Page:
        """
        Products in any category of the department, each product once.

        Raises:
            NotFoundError (PRD_03): the department has no products
        """
        self._require_id(department_id, "PRD_03", "department_id")
        stmt = (
            select(Product)
            .join(Product.categories)
            .where(Category.department_id == department_id)
            .distinct()
            .order_by(Product.product_id)
        )
        page = await self._paginate(db, stmt, pagination)
        if page.total == 0:
            raise self.errors.not_found("PRD_03", "department_id", department_id)
        return page

    async def get_product(self, db: AsyncSession, product_id: int) -> Product:
        """
        Product with its attribute values and each value's attribute type
        eagerly loaded.

        Raises:
            NotFoundError (PRD_01)
        """
        self._require_id(product_id, "PRD_01", "product_id")
        stmt = (
            select(Product)
            .where(Product.product_id == product_id)
            .options(
                selectinload(Product.attribute_values).selectinload(AttributeValue.attribute)
            )
        )
        product = await self._get_one(db, stmt)
        if product is None:
            raise self.errors.not_found("PRD_01", "product_id", product_id)
        return product

    # ══════════════════════════════════════════════════════════════════════
    # Reviews
    # ══════════════════════════════════════════════════════════════════════

    async def get_product_reviews(
        self,
        db: AsyncSession,
        product_id: int,
        pagination: Optional[Pagination] = None,
    ) -> Page:
        """
        All reviews of a product, newest first.

        Reviews are filtered on Review.product_id; a product may have any
        number of them, including none (empty page).

        Raises:
            NotFoundError (REV_01): the product does not exist
        """
        self._require_id(product_id, "REV_01", "product_id")
        product = await self._get_one(
            db, select(Product.product_id).where(Product.product_id == product_id)
        )
        if product is None:
            raise self.errors.not_found("REV_01", "product_id", product_id)

        stmt = (
            select(Review)
            .where(Review.product_id == product_id)
            .order_by(Review.created_on.desc(), Review.review_id.desc())
        )
        return await self._paginate(db, stmt, pagination)

    async def create_product_review(
        self,
        db: AsyncSession,
        product_id: int,
        review: str,
        rating: int,
    ) -> ReviewReceipt:
        """
        Append a review to an existing product.

        How:
            1. Look up the product holding a shared row lock (FOR SHARE), so
               it cannot be deleted before this transaction commits
            2. Insert the review under the anonymous customer id
            3. Flush and refresh to read review_id/created_on set by the DB

        The request-scoped session commits steps 1-2 together.

        Raises:
            NotFoundError (PRD_01): unknown product; nothing is written
        """
        self._require_id(product_id, "PRD_01", "product_id")
        product = await self._get_one(
            db,
            select(Product)
            .where(Product.product_id == product_id)
            .with_for_update(read=True),
        )
        if product is None:
            raise self.errors.not_found("PRD_01", "product_id", product_id)

        entry = Review(
            product_id=product_id,
            customer_id=self.anonymous_customer_id,
            review=review,
            rating=rating,
        )
        db.add(entry)
        await db.flush()
        await db.refresh(entry)
        logger.info(
            "Review %s stored for product %s (rating=%d)",
            entry.review_id,
            product_id,
            rating,
        )

        return ReviewReceipt(
            name=product.name,
            review=entry.review,
            rating=entry.rating,
            created_on=entry.created_on,
        )

    # ══════════════════════════════════════════════════════════════════════
    # Departments & Categories
    # ══════════════════════════════════════════════════════════════════════

    async def list_departments(self, db: AsyncSession) -> List[Department]:
        result = await db.execute(select(Department).order_by(Department.department_id))
        return list(result.scalars().all())

    async def get_department(self, db: AsyncSession, department_id: int) -> Department:
        self._require_id(department_id, "DEP_02", "department_id")
        department = await self._get_one(
            db, select(Department).where(Department.department_id == department_id)
        )
        if department is None:
            raise self.errors.not_found("DEP_02", "department_id", department_id)
        return department

    async def list_categories(self, db: AsyncSession) -> List[Category]:
        result = await db.execute(select(Category).order_by(Category.category_id))
        return list(result.scalars().all())

    async def get_category(self, db: AsyncSession, category_id: int) -> Category:
        self._require_id(category_id, "CAT_01", "category_id")
        category = await self._get_one(
            db, select(Category).where(Category.category_id == category_id)
        )
        if category is None:
            raise self.errors.not_found("CAT_01", "category_id", category_id)
        return category

    async def list_categories_by_department(
        self,
        db: AsyncSession,
        department_id: int,
        pagination: Optional[Pagination] = None,
    ) -> Page:
        """
        Raises:
            NotFoundError (DEP_02): the department has no categories
        """
        self._require_id(department_id, "DEP_02", "department_id")
        stmt = (
            select(Category)
            .where(Category.department_id == department_id)
            .order_by(Category.category_id)
        )
        page = await self._paginate(db, stmt, pagination)
        if page.total == 0:
            raise self.errors.not_found("DEP_02", "department_id", department_id)
        return page

    async def get_category_of_product(
        self,
        db: AsyncSession,
        product_id: int,
    ) -> List[Category]:
        """
        Every category the product is filed under (not paginated).

        Raises:
            NotFoundError (CAT_02): the product is in no category
        """
        self._require_id(product_id, "CAT_02", "product_id")
        stmt = (
            select(Category)
            .join(Category.products)
            .where(Product.product_id == product_id)
            .order_by(Category.category_id)
        )
        result = await db.execute(stmt)
        categories = list(result.scalars().all())
        if not categories:
            raise self.errors.not_found("CAT_02", "product_id", product_id)
        return categories


catalog_service = CatalogService()


def get_catalog_service() -> CatalogService:
    """FastAPI dependency returning the shared service instance."""
    return catalog_service
