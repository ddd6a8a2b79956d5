"""
Storefront Catalog - Test Configuration (conftest.py)
=======================================================

Fixture Hierarchy:
    ├── mock_db_session: AsyncMock session for pure unit tests
    ├── db_engine:       in-memory SQLite engine with the catalog schema
    ├── db_session:      session on db_engine, pre-seeded with a small catalog
    ├── service:         CatalogService with the default error catalog
    ├── file_under_extra_categories: links a product to N extra categories
    └── test_client:     HTTPX AsyncClient on the FastAPI app, with
                         get_db_session overridden to use db_engine

Seeded catalog:
    Departments  1 Regional (cats 1, 2)   2 Nature (cats 3, 4)   3 Seasonal (none)
    Categories   1 French  2 Italian  3 Animal  4 Flower (no products)
    Products     1 Arc d'Triomphe   cats 1      attrs S, White   2 reviews
                 2 Chartres         cats 1
                 3 Canvas Shoe Tee  cats 1, 2   attrs M, Black
                 4 Gallic Cock      cats 3
                 5 Snowy shoelace   cats 3
                 6 Loose Print      no category, no attributes
    Attributes   1 Size (S, M, L)  2 Color (White, Black)  3 Material (no values)
"""

import os
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

# Point settings at SQLite before any storefront module is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from storefront.database import Base, get_db_session
from storefront.models.catalog import (
    Attribute,
    AttributeValue,
    Category,
    Department,
    Product,
    Review,
    product_category,
)
from storefront.services.catalog_service import CatalogService


# ══════════════════════════════════════════════════════════════════════════
# Unit-test fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = obj
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# SQLite-backed fixtures
# ══════════════════════════════════════════════════════════════════════════

def _seed_catalog():
    regional = Department(department_id=1, name="Regional", description="Proud of our heritage")
    nature = Department(department_id=2, name="Nature", description="Find flowers and animals")
    seasonal = Department(department_id=3, name="Seasonal", description="Every time of year")

    french = Category(category_id=1, department_id=1, name="French")
    italian = Category(category_id=2, department_id=1, name="Italian")
    animal = Category(category_id=3, department_id=2, name="Animal")
    flower = Category(category_id=4, department_id=2, name="Flower")

    size = Attribute(attribute_id=1, name="Size")
    color = Attribute(attribute_id=2, name="Color")
    material = Attribute(attribute_id=3, name="Material")

    small = AttributeValue(attribute_value_id=1, attribute=size, value="S")
    medium = AttributeValue(attribute_value_id=2, attribute=size, value="M")
    large = AttributeValue(attribute_value_id=3, attribute=size, value="L")
    white = AttributeValue(attribute_value_id=4, attribute=color, value="White")
    black = AttributeValue(attribute_value_id=5, attribute=color, value="Black")

    def product(product_id, name, description, categories=(), values=()):
        return Product(
            product_id=product_id,
            name=name,
            description=description,
            price=Decimal("14.99"),
            discounted_price=Decimal("0.00"),
            thumbnail=f"product-{product_id}-thumbnail.gif",
            display=0,
            categories=list(categories),
            attribute_values=list(values),
        )

    products = [
        product(
            1,
            "Arc d'Triomphe",
            "This beautiful and iconic T-shirt will no doubt lead you to your own triumph. " * 4,
            [french],
            [small, white],
        ),
        product(2, "Chartres Cathedral", "Pairs nicely with walking shoes.", [french]),
        product(3, "Canvas Shoe Tee", "A classic tee.", [french, italian], [medium, black]),
        product(4, "Gallic Cock", "This fancy chicken is perhaps the most famous rooster.", [animal]),
        product(5, "Snowy shoelace", "Knotted print.", [animal]),
        product(6, "Loose Print", "Not filed anywhere yet."),
    ]

    reviews = [
        Review(
            review_id=1,
            customer_id=11,
            product_id=1,
            review="Loved it",
            rating=5,
            created_on=datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc),
        ),
        Review(
            review_id=2,
            customer_id=12,
            product_id=1,
            review="Runs small",
            rating=3,
            created_on=datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc),
        ),
    ]

    return [
        regional, nature, seasonal,
        french, italian, animal, flower,
        size, color, material,
        small, medium, large, white, black,
        *products,
        *reviews,
    ]


@pytest_asyncio.fixture
async def db_engine():
    """Fresh in-memory database per test; StaticPool keeps one shared connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add_all(_seed_catalog())
        await session.commit()

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def file_under_extra_categories(db_session):
    """
    Create `count` categories (ids from 100, department 3) and link the
    product to every one of them.
    """

    async def _file(product_id, count):
        db_session.add_all(
            Category(category_id=100 + i, department_id=3, name=f"Extra {i}")
            for i in range(count)
        )
        await db_session.flush()
        await db_session.execute(
            insert(product_category),
            [{"product_id": product_id, "category_id": 100 + i} for i in range(count)],
        )
        await db_session.commit()

    return _file


@pytest.fixture
def service():
    return CatalogService()


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from storefront.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
