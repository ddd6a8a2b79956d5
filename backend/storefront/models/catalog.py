"""
Storefront Catalog - SQLAlchemy Models
========================================

What:  ORM models for the catalog tables and their association tables.
Who:   Queried by CatalogService; read by Alembic for migrations.

Relationships:
    Department 1──* Category *──* Product *──* AttributeValue *──1 Attribute
                                     │
                                     1
                                     │
                                     *
                                   Review

Column types are dialect-neutral so the same models run against PostgreSQL
in production and SQLite in the test suite.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Table,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.database import Base


# ── Association Tables ────────────────────────────────────────────────────

product_category = Table(
    "product_category",
    Base.metadata,
    Column("product_id", ForeignKey("product.product_id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", ForeignKey("category.category_id", ondelete="CASCADE"), primary_key=True),
)

product_attribute = Table(
    "product_attribute",
    Base.metadata,
    Column("product_id", ForeignKey("product.product_id", ondelete="CASCADE"), primary_key=True),
    Column(
        "attribute_value_id",
        ForeignKey("attribute_value.attribute_value_id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Department(Base):
    __tablename__ = "department"

    department_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    categories: Mapped[List["Category"]] = relationship(back_populates="department")

    def __repr__(self) -> str:
        return f"<Department(id={self.department_id}, name='{self.name}')>"


class Category(Base):
    __tablename__ = "category"

    category_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    department_id: Mapped[int] = mapped_column(
        ForeignKey("department.department_id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    department: Mapped[Department] = relationship(back_populates="categories")
    products: Mapped[List["Product"]] = relationship(
        secondary=product_category, back_populates="categories"
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.category_id}, department_id={self.department_id})>"


class Attribute(Base):
    """An attribute type such as Size or Color."""

    __tablename__ = "attribute"

    attribute_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    values: Mapped[List["AttributeValue"]] = relationship(back_populates="attribute")


class AttributeValue(Base):
    """One concrete value of an attribute (e.g. Size → XL)."""

    __tablename__ = "attribute_value"

    attribute_value_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    attribute_id: Mapped[int] = mapped_column(
        ForeignKey("attribute.attribute_id"), nullable=False, index=True
    )
    value: Mapped[str] = mapped_column(String(100), nullable=False)

    attribute: Mapped[Attribute] = relationship(back_populates="values")
    products: Mapped[List["Product"]] = relationship(
        secondary=product_attribute, back_populates="attribute_values"
    )


class Product(Base):
    __tablename__ = "product"

    product_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    discounted_price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00"), server_default=text("0.00")
    )
    image: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    image_2: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    thumbnail: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    # 0 = regular, 1 = on catalog, 2 = on department, 3 = both
    display: Mapped[int] = mapped_column(
        SmallInteger, nullable=False, default=0, server_default=text("0")
    )

    categories: Mapped[List[Category]] = relationship(
        secondary=product_category, back_populates="products"
    )
    attribute_values: Mapped[List[AttributeValue]] = relationship(
        secondary=product_attribute, back_populates="products"
    )
    reviews: Mapped[List["Review"]] = relationship(back_populates="product")

    def __repr__(self) -> str:
        return f"<Product(id={self.product_id}, name='{self.name}')>"


class Review(Base):
    """
    A customer review of a product.

    review_id and created_on are assigned by the database on insert; the
    service refreshes the instance after flushing to read them back.
    """

    __tablename__ = "review"

    review_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(Integer, nullable=False)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("product.product_id"), nullable=False, index=True
    )
    review: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    product: Mapped[Product] = relationship(back_populates="reviews")

    def __repr__(self) -> str:
        return (
            f"<Review(id={self.review_id}, product_id={self.product_id}, "
            f"rating={self.rating})>"
        )
