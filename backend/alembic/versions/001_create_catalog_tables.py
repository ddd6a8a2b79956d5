"""Create catalog tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates department, category, product, attribute, attribute_value,
       review and the product_category / product_attribute link tables.

Rollback: downgrade() drops every catalog table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "department",
        sa.Column("department_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.PrimaryKeyConstraint("department_id"),
    )

    op.create_table(
        "category",
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("department_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(1000), nullable=True),
        sa.ForeignKeyConstraint(["department_id"], ["department.department_id"]),
        sa.PrimaryKeyConstraint("category_id"),
    )
    op.create_index("ix_category_department_id", "category", ["department_id"])

    op.create_table(
        "product",
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(1000), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "discounted_price",
            sa.Numeric(10, 2),
            nullable=False,
            server_default=sa.text("0.00"),
        ),
        sa.Column("image", sa.String(150), nullable=True),
        sa.Column("image_2", sa.String(150), nullable=True),
        sa.Column("thumbnail", sa.String(150), nullable=True),
        sa.Column("display", sa.SmallInteger(), nullable=False, server_default=sa.text("0")),
        sa.PrimaryKeyConstraint("product_id"),
    )

    op.create_table(
        "attribute",
        sa.Column("attribute_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("attribute_id"),
    )

    op.create_table(
        "attribute_value",
        sa.Column("attribute_value_id", sa.Integer(), nullable=False),
        sa.Column("attribute_id", sa.Integer(), nullable=False),
        sa.Column("value", sa.String(100), nullable=False),
        sa.ForeignKeyConstraint(["attribute_id"], ["attribute.attribute_id"]),
        sa.PrimaryKeyConstraint("attribute_value_id"),
    )
    op.create_index("ix_attribute_value_attribute_id", "attribute_value", ["attribute_id"])

    op.create_table(
        "product_category",
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["product_id"], ["product.product_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["category.category_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("product_id", "category_id"),
    )

    op.create_table(
        "product_attribute",
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("attribute_value_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["product_id"], ["product.product_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["attribute_value_id"],
            ["attribute_value.attribute_value_id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("product_id", "attribute_value_id"),
    )

    op.create_table(
        "review",
        sa.Column("review_id", sa.Integer(), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("review", sa.Text(), nullable=False),
        sa.Column("rating", sa.SmallInteger(), nullable=False),
        sa.Column(
            "created_on",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.ForeignKeyConstraint(["product_id"], ["product.product_id"]),
        sa.PrimaryKeyConstraint("review_id"),
    )
    # Reviews are always read per product
    op.create_index("ix_review_product_id", "review", ["product_id"])


def downgrade() -> None:
    op.drop_index("ix_review_product_id", table_name="review")
    op.drop_table("review")
    op.drop_table("product_attribute")
    op.drop_table("product_category")
    op.drop_index("ix_attribute_value_attribute_id", table_name="attribute_value")
    op.drop_table("attribute_value")
    op.drop_table("attribute")
    op.drop_table("product")
    op.drop_index("ix_category_department_id", table_name="category")
    op.drop_table("category")
    op.drop_table("department")
