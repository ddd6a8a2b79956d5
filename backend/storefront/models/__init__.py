from storefront.models.catalog import (
    Attribute,
    AttributeValue,
    Category,
    Department,
    Product,
    Review,
    product_attribute,
    product_category,
)

__all__ = [
    "Attribute",
    "AttributeValue",
    "Category",
    "Department",
    "Product",
    "Review",
    "product_attribute",
    "product_category",
]
