"""
Storefront Catalog - API Routes Package
=========================================

Route Inventory:
    - attributes.py:   /attributes/...
    - products.py:     /products/... (including reviews)
    - departments.py:  /departments/...
    - categories.py:   /categories/...
    - health.py:       /health

Routes stay thin: they read path/query/body parameters, call CatalogService
and convert ORM results into response schemas. 404s are raised by the
service and rendered by the exception handlers in main.py.
"""
