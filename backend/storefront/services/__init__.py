"""
Storefront Catalog - Services Layer
=====================================

What:  Query logic sitting between routes (HTTP) and the database.

Service Inventory:
    - CatalogService: every catalog read plus review creation
    - ErrorCatalog:   error code → message template lookup
    - pagination:     page/limit/offset resolution and envelope metadata
"""
