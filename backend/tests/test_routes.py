"""
Storefront Catalog - HTTP API Tests
=====================================

What:  End-to-end requests through the FastAPI app (middleware, exception
       handlers, routers, service) against the seeded SQLite catalog.

What we test:
    ✅ Product envelope with computed pagination metadata
    ✅ Uniform error body for 404 / 400 / 422 / 500
    ✅ Search parameter validation (USR_10, USR_11)
    ✅ Review creation returns 201 and is visible afterwards
    ✅ Description truncation
    ✅ Request id header and health check
"""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from storefront.main import app
from storefront.middleware.logging import access_log_level
from storefront.services.catalog_service import Page, get_catalog_service


class TestProductEnvelope:

    @pytest.mark.asyncio
    async def test_default_page(self, test_client):
        response = await test_client.get("/products")

        assert response.status_code == 200
        body = response.json()
        assert body["paginationMeta"] == {
            "currentPage": 1,
            "currentPageSize": 20,
            "totalPages": 1,
            "totalRecords": 6,
        }
        assert [row["product_id"] for row in body["rows"]] == [1, 2, 3, 4, 5, 6]

    @pytest.mark.asyncio
    async def test_second_page(self, test_client):
        response = await test_client.get("/products", params={"page": 2, "limit": 4})

        body = response.json()
        assert body["paginationMeta"]["currentPage"] == 2
        assert body["paginationMeta"]["totalPages"] == 2
        assert [row["product_id"] for row in body["rows"]] == [5, 6]

    @pytest.mark.asyncio
    async def test_total_pages_computed_from_total(self, test_client):
        class StubService:
            async def list_products(self, db, pagination):
                return Page(items=[], total=45)

        app.dependency_overrides[get_catalog_service] = lambda: StubService()

        response = await test_client.get("/products", params={"page": 2})

        assert response.json()["paginationMeta"] == {
            "currentPage": 2,
            "currentPageSize": 20,
            "totalPages": 3,
            "totalRecords": 45,
        }

    @pytest.mark.asyncio
    async def test_descriptions_truncated(self, test_client):
        response = await test_client.get("/products", params={"description_length": 10})

        first = response.json()["rows"][0]
        assert first["description"] == "This beaut..."

    @pytest.mark.asyncio
    async def test_zero_limit_rejected(self, test_client):
        response = await test_client.get("/products", params={"limit": 0})

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["status"] == 422
        assert error["code"] == "validation_error"
        assert error["field"] == "limit"


class TestProductRoutes:

    @pytest.mark.asyncio
    async def test_product_detail_with_attributes(self, test_client):
        response = await test_client.get("/products/1")

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Arc d'Triomphe"
        attributes = {
            (item["attribute_type"]["name"], item["value"]) for item in body["attributes"]
        }
        assert attributes == {("Size", "S"), ("Color", "White")}

    @pytest.mark.asyncio
    async def test_unknown_product(self, test_client):
        response = await test_client.get("/products/0")

        assert response.status_code == 404
        assert response.json() == {
            "error": {
                "status": 404,
                "code": "PRD_01",
                "message": "Don't exist product with this ID: 0",
                "field": "product_id",
            }
        }

    @pytest.mark.asyncio
    async def test_products_in_department(self, test_client):
        response = await test_client.get("/products/inDepartment/1")
        assert [row["product_id"] for row in response.json()] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_products_in_empty_category(self, test_client):
        response = await test_client.get("/products/inCategory/4")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRD_02"


class TestSearch:

    @pytest.mark.asyncio
    async def test_search_all_fields(self, test_client):
        response = await test_client.get(
            "/products/search", params={"query_string": "SHOE", "all_words": "on"}
        )
        assert response.status_code == 200
        assert [row["product_id"] for row in response.json()] == [2, 3, 5]

    @pytest.mark.asyncio
    async def test_search_name_only(self, test_client):
        response = await test_client.get(
            "/products/search", params={"query_string": "Shoe", "all_words": "off"}
        )
        assert [row["product_id"] for row in response.json()] == [3]

    @pytest.mark.asyncio
    async def test_missing_all_words(self, test_client):
        response = await test_client.get("/products/search", params={"query_string": "shoe"})

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "USR_10"
        assert error["field"] == "all_words"

    @pytest.mark.asyncio
    async def test_missing_query_string(self, test_client):
        response = await test_client.get("/products/search", params={"all_words": "on"})

        assert response.status_code == 404
        assert response.json()["error"]["field"] == "query_string"

    @pytest.mark.asyncio
    async def test_blank_query_string_counts_as_missing(self, test_client):
        response = await test_client.get(
            "/products/search", params={"query_string": "   ", "all_words": "on"}
        )

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "USR_10"
        assert error["field"] == "query_string"

    @pytest.mark.asyncio
    async def test_invalid_all_words(self, test_client):
        response = await test_client.get(
            "/products/search", params={"query_string": "shoe", "all_words": "maybe"}
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "USR_11"
        assert error["field"] == "all_words"


class TestReviewRoutes:

    @pytest.mark.asyncio
    async def test_create_review(self, test_client):
        response = await test_client.post(
            "/products/reviews",
            json={"product_id": 3, "review": "Soft cotton", "rating": 4},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Canvas Shoe Tee"
        assert body["review"] == "Soft cotton"
        assert body["rating"] == 4
        assert body["created_on"]

        listed = await test_client.get("/products/3/reviews")
        assert [r["review"] for r in listed.json()] == ["Soft cotton"]

    @pytest.mark.asyncio
    async def test_create_review_unknown_product(self, test_client):
        response = await test_client.post(
            "/products/reviews",
            json={"product_id": 999, "review": "Ghost", "rating": 4},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRD_01"

        still_none = await test_client.get("/products/999/reviews")
        assert still_none.json()["error"]["code"] == "REV_01"

    @pytest.mark.asyncio
    async def test_create_review_for_oversized_product_id(self, test_client):
        response = await test_client.post(
            "/products/reviews",
            json={"product_id": 99999999999999999999, "review": "Ghost", "rating": 4},
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRD_01"

    @pytest.mark.asyncio
    async def test_rating_out_of_range(self, test_client):
        response = await test_client.post(
            "/products/reviews",
            json={"product_id": 1, "review": "Too good", "rating": 9},
        )

        assert response.status_code == 422
        assert response.json()["error"]["field"] == "rating"

    @pytest.mark.asyncio
    async def test_reviews_newest_first(self, test_client):
        response = await test_client.get("/products/1/reviews")
        assert [r["review_id"] for r in response.json()] == [2, 1]

    @pytest.mark.asyncio
    async def test_product_without_reviews(self, test_client):
        response = await test_client.get("/products/2/reviews")
        assert response.status_code == 200
        assert response.json() == []


class TestCatalogRoutes:

    @pytest.mark.asyncio
    async def test_unknown_department(self, test_client):
        response = await test_client.get("/departments/99")

        assert response.status_code == 404
        assert response.json() == {
            "error": {
                "status": 404,
                "code": "DEP_02",
                "message": "Don't exist department with this ID: 99",
                "field": "department_id",
            }
        }

    @pytest.mark.asyncio
    async def test_department_id_beyond_integer_range(self, test_client):
        response = await test_client.get("/departments/99999999999999999999")

        assert response.status_code == 404
        assert response.json() == {
            "error": {
                "status": 404,
                "code": "DEP_02",
                "message": "Don't exist department with this ID: 99999999999999999999",
                "field": "department_id",
            }
        }

    @pytest.mark.asyncio
    async def test_oversized_ids_map_to_resource_codes(self, test_client):
        for path, code in (
            ("/products/2147483648", "PRD_01"),
            ("/products/2147483648/reviews", "REV_01"),
            ("/categories/inProduct/99999999999999999999", "CAT_02"),
            ("/attributes/values/99999999999999999999", "ATR_01"),
        ):
            response = await test_client.get(path)
            assert response.status_code == 404, path
            assert response.json()["error"]["code"] == code

    @pytest.mark.asyncio
    async def test_list_departments(self, test_client):
        response = await test_client.get("/departments")
        assert [d["department_id"] for d in response.json()] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_categories_in_department(self, test_client):
        response = await test_client.get("/categories/inDepartment/1")
        assert [c["name"] for c in response.json()] == ["French", "Italian"]

    @pytest.mark.asyncio
    async def test_categories_of_product_not_truncated(
        self, test_client, file_under_extra_categories
    ):
        await file_under_extra_categories(product_id=6, count=25)

        response = await test_client.get("/categories/inProduct/6")

        assert response.status_code == 200
        assert len(response.json()) == 25

    @pytest.mark.asyncio
    async def test_category_of_uncategorized_product(self, test_client):
        response = await test_client.get("/categories/inProduct/6")
        assert response.json()["error"]["code"] == "CAT_02"

    @pytest.mark.asyncio
    async def test_attribute_values(self, test_client):
        response = await test_client.get("/attributes/values/2")
        assert [v["value"] for v in response.json()] == ["White", "Black"]

    @pytest.mark.asyncio
    async def test_attributes_in_product(self, test_client):
        response = await test_client.get("/attributes/inProduct/3")
        assert response.json() == [
            {"attribute_name": "Size", "attribute_value_id": 2, "attribute_value": "M"},
            {"attribute_name": "Color", "attribute_value_id": 5, "attribute_value": "Black"},
        ]

    @pytest.mark.asyncio
    async def test_list_attributes(self, test_client):
        response = await test_client.get("/attributes", params={"limit": 2})
        assert [a["name"] for a in response.json()] == ["Size", "Color"]

    @pytest.mark.asyncio
    async def test_unknown_attribute(self, test_client):
        response = await test_client.get("/attributes/42")
        assert response.json()["error"]["code"] == "ATR_01"

    @pytest.mark.asyncio
    async def test_list_categories(self, test_client):
        response = await test_client.get("/categories")
        assert [c["category_id"] for c in response.json()] == [1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_get_category(self, test_client):
        response = await test_client.get("/categories/3")
        body = response.json()
        assert body["name"] == "Animal"
        assert body["department_id"] == 2

    @pytest.mark.asyncio
    async def test_unknown_category(self, test_client):
        response = await test_client.get("/categories/77")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CAT_01"


class TestAmbient:

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/departments")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/departments", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_malformed_request_id_replaced(self, test_client):
        response = await test_client.get("/departments", headers={"X-Request-ID": "not an id"})
        assert response.headers["X-Request-ID"] != "not an id"
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["dialect"] == "sqlite"
        assert body["database_latency_ms"] >= 0

    @pytest.mark.asyncio
    async def test_unexpected_error_envelope(self, test_client):
        class BrokenService:
            async def list_departments(self, db):
                raise RuntimeError("boom")

        app.dependency_overrides[get_catalog_service] = lambda: BrokenService()
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/departments")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "internal_server_error"
        assert "boom" not in error["message"]


class TestAccessLogLevel:

    def test_levels_by_outcome(self):
        assert access_log_level(200, 5.0) == logging.INFO
        assert access_log_level(404, 5.0) == logging.WARNING
        assert access_log_level(200, 5000.0) == logging.WARNING
        assert access_log_level(500, 5.0) == logging.ERROR
