"""HTTP-level tests for the catalog API.

Requests go through the real FastAPI app over ``httpx.ASGITransport``, with
the database and cache dependencies pointed at test doubles.
"""

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from catalog_admin.main import app
from catalog_admin.services.aggregation_service import AggregationService
from catalog_admin.services.listing_service import ListingService


# ============================================================================
# TESTS: CATEGORIES
# ============================================================================

class TestCategoriesApi:
    """Tests for /categories."""

    async def test_list_categories_sorted_by_count(self, api, sample_products):
        response = await api.get("/categories")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert (body["skip"], body["limit"]) == (0, 10)
        assert body["categories"] == [
            {"id": 2, "name": "laptops", "count": 3},
            {"id": 1, "name": "beauty", "count": 1},
            {"id": 3, "name": "groceries", "count": 0},
        ]

    async def test_list_categories_clamps_params(self, api, sample_categories):
        response = await api.get("/categories", params={"limit": 1000, "skip": -4})

        body = response.json()
        assert (body["skip"], body["limit"]) == (0, 100)

    async def test_list_categories_is_cached_until_write(self, api, sample_categories, fake_cache):
        await api.get("/categories")
        assert "categories:l10:s0" in fake_cache.store

        await api.post("/categories", json={"name": "Tablets"})

        assert fake_cache.store == {}
        body = (await api.get("/categories")).json()
        assert body["total"] == 4

    async def test_create_category(self, api, sample_categories):
        response = await api.post("/categories", json={"name": "Home Decoration"})

        assert response.status_code == 201
        assert response.json() == {"id": 4, "name": "home-decoration", "count": 0}

    async def test_create_category_duplicate(self, api, sample_categories):
        response = await api.post("/categories", json={"name": "LAPTOPS"})

        assert response.status_code == 400
        assert "already exists" in response.json()["error"]

    async def test_create_category_name_too_long(self, api):
        response = await api.post("/categories", json={"name": "x" * 101})

        assert response.status_code == 400
        assert "at most 100" in response.json()["error"]

    async def test_create_category_blank_name(self, api):
        response = await api.post("/categories", json={"name": "  "})

        assert response.status_code == 400
        assert response.json() == {"error": "Category name is required"}

    async def test_update_category(self, api, sample_products):
        response = await api.put("/categories/1", json={"name": "Skin Care"})

        assert response.status_code == 200
        assert response.json() == {"id": 1, "name": "skin-care", "count": 1}

    async def test_update_to_existing_slug_conflicts(self, api):
        await api.post("/categories", json={"name": "Home Decoration"})
        other = (await api.post("/categories", json={"name": "Furniture"})).json()

        response = await api.put(f"/categories/{other['id']}", json={"name": "home-decoration"})

        assert response.status_code == 400

    async def test_update_missing_category(self, api):
        response = await api.put("/categories/99", json={"name": "x"})

        assert response.status_code == 404
        assert "error" in response.json()

    async def test_delete_category_with_transfer(self, api, sample_products):
        response = await api.delete("/categories/2", params={"transferToCategoryId": 1})

        assert response.status_code == 200
        assert response.json() == {"id": 2, "name": "laptops", "deleted": True}

        categories = (await api.get("/categories")).json()["categories"]
        assert [c["id"] for c in categories] == [1, 3]
        assert categories[0]["count"] == 4

        products = (await api.get("/products", params={"categoryId": 1})).json()
        assert sorted(p["id"] for p in products["products"]) == [1, 2, 3, 4]

    async def test_delete_category_without_transfer(self, api, sample_products):
        response = await api.delete("/categories/2")

        assert response.status_code == 200

        products = (await api.get("/products")).json()["products"]
        laptops = [p for p in products if p["id"] in (2, 3, 4)]
        assert all(p["categoryId"] is None and p["category"] == "" for p in laptops)

    @pytest.mark.parametrize("target, status", [(2, 400), (77, 400)])
    async def test_delete_category_bad_transfer(self, api, sample_products, target, status):
        response = await api.delete("/categories/2", params={"transferToCategoryId": target})

        assert response.status_code == status
        assert "error" in response.json()

    async def test_delete_missing_category(self, api):
        response = await api.delete("/categories/5")

        assert response.status_code == 404


# ============================================================================
# TESTS: PRODUCTS
# ============================================================================

class TestProductsApi:
    """Tests for /products."""

    async def test_list_products_default_page(self, api, sample_products):
        response = await api.get("/products")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 6
        assert (body["skip"], body["limit"]) == (0, 10)
        first = body["products"][0]
        assert first["id"] == 1
        assert first["category"] == "beauty"
        assert first["categoryId"] == 1
        assert "discountPercentage" in first

    async def test_list_products_pagination(self, api, sample_products):
        first = (await api.get("/products", params={"limit": 4, "skip": 0})).json()
        second = (await api.get("/products", params={"limit": 4, "skip": 4})).json()

        assert [p["id"] for p in first["products"]] == [1, 2, 3, 4]
        assert [p["id"] for p in second["products"]] == [5, 6]

    async def test_list_products_skip_beyond_total(self, api, sample_products):
        body = (await api.get("/products", params={"skip": 100})).json()

        assert body["products"] == []
        assert body["total"] == 6

    async def test_list_products_category_filter_forms(self, api, sample_products):
        repeated = await api.get("/products", params=[("categoryId", 1), ("categoryId", 2)])
        comma = await api.get("/products", params={"categoryId": "1,2"})

        assert repeated.json()["total"] == comma.json()["total"] == 4

    async def test_list_products_invalid_category_filter(self, api):
        response = await api.get("/products", params={"categoryId": "abc"})

        assert response.status_code == 400

    async def test_list_products_search(self, api, sample_products):
        body = (await api.get("/products", params={"q": "apple"})).json()

        assert sorted(p["id"] for p in body["products"]) == [2, 6]

    async def test_list_products_select(self, api, sample_products):
        body = (await api.get("/products", params={"select": "title,price,bogus"})).json()

        assert body["products"][0] == {"title": "Essence Mascara", "price": 10.0, "category": "beauty"}

    async def test_get_product(self, api, sample_products):
        response = await api.get("/products/4")

        assert response.status_code == 200
        assert response.json()["title"] == "Zenbook Duo"

    async def test_get_product_bad_id(self, api):
        response = await api.get("/products/abc")

        assert response.status_code == 400
        assert "error" in response.json()

    async def test_create_product(self, api, sample_categories):
        response = await api.post(
            "/products",
            json={"title": "Galaxy Tab", "categoryId": 2, "price": 349.99, "discountPercentage": 5},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 1
        assert body["category"] == "laptops"
        assert body["discountPercentage"] == 5
        assert body["stock"] == 0

        counts = (await api.get("/categories")).json()["categories"]
        assert counts[0] == {"id": 2, "name": "laptops", "count": 1}

    async def test_create_product_missing_price(self, api, sample_categories):
        response = await api.post("/products", json={"title": "No price", "categoryId": 1})

        assert response.status_code == 400
        assert "price" in response.json()["error"]

    @pytest.mark.parametrize("field, size", [("brand", 201), ("thumbnail", 1001), ("title", 501)])
    async def test_create_product_field_too_long(self, api, sample_categories, field, size):
        body = {"title": "Lamp", "price": 5, field: "x" * size}

        response = await api.post("/products", json=body)

        assert response.status_code == 400
        assert field in response.json()["error"]

    async def test_update_product_brand_too_long(self, api, sample_products):
        response = await api.put("/products/1", json={"brand": "b" * 201})

        assert response.status_code == 400
        assert (await api.get("/products/1")).json()["brand"] == "Essence"

    async def test_create_product_unknown_category(self, api, sample_categories):
        response = await api.post("/products", json={"title": "X", "categoryId": 50, "price": 1})

        assert response.status_code == 400

    async def test_update_product_partial(self, api, sample_products):
        response = await api.put("/products/5", json={"stock": 40, "categoryId": 3})

        assert response.status_code == 200
        body = response.json()
        assert body["stock"] == 40
        assert body["title"] == "Desk Lamp"
        assert body["category"] == "groceries"

    async def test_update_missing_product(self, api):
        response = await api.put("/products/404", json={"stock": 1})

        assert response.status_code == 404

    async def test_delete_product(self, api, sample_products):
        response = await api.delete("/products/2")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == 2
        assert body["isDeleted"] is True
        assert body["category"] == "laptops"
        assert body["deletedOn"]

        assert (await api.get("/products/2")).status_code == 404
        assert (await api.get("/products")).json()["total"] == 5


# ============================================================================
# TESTS: MISC
# ============================================================================

class TestMiscApi:
    async def test_health(self, api):
        response = await api.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "ok"

    async def test_unknown_route_uses_error_body(self, api):
        response = await api.get("/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}

    async def test_store_failure_returns_500(self, api, sample_categories, monkeypatch):
        async def broken(self):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(AggregationService, "ranked_categories", broken)

        response = await api.get("/categories")

        assert response.status_code == 500
        assert "database is locked" in response.json()["error"]

    async def test_unexpected_error_uses_error_body(self, api, monkeypatch):
        async def broken(self, *args, **kwargs):
            raise RuntimeError("connection refused")

        monkeypatch.setattr(ListingService, "list_products", broken)
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)

        async with httpx.AsyncClient(transport=transport, base_url="http://test/api/v1") as client:
            response = await client.get("/products")

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"error": "connection refused"}
