"""Tests for catalog API endpoints."""

from fastapi.testclient import TestClient


def _ids(data: dict) -> list[str]:
    return [p["id"] for p in data["products"]]


class TestListProducts:
    """Tests for GET /products."""

    def test_list_defaults(self, client: TestClient) -> None:
        """Lists every product, newest first."""
        response = client.get("/products")
        assert response.status_code == 200

        data = response.json()
        assert data["total"] == 5
        assert data["page"] == 1
        assert data["per_page"] == 24
        assert data["has_more"] is False
        assert data["error"] is None
        assert _ids(data) == ["p5", "p4", "p3", "p2", "p1"]

    def test_products_carry_effective_price(self, client: TestClient) -> None:
        """Variant-priced products are listed at their cheapest variant."""
        data = client.get("/products").json()
        prices = {p["id"]: p["effective_price"] for p in data["products"]}
        assert prices["p2"] == 999
        assert prices["p4"] == 5999

    def test_unknown_fields_pass_through(self, client: TestClient) -> None:
        data = client.get("/products", params={"seller_id": "sunrise-bakery"}).json()
        product = data["products"][0]
        assert product["metadata"] == {"category": "bakery"}
        assert product["description"] == "Sweet island loaf"

    def test_price_range_with_price_sort(self, client: TestClient) -> None:
        response = client.get(
            "/products", params={"price_range": "under-10", "sort_by": "price_asc"}
        )
        assert response.status_code == 200

        data = response.json()
        assert _ids(data) == ["p1", "p5", "p2"]
        assert data["filters"]["price_range"] == "under-10"
        assert data["filters"]["sort_by"] == "price_asc"

    def test_pagination(self, client: TestClient) -> None:
        data = client.get(
            "/products", params={"sort_by": "title_asc", "page": 2, "per_page": 2}
        ).json()
        assert _ids(data) == ["p2", "p4"]
        assert data["total"] == 5
        assert data["total_pages"] == 3
        assert data["has_more"] is True

    def test_search(self, client: TestClient) -> None:
        data = client.get("/products", params={"q": "sauce"}).json()
        assert _ids(data) == ["p5"]

    def test_category_id(self, client: TestClient) -> None:
        data = client.get("/products", params={"category_id": "1"}).json()
        assert sorted(_ids(data)) == ["p2", "p5"]

    def test_category_slug(self, client: TestClient) -> None:
        data = client.get("/products", params={"category_slug": "crafts"}).json()
        assert _ids(data) == ["p3"]

    def test_rating_sort_includes_average(self, client: TestClient) -> None:
        data = client.get("/products", params={"sort_by": "rating-desc"}).json()
        assert _ids(data)[0] == "p1"
        assert data["products"][0]["avg_rating"] == 4.5

    def test_per_page_above_limit_rejected(self, client: TestClient) -> None:
        response = client.get("/products", params={"per_page": 1000})
        assert response.status_code == 422

        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert [d["field"] for d in data["details"]] == ["per_page"]
        assert data["request_id"] == response.headers["X-Request-ID"]

    def test_page_below_one_rejected(self, client: TestClient) -> None:
        response = client.get("/products", params={"page": 0})
        assert response.status_code == 422

    def test_store_failure_returns_empty_page(self, broken_client: TestClient) -> None:
        """Store errors render the empty state instead of an error status."""
        response = broken_client.get("/products", params={"price_range": "under-50"})
        assert response.status_code == 200

        data = response.json()
        assert data["products"] == []
        assert data["total"] == 0
        assert "connection refused" in data["error"]


class TestGetProduct:
    """Tests for GET /products/{product_id}."""

    def test_get_product(self, client: TestClient) -> None:
        response = client.get("/products/p2")
        assert response.status_code == 200

        data = response.json()
        assert data["id"] == "p2"
        assert data["effective_price"] == 999
        assert data["avg_rating"] == 3.0
        assert len(data["variants"]) == 2

    def test_get_product_not_found(self, client: TestClient) -> None:
        response = client.get("/products/does-not-exist")
        assert response.status_code == 404

        data = response.json()
        assert data["error_code"] == "PRODUCT_NOT_FOUND"
        assert "does-not-exist" in data["message"]
        assert data["request_id"]

    def test_store_failure_is_not_found(self, broken_client: TestClient) -> None:
        response = broken_client.get("/products/p1")
        assert response.status_code == 404


class TestListCategories:
    """Tests for GET /categories."""

    def test_list_categories(self, client: TestClient) -> None:
        response = client.get("/categories")
        assert response.status_code == 200

        data = response.json()
        assert [c["slug"] for c in data["categories"]] == ["apparel", "bakery", "food-spices"]

    def test_store_failure_is_empty(self, broken_client: TestClient) -> None:
        response = broken_client.get("/categories")
        assert response.status_code == 200
        assert response.json() == {"categories": []}
