"""
Component tests for the catalogue endpoints.
"""
import pytest
from fastapi.testclient import TestClient

from app.domain.errors import BadRequest
from app.services.product_service import parse_product_id


class TestListProducts:
    def test_empty_catalogue(self, client: TestClient):
        response = client.get("/products")

        assert response.status_code == 200
        assert response.json() == {"products": []}

    def test_lists_every_product(self, client: TestClient, products):
        response = client.get("/products")

        assert response.status_code == 200
        listed = response.json()["products"]
        assert [p["name"] for p in listed] == ["Pen", "Notebook", "Desk Lamp", "Mug"]

        pen = listed[0]
        assert pen["price"] == 2.0
        assert pen["stock"] == 500
        assert pen["images"] == ["https://cdn.example.com/products/pen.jpg"]
        assert "createdAt" in pen and "updatedAt" in pen


class TestGetProduct:
    def test_existing_product(self, client: TestClient, products):
        lamp = products["Desk Lamp"]

        response = client.get(f"/product/{lamp.id}")

        assert response.status_code == 200
        product = response.json()["product"]
        assert product["id"] == lamp.id
        assert product["name"] == "Desk Lamp"
        assert product["price"] == 34.9
        assert len(product["images"]) == 2

    def test_invalid_id_is_bad_request(self, client: TestClient):
        response = client.get("/product/not-an-id")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid product ID"

    def test_unknown_id_is_not_found(self, client: TestClient, products):
        response = client.get("/product/999999")

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found"


@pytest.mark.parametrize("raw", ["", "0", "-3", "1.5", "abc", "١٢", "9" * 19])
def test_parse_product_id_rejects_malformed(raw):
    with pytest.raises(BadRequest):
        parse_product_id(raw)


def test_parse_product_id_accepts_positive_integers():
    assert parse_product_id(" 42 ") == 42
