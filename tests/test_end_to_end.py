"""
A full catalog session through the HTTP API.
"""
from catalog_manager.db.database import SessionLocal
from catalog_manager.models import ProductImage

from tests.conftest import auth_headers, create_product, create_supplier, upload_image


def _product(client, headers, product_id):
    products = client.get("/api/products", headers=headers).json()
    return next(p for p in products if p["id"] == product_id)


class TestCatalogSession:
    def test_primary_image_lifecycle(self, client, upload_dir):
        headers = auth_headers(client)
        supplier = create_supplier(client, headers, name="Northwind")
        product = create_product(client, headers, supplier["id"], name="Teapot", price=12.5)
        assert product["primary_image_id"] is None

        image_a = upload_image(client, headers, product["id"]).json()["image"]
        assert _product(client, headers, product["id"])["primary_image_id"] == image_a["id"]

        image_b = upload_image(client, headers, product["id"]).json()["image"]
        current = _product(client, headers, product["id"])
        assert current["primary_image_id"] == image_a["id"]
        assert [i["id"] for i in current["images"]] == [image_b["id"], image_a["id"]]

        r = client.put(f"/api/products/images/{image_b['id']}/primary", headers=headers)
        assert r.status_code == 200
        assert r.json()["product"]["primary_image_id"] == image_b["id"]

        r = client.delete(f"/api/products/images/{image_b['id']}", headers=headers)
        assert r.status_code == 200
        assert r.json()["product"]["primary_image_id"] == image_a["id"]

        r = client.delete(f"/api/products/images/{image_a['id']}", headers=headers)
        assert r.status_code == 200
        assert r.json()["product"]["primary_image_id"] is None
        assert r.json()["product"]["images"] == []

        upload_image(client, headers, product["id"])
        r = client.delete(f"/api/products/{product['id']}", headers=headers)
        assert r.status_code == 200
        assert client.get("/api/products", headers=headers).json() == []

        with SessionLocal() as db:
            assert db.query(ProductImage).count() == 0
        assert list(upload_dir.iterdir()) == []

        # The supplier is free to go once its products are gone
        r = client.delete(f"/api/suppliers/{supplier['id']}", headers=headers)
        assert r.status_code == 200

    def test_supplier_change_after_reconfirming_password(self, client):
        headers = auth_headers(client, password="Secret99")
        first = create_supplier(client, headers, name="First")
        second = create_supplier(client, headers, name="Second")
        product = create_product(client, headers, first["id"])

        r = client.post("/api/auth/verify-password", json={"password": "nope"}, headers=headers)
        assert r.status_code == 400
        assert r.json()["error_type"] == "reauthentication_failed"

        r = client.post("/api/auth/verify-password", json={"password": "Secret99"}, headers=headers)
        assert r.status_code == 200

        r = client.put(
            f"/api/products/{product['id']}",
            json={"name": "Widget", "description": "A widget", "price": 10, "supplier_id": second["id"]},
            headers=headers,
        )
        assert r.status_code == 200
        assert r.json()["supplier"]["name"] == "Second"

        found = client.get("/api/products/search", params={"q": "seco"}, headers=headers).json()
        assert [p["id"] for p in found] == [product["id"]]
        assert client.get("/api/products/search", params={"q": "first"}, headers=headers).json() == []

    def test_tenants_are_isolated(self, client):
        alice = auth_headers(client, "alice@test.com")
        bob = auth_headers(client, "bob@test.com")
        supplier = create_supplier(client, alice)
        product = create_product(client, alice, supplier["id"])

        assert client.get("/api/suppliers", headers=bob).json() == []
        assert client.get("/api/products", headers=bob).json() == []
        assert client.get("/api/products/search", params={"q": "Widget"}, headers=bob).json() == []

        r = client.put(
            f"/api/suppliers/{supplier['id']}",
            json={"name": "Mine", "email": "x@y.z", "phone": "1"},
            headers=bob,
        )
        assert r.status_code == 404
        r = client.delete(f"/api/products/{product['id']}", headers=bob)
        assert r.status_code == 404

        assert client.get("/api/products", headers=alice).json()[0]["name"] == "Widget"
