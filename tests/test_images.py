"""
Product images and the primary-image invariant.
"""
import uuid

import pytest

from catalog_manager.config import settings
from catalog_manager.errors import ForbiddenError, ImageStorageError, InvalidRequestError, NotFoundError
from catalog_manager.main import app
from catalog_manager.models import Product, ProductImage
from catalog_manager.schemas.product import ProductCreate
from catalog_manager.schemas.supplier import SupplierCreate
from catalog_manager.services import get_image_provider
from catalog_manager.services.image_providers.local_provider import LocalImageProvider
from catalog_manager.services.image_service import ImageService
from catalog_manager.services.product_service import ProductService
from catalog_manager.services.supplier_service import SupplierService

from tests.conftest import PNG_BYTES, auth_headers, create_product, create_supplier, make_user, upload_image


def assert_primary_invariant(db, product_id):
    db.expire_all()
    product = db.get(Product, product_id)
    own_ids = {image.id for image in product.images}
    assert product.primary_image_id is None or product.primary_image_id in own_ids


@pytest.fixture
def owner_product(db_session, image_provider):
    owner = make_user(db_session, "owner@test.com")
    supplier = SupplierService(db_session).create_supplier(
        owner.id, SupplierCreate(name="Acme", email="a@s.test", phone="1")
    )
    product = ProductService(db_session, image_provider).create_product(
        owner.id, ProductCreate(name="Widget", description="d", price=1, supplier_id=supplier.id)
    )
    return owner, product


@pytest.fixture
def images(db_session, image_provider):
    return ImageService(db_session, image_provider)


def _upload(images, owner, product, name="photo.png"):
    return images.upload_image(owner.id, product.id, PNG_BYTES, filename=name, content_type="image/png")


class TestUpload:
    def test_first_upload_becomes_primary(self, images, owner_product, db_session):
        owner, product = owner_product
        image, refreshed = _upload(images, owner, product)

        assert refreshed.primary_image_id == image.id
        assert [i.id for i in refreshed.images] == [image.id]
        assert_primary_invariant(db_session, product.id)

    def test_second_upload_keeps_primary(self, images, owner_product, db_session):
        owner, product = owner_product
        first, _ = _upload(images, owner, product)
        second, refreshed = _upload(images, owner, product)

        assert refreshed.primary_image_id == first.id
        # newest first
        assert [i.id for i in refreshed.images] == [second.id, first.id]
        assert_primary_invariant(db_session, product.id)

    def test_payload_is_written_to_storage(self, images, owner_product, upload_dir):
        owner, product = owner_product
        image, _ = _upload(images, owner, product, name="shot.JPG")

        assert image.path.startswith("/uploads/")
        assert image.path.endswith(".jpg")
        assert (upload_dir / image.path.rsplit("/", 1)[-1]).read_bytes() == PNG_BYTES

    def test_upload_to_foreign_product_is_not_found(self, images, owner_product, db_session, upload_dir):
        _, product = owner_product
        stranger = make_user(db_session, "stranger@test.com")

        with pytest.raises(NotFoundError, match="Product not found"):
            images.upload_image(stranger.id, product.id, PNG_BYTES, content_type="image/png")

        assert db_session.query(ProductImage).count() == 0
        assert not upload_dir.exists()

    def test_non_image_is_rejected(self, images, owner_product, db_session):
        owner, product = owner_product
        with pytest.raises(InvalidRequestError, match="must be an image"):
            images.upload_image(owner.id, product.id, b"hello", filename="a.txt", content_type="text/plain")
        assert db_session.query(ProductImage).count() == 0

    def test_empty_file_is_rejected(self, images, owner_product):
        owner, product = owner_product
        with pytest.raises(InvalidRequestError):
            images.upload_image(owner.id, product.id, b"", content_type="image/png")

    def test_oversized_payload_is_rejected(self, images, owner_product, db_session, upload_dir, monkeypatch):
        owner, product = owner_product
        monkeypatch.setattr(settings, "max_upload_bytes", 10)

        with pytest.raises(InvalidRequestError, match="maximum upload size"):
            images.upload_image(owner.id, product.id, PNG_BYTES, content_type="image/png")

        assert db_session.query(ProductImage).count() == 0
        assert not upload_dir.exists()

    def test_storage_failure_creates_no_row(self, db_session, owner_product):
        owner, product = owner_product

        class BrokenProvider:
            def upload_image(self, image_data, metadata=None):
                return None

        service = ImageService(db_session, BrokenProvider())
        with pytest.raises(ImageStorageError):
            service.upload_image(owner.id, product.id, PNG_BYTES, content_type="image/png")
        assert db_session.query(ProductImage).count() == 0


class TestDelete:
    def test_deleting_non_primary_keeps_primary(self, images, owner_product, db_session):
        owner, product = owner_product
        first, _ = _upload(images, owner, product)
        second, _ = _upload(images, owner, product)

        refreshed = images.delete_image(owner.id, second.id)

        assert refreshed.primary_image_id == first.id
        assert [i.id for i in refreshed.images] == [first.id]
        assert_primary_invariant(db_session, product.id)

    def test_deleting_primary_falls_back_to_most_recent_remaining(self, images, owner_product, db_session):
        owner, product = owner_product
        first, _ = _upload(images, owner, product)
        second, _ = _upload(images, owner, product)
        third, _ = _upload(images, owner, product)

        refreshed = images.delete_image(owner.id, first.id)

        assert refreshed.primary_image_id == third.id
        assert {i.id for i in refreshed.images} == {second.id, third.id}
        assert_primary_invariant(db_session, product.id)

    def test_deleting_last_image_clears_primary(self, images, owner_product, db_session):
        owner, product = owner_product
        only, _ = _upload(images, owner, product)

        refreshed = images.delete_image(owner.id, only.id)

        assert refreshed.primary_image_id is None
        assert refreshed.images == []
        assert refreshed.primary_image is None
        assert_primary_invariant(db_session, product.id)

    def test_stored_file_is_removed(self, images, owner_product, upload_dir):
        owner, product = owner_product
        image, _ = _upload(images, owner, product)
        stored = upload_dir / image.path.rsplit("/", 1)[-1]
        assert stored.exists()

        images.delete_image(owner.id, image.id)

        assert not stored.exists()

    def test_foreign_image_is_forbidden(self, images, owner_product, db_session):
        owner, product = owner_product
        image, _ = _upload(images, owner, product)
        stranger = make_user(db_session, "stranger@test.com")

        with pytest.raises(ForbiddenError):
            images.delete_image(stranger.id, image.id)

        assert db_session.get(ProductImage, image.id) is not None

    def test_unknown_image_is_not_found(self, images, owner_product):
        owner, _ = owner_product
        with pytest.raises(NotFoundError, match="Image not found"):
            images.delete_image(owner.id, uuid.uuid4())

    def test_deleting_product_removes_its_images(self, images, owner_product, db_session, image_provider, upload_dir):
        owner, product = owner_product
        _upload(images, owner, product)
        _upload(images, owner, product)

        ProductService(db_session, image_provider).delete_product(owner.id, product.id)

        assert db_session.query(ProductImage).filter(ProductImage.product_id == product.id).count() == 0
        assert list(upload_dir.iterdir()) == []


class TestSetPrimary:
    def test_set_primary_moves_pointer(self, images, owner_product, db_session):
        owner, product = owner_product
        first, _ = _upload(images, owner, product)
        second, _ = _upload(images, owner, product)

        refreshed = images.set_primary_image(owner.id, second.id)
        assert refreshed.primary_image_id == second.id
        assert refreshed.primary_image.id == second.id

        # Setting it again is a no-op
        refreshed = images.set_primary_image(owner.id, second.id)
        assert refreshed.primary_image_id == second.id
        assert_primary_invariant(db_session, product.id)

    def test_set_primary_on_foreign_image_is_forbidden(self, images, owner_product, db_session):
        owner, product = owner_product
        first, _ = _upload(images, owner, product)
        second, _ = _upload(images, owner, product)
        stranger = make_user(db_session, "stranger@test.com")

        with pytest.raises(ForbiddenError):
            images.set_primary_image(stranger.id, second.id)

        db_session.expire_all()
        assert db_session.get(Product, product.id).primary_image_id == first.id

    def test_images_of_other_products_cannot_become_primary(self, images, owner_product, db_session, image_provider):
        owner, product = owner_product
        other = ProductService(db_session, image_provider).create_product(
            owner.id, ProductCreate(name="Gadget", description="d", price=1, supplier_id=product.supplier_id)
        )
        own, _ = _upload(images, owner, product)
        foreign, _ = _upload(images, owner, other)

        images.set_primary_image(owner.id, foreign.id)

        db_session.expire_all()
        assert db_session.get(Product, product.id).primary_image_id == own.id
        assert db_session.get(Product, other.id).primary_image_id == foreign.id


class TestImageApi:
    def test_upload_returns_image_and_product(self, client):
        headers = auth_headers(client)
        product = create_product(client, headers, create_supplier(client, headers)["id"])

        r = upload_image(client, headers, product["id"])

        assert r.status_code == 201
        body = r.json()
        assert body["image"]["path"].startswith("/uploads/")
        assert body["image"]["url"] == "http://cdn.test" + body["image"]["path"]
        assert body["product"]["primary_image_id"] == body["image"]["id"]
        assert body["product"]["primary_image"]["id"] == body["image"]["id"]
        assert [i["id"] for i in body["product"]["images"]] == [body["image"]["id"]]

    def test_upload_rejects_non_images(self, client):
        headers = auth_headers(client)
        product = create_product(client, headers, create_supplier(client, headers)["id"])

        r = upload_image(client, headers, product["id"], filename="notes.txt", content=b"hi", content_type="text/plain")

        assert r.status_code == 400
        assert r.json() == {"error_type": "validation_error", "detail": "File must be an image"}

    def test_upload_over_size_limit_is_rejected(self, client, upload_dir, monkeypatch):
        headers = auth_headers(client)
        product = create_product(client, headers, create_supplier(client, headers)["id"])
        monkeypatch.setattr(settings, "max_upload_bytes", 10)

        r = upload_image(client, headers, product["id"], content=PNG_BYTES * 100)

        assert r.status_code == 400
        assert r.json()["error_type"] == "validation_error"
        assert "maximum upload size" in r.json()["detail"]
        assert client.get("/api/products", headers=headers).json()[0]["images"] == []
        assert not upload_dir.exists()

    def test_upload_requires_file_and_product(self, client):
        headers = auth_headers(client)
        r = client.post("/api/products/upload", data={}, headers=headers)
        assert r.status_code == 422

    def test_upload_to_foreign_product_is_not_found(self, client):
        alice = auth_headers(client, "alice@test.com")
        bob = auth_headers(client, "bob@test.com")
        product = create_product(client, alice, create_supplier(client, alice)["id"])

        r = upload_image(client, bob, product["id"])
        assert r.status_code == 404
        assert r.json()["detail"] == "Product not found"

    def test_foreign_image_mutations_are_forbidden(self, client):
        alice = auth_headers(client, "alice@test.com")
        bob = auth_headers(client, "bob@test.com")
        product = create_product(client, alice, create_supplier(client, alice)["id"])
        image_id = upload_image(client, alice, product["id"]).json()["image"]["id"]

        r = client.put(f"/api/products/images/{image_id}/primary", headers=bob)
        assert r.status_code == 403
        assert r.json()["error_type"] == "forbidden"

        r = client.delete(f"/api/products/images/{image_id}", headers=bob)
        assert r.status_code == 403

    def test_unknown_image_is_not_found(self, client):
        headers = auth_headers(client)
        r = client.delete(f"/api/products/images/{uuid.uuid4()}", headers=headers)
        assert r.status_code == 404
        assert r.json() == {"error_type": "not_found", "detail": "Image not found"}

    def test_storage_failure_is_internal_error(self, client):
        headers = auth_headers(client)
        product = create_product(client, headers, create_supplier(client, headers)["id"])

        class BrokenProvider(LocalImageProvider):
            def upload_image(self, image_data, metadata=None):
                return None

        app.dependency_overrides[get_image_provider] = lambda: BrokenProvider(public_base_url="")
        r = upload_image(client, headers, product["id"])

        assert r.status_code == 500
        assert r.json() == {"error_type": "internal_error", "detail": "Failed to store image"}
        listed = client.get("/api/products", headers=headers).json()
        assert listed[0]["images"] == []
        assert listed[0]["primary_image_id"] is None
