"""
Shared fixtures and helpers.

The service runs against an in-memory SQLite database (one shared
connection) with tables created from the ORM metadata for every test, and
the local image provider writing into a per-test temporary directory.
"""
import os

# Must be set before catalog_manager.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RUN_MIGRATIONS"] = "false"
os.environ["IMAGE_PROVIDER"] = "local"
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

import catalog_manager.models  # noqa: F401
from catalog_manager.auth.credentials import credential_service
from catalog_manager.db.database import Base, SessionLocal, engine
from catalog_manager.main import app
from catalog_manager.models import User
from catalog_manager.services import get_image_provider
from catalog_manager.services.image_providers.local_provider import LocalImageProvider

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def image_provider(upload_dir):
    return LocalImageProvider(upload_dir=str(upload_dir), public_base_url="http://cdn.test")


@pytest.fixture
def client(image_provider):
    app.dependency_overrides[get_image_provider] = lambda: image_provider
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_user(db, email="owner@example.com", password="Pass123"):
    user = User(email=email, password_hash=credential_service.hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def register(client, email="owner@example.com", password="Pass123"):
    r = client.post("/api/auth/register", json={"email": email, "password": password})
    assert r.status_code == 201, r.text
    return r.json()


def auth_headers(client, email="owner@example.com", password="Pass123"):
    token = register(client, email, password)["token"]
    return {"Authorization": f"Bearer {token}"}


def create_supplier(client, headers, name="Acme Parts", email="sales@acme.test", phone="555-0100"):
    r = client.post(
        "/api/suppliers",
        json={"name": name, "email": email, "phone": phone},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


def create_product(client, headers, supplier_id, name="Widget", description="A widget", price=10):
    r = client.post(
        "/api/products",
        json={"name": name, "description": description, "price": price, "supplier_id": supplier_id},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


def upload_image(client, headers, product_id, filename="photo.png", content=PNG_BYTES, content_type="image/png"):
    return client.post(
        "/api/products/upload",
        data={"product_id": product_id},
        files={"image": (filename, content, content_type)},
        headers=headers,
    )
