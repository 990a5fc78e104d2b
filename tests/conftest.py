import os
import tempfile

# Point the service at a throwaway SQLite database before anything imports it
_TMP_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'storefront.db')}"
os.environ["RUN_MIGRATIONS"] = "false"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from storefront.domain.models import Base, GroceryItem, User
from storefront.infrastructure.db import SessionLocal, engine
from storefront.infrastructure.security import create_access_token, hash_password
from storefront.main import app

@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield

@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c

@pytest.fixture
def make_user(db):
    def _make(email="customer@example.com", role="customer", name="Customer", password="password123"):
        user = User(name=name, email=email, password=hash_password(password), role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make

@pytest.fixture
def make_item(db):
    def _make(name="Apples", price=2.5, inventory=10):
        item = GroceryItem(name=name, price=price, inventory=inventory)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item
    return _make

def bearer(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}

@pytest.fixture
def customer(make_user):
    return make_user()

@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", role="admin", name="Admin")

@pytest.fixture
def customer_headers(customer):
    return bearer(customer)

@pytest.fixture
def admin_headers(admin):
    return bearer(admin)

@pytest.fixture
def headers_for():
    return bearer
