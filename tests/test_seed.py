from sqlalchemy import func, select

from storefront.domain.models import GroceryItem, Product, User
from storefront.infrastructure.security import verify_password
from storefront.seed import DEFAULT_PASSWORD, seed

def test_seed_populates_empty_tables(db):
    inserted = seed(db)

    assert inserted == {"users": 2, "products": 2, "grocery_items": 4}
    admin = db.scalar(select(User).where(User.role == "admin"))
    assert verify_password(DEFAULT_PASSWORD, admin.password)
    assert {p.created_by for p in db.scalars(select(Product))} == {admin.id}

def test_seed_is_rerunnable(db):
    seed(db)
    assert seed(db) == {"users": 0, "products": 0, "grocery_items": 0}
    assert db.scalar(select(func.count()).select_from(GroceryItem)) == 4
