"""Load demo users, products and grocery items into an empty database.

Run with ``python -m storefront.seed``. Tables that already hold rows are
left untouched, so the script can be re-run safely.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from storefront.core.logging_config import get_logger
from storefront.domain.models import GroceryItem, Product, User
from storefront.infrastructure.security import hash_password

logger = get_logger(__name__)

DEFAULT_PASSWORD = "password123"

USERS = [
    {"name": "Admin User", "email": "admin@grocerystore.com", "role": "admin"},
    {"name": "Customer User", "email": "customer@example.com", "role": "customer"},
]

PRODUCTS = [
    {"name": "Reusable Shopping Bag", "description": "Sturdy cotton tote", "price": 4.99,
     "image_url": "https://example.com/tote.jpg"},
    {"name": "Glass Storage Jar", "description": "1L jar with bamboo lid", "price": 7.50,
     "image_url": "https://example.com/jar.jpg"},
]

GROCERY_ITEMS = [
    {"name": "Bananas (1 lb)", "price": 0.69, "inventory": 200},
    {"name": "Whole Milk (1 gal)", "price": 3.49, "inventory": 40},
    {"name": "Sourdough Loaf", "price": 5.25, "inventory": 15},
    {"name": "Free-range Eggs (dozen)", "price": 4.10, "inventory": 60},
]

def _is_empty(db: Session, model) -> bool:
    return db.scalar(select(func.count()).select_from(model)) == 0

def seed(db: Session) -> dict[str, int]:
    """Insert demo rows into each empty table; returns rows inserted per table."""
    inserted = {"users": 0, "products": 0, "grocery_items": 0}

    if _is_empty(db, User):
        for row in USERS:
            db.add(User(password=hash_password(DEFAULT_PASSWORD), **row))
        inserted["users"] = len(USERS)
        db.flush()

    if _is_empty(db, Product):
        admin = db.scalar(select(User).where(User.role == "admin").order_by(User.id))
        if admin is None:
            logger.warning("No admin user found, skipping products")
        else:
            for row in PRODUCTS:
                db.add(Product(created_by=admin.id, **row))
            inserted["products"] = len(PRODUCTS)

    if _is_empty(db, GroceryItem):
        for row in GROCERY_ITEMS:
            db.add(GroceryItem(**row))
        inserted["grocery_items"] = len(GROCERY_ITEMS)

    db.commit()
    for table, count in inserted.items():
        if count:
            logger.info(f"Seeded {count} rows into {table}")
        else:
            logger.info(f"{table} already has data, skipping")
    return inserted

def main():
    from storefront.core import setup_logging
    from storefront.core_settings import get_settings
    from storefront.infrastructure.db import SessionLocal, init_models, wait_for_database

    settings = get_settings()
    setup_logging(service_name=f"{settings.SERVICE_NAME}-seed", level=settings.LOG_LEVEL)
    wait_for_database()
    init_models()
    with SessionLocal() as db:
        seed(db)

if __name__ == "__main__":
    main()
