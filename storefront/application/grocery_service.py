from typing import Optional
from sqlalchemy.orm import Session
from storefront.domain.models import GroceryItem
from .schemas import GroceryItemCreate, GroceryItemUpdate

class GroceryService:
    """Catalogue maintenance for grocery items. Stock is decremented only by order placement."""

    def __init__(self, db: Session):
        self.db = db

    def list(self):
        return self.db.query(GroceryItem).order_by(GroceryItem.id).all()

    def get(self, item_id: int) -> Optional[GroceryItem]:
        return self.db.get(GroceryItem, item_id)

    def create(self, data: GroceryItemCreate) -> GroceryItem:
        obj = GroceryItem(**data.model_dump())
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def update(self, item: GroceryItem, data: GroceryItemUpdate) -> GroceryItem:
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(item, field, value)
        self.db.commit()
        self.db.refresh(item)
        return item

    def set_inventory(self, item: GroceryItem, inventory: int) -> GroceryItem:
        item.inventory = inventory
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete(self, item: GroceryItem) -> None:
        self.db.delete(item)
        self.db.commit()
