from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from storefront.infrastructure.db import get_db
from storefront.application.grocery_service import GroceryService
from storefront.application.schemas import GroceryItemCreate, GroceryItemRead, GroceryItemUpdate, InventoryUpdate
from storefront.domain.models import GroceryItem, User
from .deps import RowId, require_admin

router = APIRouter(prefix="/api/grocery", tags=["grocery"])

def _get_item(item_id: int, db: Session) -> GroceryItem:
    item = GroceryService(db).get(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return item

@router.get("/", response_model=list[GroceryItemRead])
def list_items(db: Session = Depends(get_db)):
    return GroceryService(db).list()

@router.get("/{item_id}", response_model=GroceryItemRead)
def get_item(item_id: RowId, db: Session = Depends(get_db)):
    return _get_item(item_id, db)

@router.post("/", response_model=GroceryItemRead, status_code=201)
def add_item(payload: GroceryItemCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return GroceryService(db).create(payload)

@router.patch("/{item_id}", response_model=GroceryItemRead)
def update_item(item_id: RowId, payload: GroceryItemUpdate, db: Session = Depends(get_db),
                admin: User = Depends(require_admin)):
    return GroceryService(db).update(_get_item(item_id, db), payload)

@router.patch("/{item_id}/inventory", response_model=GroceryItemRead)
def set_inventory(item_id: RowId, payload: InventoryUpdate, db: Session = Depends(get_db),
                  admin: User = Depends(require_admin)):
    return GroceryService(db).set_inventory(_get_item(item_id, db), payload.inventory)

@router.delete("/{item_id}")
def delete_item(item_id: RowId, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    item = _get_item(item_id, db)
    try:
        GroceryService(db).delete(item)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Item is referenced by existing orders")
    return {"message": "Item deleted"}
