from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from storefront.infrastructure.db import get_db
from storefront.application.product_service import ProductService
from storefront.application.schemas import ProductCreate, ProductRead, ProductUpdate
from storefront.domain.models import Product, User
from .deps import RowId, require_admin

router = APIRouter(prefix="/api/products", tags=["products"])

def _owned_product(product_id: int, db: Session, admin: User) -> Product:
    product = ProductService(db).get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    if product.created_by != admin.id:
        raise HTTPException(status_code=403, detail="Not authorized to modify this product")
    return product

@router.get("/", response_model=list[ProductRead])
def list_products(db: Session = Depends(get_db)):
    return ProductService(db).list()

@router.get("/admin/{admin_id}", response_model=list[ProductRead])
def list_products_by_admin(admin_id: RowId, db: Session = Depends(get_db)):
    return ProductService(db).list(created_by=admin_id)

@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: RowId, db: Session = Depends(get_db)):
    product = ProductService(db).get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product

@router.post("/", response_model=ProductRead, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return ProductService(db).create(payload, creator=admin)

@router.put("/{product_id}", response_model=ProductRead)
def update_product(product_id: RowId, payload: ProductUpdate, db: Session = Depends(get_db),
                   admin: User = Depends(require_admin)):
    product = _owned_product(product_id, db, admin)
    if not payload.model_dump(exclude_unset=True):
        raise HTTPException(status_code=400, detail="Please provide at least one field to update")
    return ProductService(db).update(product, payload)

@router.delete("/{product_id}")
def delete_product(product_id: RowId, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    product = _owned_product(product_id, db, admin)
    ProductService(db).delete(product)
    return {"message": "Product deleted successfully"}
