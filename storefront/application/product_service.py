from typing import Optional
from sqlalchemy.orm import Session
from storefront.domain.models import Product, User
from .schemas import ProductCreate, ProductUpdate

class ProductService:
    def __init__(self, db: Session):
        self.db = db

    def list(self, created_by: Optional[int] = None):
        query = self.db.query(Product)
        if created_by is not None:
            query = query.filter(Product.created_by == created_by)
        return query.order_by(Product.id).all()

    def get(self, product_id: int) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def create(self, data: ProductCreate, creator: User) -> Product:
        obj = Product(**data.model_dump(), creator=creator)
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def update(self, product: Product, data: ProductUpdate) -> Product:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(product, field, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: Product) -> None:
        self.db.delete(product)
        self.db.commit()
