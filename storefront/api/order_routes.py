from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from storefront.infrastructure.db import get_db
from storefront.application.order_service import OrderService
from storefront.application.schemas import OrderCreate, OrderRead
from storefront.domain.models import User
from .deps import RowId, get_current_user

router = APIRouter(prefix="/api/orders", tags=["orders"])

@router.post("/", response_model=OrderRead, status_code=201)
def place_order(payload: OrderCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """Place an order; stock is checked and decremented atomically."""
    return OrderService(db).place_order(user.id, payload.items)

@router.get("/", response_model=list[OrderRead])
def list_orders(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return OrderService(db).list_for_user(user.id)

@router.get("/{order_id}", response_model=OrderRead)
def get_order(order_id: RowId, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    order = OrderService(db).get(order_id)
    if not order or (order.user_id != user.id and not user.is_admin):
        raise HTTPException(status_code=404, detail="Order not found")
    return order
