from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from storefront.infrastructure.db import get_db
from storefront.application.user_service import UserService
from storefront.application.schemas import UserRead
from storefront.domain.models import User
from .deps import RowId, get_current_user, require_admin

router = APIRouter(prefix="/api/users", tags=["users"])

@router.get("/", response_model=list[UserRead])
def list_users(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return UserService(db).list()

@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: RowId, db: Session = Depends(get_db), current: User = Depends(get_current_user)):
    if not current.is_admin and current.id != user_id:
        raise HTTPException(status_code=403, detail="Not authorized")
    user = UserService(db).get(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
