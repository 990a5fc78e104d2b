from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from storefront.infrastructure.db import get_db
from storefront.infrastructure.security import create_access_token
from storefront.application.user_service import UserService
from storefront.application.schemas import LoginRequest, TokenResponse, UserCreate, UserRead
from storefront.domain.models import User
from .deps import get_current_user

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", response_model=TokenResponse, status_code=201)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    service = UserService(db)
    if service.get_by_email(payload.email):
        raise HTTPException(status_code=400, detail="User already exists with this email")
    user = service.create(payload)
    return {"token": create_access_token(user.id, user.role), "user": user}

@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = UserService(db).authenticate(payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"token": create_access_token(user.id, user.role), "user": user}

@router.get("/me", response_model=UserRead)
def me(user: User = Depends(get_current_user)):
    return user
