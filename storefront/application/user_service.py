from typing import Optional
from sqlalchemy.orm import Session
from storefront.domain.models import User
from storefront.infrastructure.security import hash_password, verify_password
from .schemas import UserCreate

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def list(self):
        return self.db.query(User).order_by(User.id).all()

    def get(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def create(self, data: UserCreate) -> User:
        obj = User(
            name=data.name,
            email=data.email.lower(),
            password=hash_password(data.password),
            role=data.role,
        )
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self.get_by_email(email)
        if not user or not verify_password(password, user.password):
            return None
        return user
