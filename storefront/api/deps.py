from typing import Annotated
from fastapi import Depends, HTTPException, Path, Request
from sqlalchemy.orm import Session
from storefront.core.logging_config import set_request_context
from storefront.application.schemas import DB_INT_MAX
from storefront.domain.models import User
from storefront.infrastructure.db import get_db
from storefront.infrastructure.security import decode_access_token

BEARER_PREFIX = "Bearer "

# Path ids outside the INTEGER column range are rejected with 400
RowId = Annotated[int, Path(gt=0, le=DB_INT_MAX)]

def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolve the bearer token to a persisted user."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        raise HTTPException(status_code=401, detail="No token, authorization denied")
    token_data = decode_access_token(auth_header[len(BEARER_PREFIX):].strip())
    subject = str(token_data.get("sub", "")) if token_data else ""
    if not (subject.isascii() and subject.isdigit()) or int(subject) > DB_INT_MAX:
        raise HTTPException(status_code=401, detail="Token is not valid")
    user = db.get(User, int(subject))
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    set_request_context(user_id=str(user.id))
    return user

def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied. Admin role required.")
    return user
