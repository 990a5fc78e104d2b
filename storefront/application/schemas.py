from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional

# Ids and quantities are stored in 32-bit INTEGER columns
DB_INT_MAX = 2**31 - 1

# Users / auth

class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=6, max_length=128)
    # Open to anyone, including "admin"; see README before exposing registration
    role: Literal["admin", "customer"] = "customer"

class LoginRequest(BaseModel):
    email: str
    password: str

class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None
    class Config:
        from_attributes = True

class TokenResponse(BaseModel):
    token: str
    user: UserRead

# Products

class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(gt=0)
    image_url: Optional[str] = Field(default=None, max_length=500)

class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, gt=0)
    image_url: Optional[str] = Field(default=None, max_length=500)

class ProductRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    image_url: Optional[str] = None
    created_by: int
    creator_name: Optional[str] = None
    created_at: Optional[datetime] = None
    class Config:
        from_attributes = True

# Grocery inventory

class GroceryItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    price: float = Field(ge=0)
    inventory: int = Field(default=0, ge=0, le=DB_INT_MAX)

class GroceryItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    price: Optional[float] = Field(default=None, ge=0)

class InventoryUpdate(BaseModel):
    inventory: int = Field(ge=0, le=DB_INT_MAX)

class GroceryItemRead(BaseModel):
    id: int
    name: str
    price: float
    inventory: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True

# Orders. The wire format is camelCase.

class CartLine(BaseModel):
    item_id: int = Field(alias="itemId", gt=0, le=DB_INT_MAX)
    quantity: int = Field(gt=0, le=DB_INT_MAX)
    class Config:
        populate_by_name = True

class OrderCreate(BaseModel):
    items: list[CartLine] = Field(min_length=1)

class OrderLineRead(BaseModel):
    id: int
    item_id: int = Field(serialization_alias="itemId")
    quantity: int
    unit_price: float = Field(serialization_alias="unitPrice")
    class Config:
        from_attributes = True

class OrderRead(BaseModel):
    id: int = Field(serialization_alias="orderId")
    user_id: int = Field(serialization_alias="userId")
    created_at: datetime = Field(serialization_alias="createdAt")
    items: list[OrderLineRead]
    class Config:
        from_attributes = True
