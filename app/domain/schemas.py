# app/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase on input, emits camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------- auth

class SignupIn(BaseModel):
    """Schema for registering a user."""

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginIn(BaseModel):
    """Schema for logging in."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenOut(BaseModel):
    token: str
    message: str


class TokenData(BaseModel):
    """Identity claim carried by a verified bearer token."""

    user_id: int


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    created_at: datetime


class UserResponse(CamelModel):
    success: bool = True
    data: UserOut


# ---------------------------------------------------------------- catalog

class ProductOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None
    stock: int = 0
    images: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductListOut(BaseModel):
    products: List[ProductOut]


class ProductDetailOut(BaseModel):
    product: ProductOut


# ---------------------------------------------------------------- cart

class CartKeyIn(CamelModel):
    """Identifies a cart either by user id or by guest session id."""

    user: Optional[int] = None
    session_id: Optional[str] = None


class AddItemIn(CartKeyIn):
    """Schema for adding a line to a cart. Required fields are checked by the service."""

    name: Optional[str] = None
    price: Optional[Decimal] = None
    image: Optional[str] = None
    quantity: int = 1


class UpdateItemIn(CartKeyIn):
    name: Optional[str] = None
    quantity: Optional[int] = None


class RemoveItemIn(CartKeyIn):
    name: Optional[str] = None


class MergeIn(CartKeyIn):
    pass


class CartItemOut(CamelModel):
    name: str
    price: float
    image: Optional[str] = None
    quantity: int


class CartOut(CamelModel):
    """Cart view. Only items and totalPrice are set for the empty view."""

    id: Optional[int] = None
    user: Optional[int] = None
    session_id: Optional[str] = None
    items: List[CartItemOut] = []
    total_price: float = 0
    status: Optional[str] = None
    version: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CartResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    data: Optional[CartOut] = None


# ---------------------------------------------------------------- orders

class OrderCreateIn(CamelModel):
    """Schema for creating an order from a checked-out cart."""

    cart_id: int = Field(..., gt=0)


class OrderItemOut(CamelModel):
    product: int
    quantity: int
    price: float


class OrderOut(CamelModel):
    id: int
    user: Optional[int] = None
    cart_id: int
    products: List[OrderItemOut]
    total_price: float
    status: str
    created_at: datetime
    updated_at: datetime


class OrderResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    data: OrderOut


class OrderListResponse(CamelModel):
    success: bool = True
    data: List[OrderOut]
