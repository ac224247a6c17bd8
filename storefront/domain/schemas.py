# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator
from typing import List
from decimal import Decimal
from datetime import datetime

from storefront.domain.entities import (
    Cart,
    CartItem,
    Order,
    OrderItem,
    OrderStatus,
    Role,
)


def _reject_null(value):
    # partial updates may omit a field, but an explicit null would blank a NOT NULL column
    if value is None:
        raise ValueError("Field may be omitted but not set to null")
    return value


# =====================================================
# INSERT SHAPES (validated before any storage call)
# =====================================================
class UserCreate(BaseModel):
    """Insert shape for a user. The password arrives already hashed."""

    email: EmailStr
    password: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)
    role: Role | None = None


class UserUpdate(BaseModel):
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=1)
    first_name: str | None = Field(None, min_length=2, max_length=50)
    last_name: str | None = Field(None, min_length=2, max_length=50)
    role: Role | None = None

    @field_validator("email", "password", "first_name", "last_name", "role", mode="before")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


class ProductCreate(BaseModel):
    """Insert shape for a catalog product."""

    name: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10)
    price: Decimal = Field(
        ..., gt=0, max_digits=10, decimal_places=2, description="Price must be greater than 0"
    )
    image_url: str | None = None
    stock: int = Field(0, ge=0)


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=3, max_length=100)
    description: str | None = Field(None, min_length=10)
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    image_url: str | None = None
    stock: int | None = Field(None, ge=0)

    #image_url is the only column that may be cleared
    @field_validator("name", "description", "price", "stock", mode="before")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


class CartCreate(BaseModel):
    user_id: int


class CartItemCreate(BaseModel):
    cart_id: int
    product_id: int
    quantity: int = Field(1, ge=1)


class OrderCreate(BaseModel):
    """Insert shape for an order header."""

    user_id: int
    total: Decimal = Field(
        ..., ge=0, max_digits=10, decimal_places=2, description="Total must be non-negative"
    )
    shipping_address: str = Field(..., min_length=5)
    billing_address: str = Field(..., min_length=5)
    payment_method: str = Field(..., min_length=3)
    status: OrderStatus | None = None
    is_paid: bool | None = None


class OrderLineCreate(BaseModel):
    """One order line before its order exists: product snapshot plus quantity."""

    product_id: int
    name: str = Field(..., min_length=3, max_length=100)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    quantity: int = Field(..., ge=1)


class OrderItemCreate(OrderLineCreate):
    order_id: int


# =====================================================
# HTTP REQUEST BODIES
# =====================================================
class RegisterIn(BaseModel):
    """
    Registration body. The plaintext password is hashed before storage and
    self-registered accounts are always customers.
    """

    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    first_name: str = Field(..., min_length=2, max_length=50)
    last_name: str = Field(..., min_length=2, max_length=50)


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ItemIn(BaseModel):
    """Body for adding a product to the cart."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1)


class QuantityIn(BaseModel):
    """New quantity for a cart item; 0 removes the item."""

    quantity: int = Field(..., ge=0)


class OrderLineIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)


class CheckoutIn(BaseModel):
    """Body for placing an order. Without items the cart contents are used."""

    shipping_address: str = Field(..., min_length=5)
    billing_address: str = Field(..., min_length=5)
    payment_method: str = Field(..., min_length=3)
    is_paid: bool = False
    items: List[OrderLineIn] | None = None


class OrderStatusIn(BaseModel):
    status: OrderStatus


# =====================================================
# HTTP RESPONSES
# =====================================================
class UserOut(BaseModel):
    """User without the password hash."""

    id: int
    email: str
    first_name: str
    last_name: str
    role: Role
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    cart: Cart
    items: List[CartItem]
    total: Decimal


class OrderOut(Order):
    items: List[OrderItem] = []


class MessageOut(BaseModel):
    message: str
