# storefront/domain/entities.py
"""
Stored records as seen by the rest of the app.

Every record is frozen, so a value handed out by a storage adapter can never
be changed behind the caller's back and never changes the adapter's state.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Entity(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int


class User(Entity):
    email: str
    password: str
    first_name: str
    last_name: str
    role: Role = Role.CUSTOMER
    created_at: datetime


class Product(Entity):
    name: str
    description: str
    price: Decimal
    image_url: str | None = None
    stock: int = 0
    created_at: datetime
    updated_at: datetime


class Cart(Entity):
    user_id: int
    created_at: datetime
    updated_at: datetime


class CartItem(Entity):
    cart_id: int
    product_id: int
    quantity: int
    created_at: datetime
    updated_at: datetime


class Order(Entity):
    user_id: int
    total: Decimal
    shipping_address: str
    billing_address: str
    payment_method: str
    status: OrderStatus = OrderStatus.PENDING
    is_paid: bool = False
    paid_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class OrderItem(Entity):
    order_id: int
    product_id: int
    name: str
    price: Decimal
    quantity: int
    created_at: datetime
