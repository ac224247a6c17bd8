# storefront/repos/storage.py
"""
Storage port: every persistence operation the rest of the app may call.

Both adapters (MemoryStorage, DatabaseStorage) implement exactly this
contract, so either one can be handed to the app factory or to a service:

- get-style calls return the record or None, never raise for not-found
- delete/remove calls return True only if a row existed and was removed
- update-style calls on a missing id return None
- list calls skip `offset` rows, then return at most `limit`, in insertion order
- backend faults raise StorageError (ConflictError for unique-key violations)

Insert shapes are validated by their pydantic models before they get here;
adapters do not validate again.
"""
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from storefront.domain.entities import (
    Cart,
    CartItem,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    User,
)
from storefront.domain.schemas import (
    CartCreate,
    CartItemCreate,
    OrderCreate,
    OrderItemCreate,
    OrderLineCreate,
    ProductCreate,
    ProductUpdate,
    UserCreate,
    UserUpdate,
)
from storefront.utils.settings import DEFAULT_PAGE_SIZE


class Storage(ABC):
    name = "abstract"

    # =====================================================
    # USERS
    # =====================================================
    @abstractmethod
    def list_users(self, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0) -> List[User]: ...

    @abstractmethod
    def get_user(self, user_id: int) -> User | None: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def create_user(self, payload: UserCreate) -> User: ...

    @abstractmethod
    def update_user(self, user_id: int, changes: UserUpdate) -> User | None: ...

    @abstractmethod
    def delete_user(self, user_id: int) -> bool: ...

    # =====================================================
    # PRODUCTS
    # =====================================================
    @abstractmethod
    def list_products(self, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0) -> List[Product]: ...

    @abstractmethod
    def get_product(self, product_id: int) -> Product | None: ...

    @abstractmethod
    def create_product(self, payload: ProductCreate) -> Product: ...

    @abstractmethod
    def update_product(self, product_id: int, changes: ProductUpdate) -> Product | None:
        """Apply the fields set on `changes` and bump updated_at."""

    @abstractmethod
    def delete_product(self, product_id: int) -> bool: ...

    # =====================================================
    # CARTS
    # =====================================================
    @abstractmethod
    def get_cart(self, user_id: int) -> Cart | None:
        """The user's cart, looked up by user id (not cart id)."""

    @abstractmethod
    def create_cart(self, payload: CartCreate) -> Cart:
        """Raises ConflictError if the user already has a cart."""

    # =====================================================
    # CART ITEMS
    # =====================================================
    @abstractmethod
    def list_cart_items(self, cart_id: int) -> List[CartItem]: ...

    @abstractmethod
    def get_cart_item(self, item_id: int) -> CartItem | None: ...

    @abstractmethod
    def add_cart_item(self, payload: CartItemCreate) -> CartItem:
        """Raises ConflictError if the cart already holds the product."""

    @abstractmethod
    def update_cart_item(self, item_id: int, quantity: int) -> CartItem | None: ...

    @abstractmethod
    def increment_cart_item(self, item_id: int, delta: int) -> CartItem | None:
        """Atomically add `delta` to the stored quantity."""

    @abstractmethod
    def remove_cart_item(self, item_id: int) -> bool: ...

    # =====================================================
    # ORDERS
    # =====================================================
    @abstractmethod
    def list_orders(
        self,
        user_id: int | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[Order]: ...

    @abstractmethod
    def get_order(self, order_id: int) -> Order | None: ...

    @abstractmethod
    def create_order(self, payload: OrderCreate) -> Order:
        """paid_at is set to the creation time only when payload.is_paid is true."""

    @abstractmethod
    def update_order_status(self, order_id: int, status: OrderStatus) -> Order | None: ...

    @abstractmethod
    def place_order(
        self,
        payload: OrderCreate,
        lines: Sequence[OrderLineCreate],
    ) -> Tuple[Order, List[OrderItem]]:
        """Create the order and all of its items as one unit."""

    # =====================================================
    # ORDER ITEMS
    # =====================================================
    @abstractmethod
    def list_order_items(self, order_id: int) -> List[OrderItem]: ...

    @abstractmethod
    def create_order_item(self, payload: OrderItemCreate) -> OrderItem: ...

    def close(self):
        """Release backend resources. Nothing to do by default."""
