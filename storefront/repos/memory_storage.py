# storefront/repos/memory_storage.py
import threading
from datetime import datetime, timezone
from typing import Callable, List, Sequence, Tuple, TypeVar

from storefront.domain.entities import (
    Cart,
    CartItem,
    Entity,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    Role,
    User,
)
from storefront.domain.errors import ConflictError
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
from storefront.repos.storage import Storage
from storefront.utils.settings import DEFAULT_PAGE_SIZE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

E = TypeVar("E", bound=Entity)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _page(rows: List[E], limit: int, offset: int) -> List[E]:
    offset = max(offset, 0)
    return rows[offset:offset + max(limit, 0)]


class _Table:
    """Ordered rows of one entity kind plus the counter for the next id."""

    def __init__(self):
        self.rows: list = []
        self._next_id = 1

    def next_id(self) -> int:
        #ids are never reused, even after deletes
        value = self._next_id
        self._next_id += 1
        return value

    def find(self, pred: Callable[[E], bool]) -> E | None:
        return next((row for row in self.rows if pred(row)), None)

    def find_by_id(self, row_id: int):
        return self.find(lambda row: row.id == row_id)

    def replace(self, row_id: int, **changes):
        for index, row in enumerate(self.rows):
            if row.id == row_id:
                #copy-on-write, earlier returned values stay untouched
                updated = row.model_copy(update=changes)
                self.rows[index] = updated
                return updated
        return None

    def delete(self, row_id: int) -> bool:
        before = len(self.rows)
        self.rows = [row for row in self.rows if row.id != row_id]
        return len(self.rows) != before


class MemoryStorage(Storage):
    """
    Process-local storage for tests and local development.

    Linear scans over insertion-ordered lists. Records are frozen models, so
    handing them out never aliases internal state. One re-entrant lock
    serialises every operation; the unique rules of the database schema
    (email, one cart per user, one row per product in a cart) are enforced
    the same way and raise ConflictError.
    """

    name = "memory"

    def __init__(self):
        self._lock = threading.RLock()
        self._users = _Table()
        self._products = _Table()
        self._carts = _Table()
        self._cart_items = _Table()
        self._orders = _Table()
        self._order_items = _Table()

    # =====================================================
    # USERS
    # =====================================================
    def list_users(self, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0) -> List[User]:
        with self._lock:
            return _page(self._users.rows, limit, offset)

    def get_user(self, user_id: int) -> User | None:
        with self._lock:
            return self._users.find_by_id(user_id)

    def get_user_by_email(self, email: str) -> User | None:
        with self._lock:
            return self._users.find(lambda u: u.email == email)

    def create_user(self, payload: UserCreate) -> User:
        with self._lock:
            if self.get_user_by_email(payload.email):
                raise ConflictError(f"Email {payload.email} already in use")
            user = User(
                id=self._users.next_id(),
                email=payload.email,
                password=payload.password,
                first_name=payload.first_name,
                last_name=payload.last_name,
                role=payload.role or Role.CUSTOMER,
                created_at=_now(),
            )
            self._users.rows.append(user)
            return user

    def update_user(self, user_id: int, changes: UserUpdate) -> User | None:
        data = changes.model_dump(exclude_unset=True)
        with self._lock:
            email = data.get("email")
            if email is not None:
                other = self.get_user_by_email(email)
                if other and other.id != user_id:
                    raise ConflictError(f"Email {email} already in use")
            return self._users.replace(user_id, **data)

    def delete_user(self, user_id: int) -> bool:
        with self._lock:
            return self._users.delete(user_id)

    # =====================================================
    # PRODUCTS
    # =====================================================
    def list_products(self, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0) -> List[Product]:
        with self._lock:
            return _page(self._products.rows, limit, offset)

    def get_product(self, product_id: int) -> Product | None:
        with self._lock:
            return self._products.find_by_id(product_id)

    def create_product(self, payload: ProductCreate) -> Product:
        now = _now()
        with self._lock:
            product = Product(
                id=self._products.next_id(),
                **payload.model_dump(),
                created_at=now,
                updated_at=now,
            )
            self._products.rows.append(product)
            return product

    def update_product(self, product_id: int, changes: ProductUpdate) -> Product | None:
        data = changes.model_dump(exclude_unset=True)
        with self._lock:
            return self._products.replace(product_id, **data, updated_at=_now())

    def delete_product(self, product_id: int) -> bool:
        with self._lock:
            return self._products.delete(product_id)

    # =====================================================
    # CARTS
    # =====================================================
    def get_cart(self, user_id: int) -> Cart | None:
        with self._lock:
            return self._carts.find(lambda c: c.user_id == user_id)

    def create_cart(self, payload: CartCreate) -> Cart:
        now = _now()
        with self._lock:
            if self.get_cart(payload.user_id):
                raise ConflictError(f"User {payload.user_id} already has a cart")
            cart = Cart(
                id=self._carts.next_id(),
                user_id=payload.user_id,
                created_at=now,
                updated_at=now,
            )
            self._carts.rows.append(cart)
            return cart

    # =====================================================
    # CART ITEMS
    # =====================================================
    def list_cart_items(self, cart_id: int) -> List[CartItem]:
        with self._lock:
            return [i for i in self._cart_items.rows if i.cart_id == cart_id]

    def get_cart_item(self, item_id: int) -> CartItem | None:
        with self._lock:
            return self._cart_items.find_by_id(item_id)

    def add_cart_item(self, payload: CartItemCreate) -> CartItem:
        now = _now()
        with self._lock:
            existing = self._cart_items.find(
                lambda i: i.cart_id == payload.cart_id and i.product_id == payload.product_id
            )
            if existing:
                raise ConflictError(
                    f"Cart {payload.cart_id} already holds product {payload.product_id}"
                )
            item = CartItem(
                id=self._cart_items.next_id(),
                cart_id=payload.cart_id,
                product_id=payload.product_id,
                quantity=payload.quantity,
                created_at=now,
                updated_at=now,
            )
            self._cart_items.rows.append(item)
            return item

    def update_cart_item(self, item_id: int, quantity: int) -> CartItem | None:
        with self._lock:
            return self._cart_items.replace(item_id, quantity=quantity, updated_at=_now())

    def increment_cart_item(self, item_id: int, delta: int) -> CartItem | None:
        with self._lock:
            item = self._cart_items.find_by_id(item_id)
            if not item:
                return None
            return self._cart_items.replace(
                item_id, quantity=item.quantity + delta, updated_at=_now()
            )

    def remove_cart_item(self, item_id: int) -> bool:
        with self._lock:
            return self._cart_items.delete(item_id)

    # =====================================================
    # ORDERS
    # =====================================================
    def list_orders(
        self,
        user_id: int | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[Order]:
        with self._lock:
            rows = self._orders.rows
            if user_id is not None:
                rows = [o for o in rows if o.user_id == user_id]
            return _page(rows, limit, offset)

    def get_order(self, order_id: int) -> Order | None:
        with self._lock:
            return self._orders.find_by_id(order_id)

    def create_order(self, payload: OrderCreate) -> Order:
        now = _now()
        with self._lock:
            order = Order(
                id=self._orders.next_id(),
                user_id=payload.user_id,
                total=payload.total,
                shipping_address=payload.shipping_address,
                billing_address=payload.billing_address,
                payment_method=payload.payment_method,
                status=payload.status or OrderStatus.PENDING,
                is_paid=bool(payload.is_paid),
                paid_at=now if payload.is_paid else None,
                created_at=now,
                updated_at=now,
            )
            self._orders.rows.append(order)
            return order

    def update_order_status(self, order_id: int, status: OrderStatus) -> Order | None:
        with self._lock:
            return self._orders.replace(order_id, status=OrderStatus(status), updated_at=_now())

    def place_order(
        self,
        payload: OrderCreate,
        lines: Sequence[OrderLineCreate],
    ) -> Tuple[Order, List[OrderItem]]:
        #nothing in between can fail, so holding the lock is enough for all-or-nothing
        with self._lock:
            order = self.create_order(payload)
            items = [
                self.create_order_item(
                    OrderItemCreate(order_id=order.id, **line.model_dump())
                )
                for line in lines
            ]
            logger.info(f"Order {order.id} stored with {len(items)} items")
            return order, items

    # =====================================================
    # ORDER ITEMS
    # =====================================================
    def list_order_items(self, order_id: int) -> List[OrderItem]:
        with self._lock:
            return [i for i in self._order_items.rows if i.order_id == order_id]

    def create_order_item(self, payload: OrderItemCreate) -> OrderItem:
        with self._lock:
            item = OrderItem(
                id=self._order_items.next_id(),
                **payload.model_dump(),
                created_at=_now(),
            )
            self._order_items.rows.append(item)
            return item
