# storefront/repos/database_storage.py
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from typing import List, Sequence, Tuple

from sqlalchemy import select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.orm import Session, sessionmaker

from storefront.data.database import build_engine, build_session_factory, create_schema
from storefront.data.models import (
    CartItemModel,
    CartModel,
    OrderItemModel,
    OrderModel,
    ProductModel,
    UserModel,
)
from storefront.domain.entities import (
    Cart,
    CartItem,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    Role,
    User,
)
from storefront.domain.errors import ConflictError, StorageError, TransientStorageError
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
from storefront.utils.retry import db_retry
from storefront.utils.settings import DEFAULT_PAGE_SIZE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _column_value(value):
    return value.value if isinstance(value, Enum) else value


class DatabaseStorage(Storage):
    """
    Storage backed by a relational database through the SQLAlchemy ORM.

    Every operation runs in its own short-lived session: commit on success,
    rollback on failure. Driver errors are translated into the StorageError
    family; a missing row is never an error (None / False instead).
    """

    name = "database"

    def __init__(self, session_factory: sessionmaker, engine: Engine | None = None):
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, url: str, echo: bool = False, create_tables: bool = True) -> "DatabaseStorage":
        engine = build_engine(url, echo=echo)
        if create_tables:
            create_schema(engine)
            logger.info(f"Database tables ready on {engine.url.render_as_string(hide_password=True)}")
        return cls(build_session_factory(engine), engine=engine)

    def close(self):
        if self._engine is not None:
            self._engine.dispose()

    @contextmanager
    def _session(self):
        db: Session = self._session_factory()
        try:
            yield db
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError(str(e.orig)) from e
        except (OperationalError, InterfaceError, DisconnectionError) as e:
            db.rollback()
            logger.warning(f"Transient database fault: {e}")
            raise TransientStorageError(str(e)) from e
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(str(e)) from e
        finally:
            db.close()

    def _list(self, model, entity, limit: int, offset: int, *criteria):
        with self._session() as db:
            stmt = (
                select(model)
                .where(*criteria)
                .order_by(model.id)
                .offset(max(offset, 0))
                .limit(max(limit, 0))
            )
            return [entity.model_validate(row) for row in db.execute(stmt).scalars().all()]

    def _get(self, model, entity, row_id: int):
        with self._session() as db:
            row = db.get(model, row_id)
            return entity.model_validate(row) if row else None

    def _insert(self, entity, row):
        with self._session() as db:
            db.add(row)
            db.flush()
            db.refresh(row)
            return entity.model_validate(row)

    def _update(self, model, entity, row_id: int, values: dict):
        with self._session() as db:
            row = db.get(model, row_id)
            if not row:
                return None
            for key, value in values.items():
                setattr(row, key, _column_value(value))
            db.flush()
            db.refresh(row)
            return entity.model_validate(row)

    def _delete(self, model, row_id: int) -> bool:
        with self._session() as db:
            row = db.get(model, row_id)
            if not row:
                return False
            db.delete(row)
            return True

    # =====================================================
    # USERS
    # =====================================================
    @db_retry()
    def list_users(self, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0) -> List[User]:
        return self._list(UserModel, User, limit, offset)

    @db_retry()
    def get_user(self, user_id: int) -> User | None:
        return self._get(UserModel, User, user_id)

    @db_retry()
    def get_user_by_email(self, email: str) -> User | None:
        with self._session() as db:
            row = db.execute(
                select(UserModel).where(UserModel.email == email)
            ).scalar_one_or_none()
            return User.model_validate(row) if row else None

    def create_user(self, payload: UserCreate) -> User:
        logger.info(f"Creating user {payload.email}")
        return self._insert(
            User,
            UserModel(
                email=payload.email,
                password=payload.password,
                first_name=payload.first_name,
                last_name=payload.last_name,
                role=(payload.role or Role.CUSTOMER).value,
                created_at=_now(),
            ),
        )

    def update_user(self, user_id: int, changes: UserUpdate) -> User | None:
        return self._update(UserModel, User, user_id, changes.model_dump(exclude_unset=True))

    def delete_user(self, user_id: int) -> bool:
        return self._delete(UserModel, user_id)

    # =====================================================
    # PRODUCTS
    # =====================================================
    @db_retry()
    def list_products(self, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0) -> List[Product]:
        return self._list(ProductModel, Product, limit, offset)

    @db_retry()
    def get_product(self, product_id: int) -> Product | None:
        return self._get(ProductModel, Product, product_id)

    def create_product(self, payload: ProductCreate) -> Product:
        now = _now()
        return self._insert(
            Product,
            ProductModel(**payload.model_dump(), created_at=now, updated_at=now),
        )

    def update_product(self, product_id: int, changes: ProductUpdate) -> Product | None:
        values = changes.model_dump(exclude_unset=True)
        values["updated_at"] = _now()
        return self._update(ProductModel, Product, product_id, values)

    def delete_product(self, product_id: int) -> bool:
        return self._delete(ProductModel, product_id)

    # =====================================================
    # CARTS
    # =====================================================
    @db_retry()
    def get_cart(self, user_id: int) -> Cart | None:
        with self._session() as db:
            row = db.execute(
                select(CartModel).where(CartModel.user_id == user_id).order_by(CartModel.id)
            ).scalars().first()
            return Cart.model_validate(row) if row else None

    def create_cart(self, payload: CartCreate) -> Cart:
        now = _now()
        return self._insert(
            Cart,
            CartModel(user_id=payload.user_id, created_at=now, updated_at=now),
        )

    # =====================================================
    # CART ITEMS
    # =====================================================
    @db_retry()
    def list_cart_items(self, cart_id: int) -> List[CartItem]:
        with self._session() as db:
            rows = db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars().all()
            return [CartItem.model_validate(row) for row in rows]

    @db_retry()
    def get_cart_item(self, item_id: int) -> CartItem | None:
        return self._get(CartItemModel, CartItem, item_id)

    def add_cart_item(self, payload: CartItemCreate) -> CartItem:
        now = _now()
        return self._insert(
            CartItem,
            CartItemModel(**payload.model_dump(), created_at=now, updated_at=now),
        )

    def update_cart_item(self, item_id: int, quantity: int) -> CartItem | None:
        return self._update(
            CartItemModel,
            CartItem,
            item_id,
            {"quantity": quantity, "updated_at": _now()},
        )

    def increment_cart_item(self, item_id: int, delta: int) -> CartItem | None:
        with self._session() as db:
            #single UPDATE ... SET quantity = quantity + delta, no read-modify-write window
            result = db.execute(
                update(CartItemModel)
                .where(CartItemModel.id == item_id)
                .values(quantity=CartItemModel.quantity + delta, updated_at=_now())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None
            row = db.get(CartItemModel, item_id)
            db.refresh(row)
            return CartItem.model_validate(row)

    def remove_cart_item(self, item_id: int) -> bool:
        return self._delete(CartItemModel, item_id)

    # =====================================================
    # ORDERS
    # =====================================================
    @db_retry()
    def list_orders(
        self,
        user_id: int | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[Order]:
        criteria = [] if user_id is None else [OrderModel.user_id == user_id]
        return self._list(OrderModel, Order, limit, offset, *criteria)

    @db_retry()
    def get_order(self, order_id: int) -> Order | None:
        return self._get(OrderModel, Order, order_id)

    def _order_row(self, payload: OrderCreate) -> OrderModel:
        now = _now()
        return OrderModel(
            user_id=payload.user_id,
            total=payload.total,
            shipping_address=payload.shipping_address,
            billing_address=payload.billing_address,
            payment_method=payload.payment_method,
            status=(payload.status or OrderStatus.PENDING).value,
            is_paid=bool(payload.is_paid),
            paid_at=now if payload.is_paid else None,
            created_at=now,
            updated_at=now,
        )

    def create_order(self, payload: OrderCreate) -> Order:
        return self._insert(Order, self._order_row(payload))

    def update_order_status(self, order_id: int, status: OrderStatus) -> Order | None:
        return self._update(
            OrderModel,
            Order,
            order_id,
            {"status": OrderStatus(status), "updated_at": _now()},
        )

    def place_order(
        self,
        payload: OrderCreate,
        lines: Sequence[OrderLineCreate],
    ) -> Tuple[Order, List[OrderItem]]:
        with self._session() as db:
            order_row = self._order_row(payload)
            db.add(order_row)
            db.flush()

            item_rows = [
                OrderItemModel(order_id=order_row.id, **line.model_dump(), created_at=order_row.created_at)
                for line in lines
            ]
            db.add_all(item_rows)
            db.flush()

            db.refresh(order_row)
            for row in item_rows:
                db.refresh(row)

            logger.info(f"Order {order_row.id} stored with {len(item_rows)} items")
            return (
                Order.model_validate(order_row),
                [OrderItem.model_validate(row) for row in item_rows],
            )

    # =====================================================
    # ORDER ITEMS
    # =====================================================
    @db_retry()
    def list_order_items(self, order_id: int) -> List[OrderItem]:
        with self._session() as db:
            rows = db.execute(
                select(OrderItemModel)
                .where(OrderItemModel.order_id == order_id)
                .order_by(OrderItemModel.id)
            ).scalars().all()
            return [OrderItem.model_validate(row) for row in rows]

    def create_order_item(self, payload: OrderItemCreate) -> OrderItem:
        return self._insert(
            OrderItem,
            OrderItemModel(**payload.model_dump(), created_at=_now()),
        )
