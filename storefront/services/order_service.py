# storefront/services/order_service.py
from decimal import Decimal
from typing import Any, Dict, List

from storefront.domain.entities import OrderStatus, Role, User
from storefront.domain.schemas import CheckoutIn, OrderCreate, OrderLineCreate
from storefront.repos.storage import Storage
from storefront.utils.settings import DEFAULT_PAGE_SIZE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Orders domain, kept apart from CartService.
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    def place_order(self, user_id: int, checkout: CheckoutIn) -> Dict[str, Any]:
        """
        Place an order for the user.

        1. Takes the explicit item list, or the cart contents when none is given
        2. Freezes each product's current name and price into an order line
        3. Computes the total from the frozen lines
        4. Stores the order with its items as one unit

        The cart is left as it is.
        """
        if checkout.items is not None:
            requested = [(line.product_id, line.quantity) for line in checkout.items]
        else:
            cart = self.storage.get_cart(user_id)
            items = self.storage.list_cart_items(cart.id) if cart else []
            requested = [(item.product_id, item.quantity) for item in items]

        if not requested:
            raise ValueError("Cannot place an order without items")

        lines: List[OrderLineCreate] = []
        for product_id, quantity in requested:
            product = self.storage.get_product(product_id)
            if not product:
                raise LookupError(f"Product {product_id} not found")

            lines.append(
                OrderLineCreate(
                    product_id=product.id,
                    name=product.name,
                    price=product.price,
                    quantity=quantity,
                )
            )

        total = sum((line.price * line.quantity for line in lines), Decimal("0.00"))

        order, order_items = self.storage.place_order(
            OrderCreate(
                user_id=user_id,
                total=total,
                shipping_address=checkout.shipping_address,
                billing_address=checkout.billing_address,
                payment_method=checkout.payment_method,
                is_paid=checkout.is_paid,
            ),
            lines,
        )

        logger.info(f"Order {order.id} placed by user {user_id}, total {total}")

        return {**order.model_dump(), "items": order_items}

    def get_order(self, order_id: int, user: User) -> Dict[str, Any]:
        order = self.storage.get_order(order_id)

        if not order:
            raise LookupError("Order not found")

        if order.user_id != user.id and user.role != Role.ADMIN:
            raise PermissionError("No access to this order")

        return {**order.model_dump(), "items": self.storage.list_order_items(order.id)}

    def list_orders(
        self,
        user: User,
        user_id: int | None = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        #customers only ever see their own orders
        if user.role != Role.ADMIN:
            user_id = user.id

        orders = self.storage.list_orders(user_id=user_id, limit=limit, offset=offset)
        return [
            {**order.model_dump(), "items": self.storage.list_order_items(order.id)}
            for order in orders
        ]

    def update_status(self, order_id: int, status: OrderStatus) -> Dict[str, Any]:
        order = self.storage.update_order_status(order_id, status)

        if not order:
            raise LookupError("Order not found")

        logger.info(f"Order {order_id} status -> {order.status.value}")

        return {**order.model_dump(), "items": self.storage.list_order_items(order.id)}
