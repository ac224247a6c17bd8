# storefront/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from storefront.domain.entities import Cart, CartItem
from storefront.domain.schemas import CartCreate, CartItemCreate
from storefront.repos.storage import Storage
from storefront.utils.retry import conflict_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart rules layered over the storage port.
    query (get) only reads, commands (add, set quantity, remove) modify state.

    One cart per user and one row per product in a cart are unique in both
    backends; when two requests race, the loser gets a ConflictError and
    conflict_retry() runs the step again, which then finds the winner's row.
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    #query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.get_or_create_cart(user_id)
        items = self.storage.list_cart_items(cart.id)

        return {
            "cart": cart,
            "items": items,
            "total": self.cart_total(items),
        }

    def cart_total(self, items: List[CartItem]) -> Decimal:
        total = Decimal("0.00")
        for item in items:
            product = self.storage.get_product(item.product_id)
            #products deleted from the catalog no longer count
            if product:
                total += product.price * item.quantity
        return total

    @conflict_retry()
    def get_or_create_cart(self, user_id: int) -> Cart:
        existing = self.storage.get_cart(user_id)
        if existing:
            return existing

        created = self.storage.create_cart(CartCreate(user_id=user_id))
        logger.info(f"Created cart {created.id} for user {user_id}")
        return created

    #commands
    def add_product(self, user_id: int, product_id: int, quantity: int) -> Tuple[CartItem, bool]:
        """
        Add a product to the user's cart. Returns (item, created); when the
        product is already in the cart the quantities are summed instead of
        inserting a second row.
        """
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        product = self.storage.get_product(product_id)
        if not product:
            raise LookupError("Product not found")

        cart = self.get_or_create_cart(user_id)
        return self._merge_item(cart.id, product_id, quantity)

    @conflict_retry()
    def _merge_item(self, cart_id: int, product_id: int, quantity: int) -> Tuple[CartItem, bool]:
        existing = self._find_item(cart_id, product_id)

        if existing:
            updated = self.storage.increment_cart_item(existing.id, quantity)
            #None: removed by a concurrent request, insert a fresh row below
            if updated:
                logger.info(
                    f"Product {product_id} already in cart {cart_id}, quantity "
                    f"{existing.quantity} -> {updated.quantity}"
                )
                return updated, False

        item = self.storage.add_cart_item(
            CartItemCreate(cart_id=cart_id, product_id=product_id, quantity=quantity)
        )
        logger.info(f"Added product {product_id} to cart {cart_id}")
        return item, True

    def set_quantity(self, user_id: int, item_id: int, quantity: int) -> CartItem | None:
        """Set an item's quantity; 0 removes it and returns None."""
        if quantity < 0:
            raise ValueError("Invalid quantity")

        item = self._owned_item(user_id, item_id)

        if quantity == 0:
            self.storage.remove_cart_item(item.id)
            logger.info(f"Removed cart item {item.id} (quantity set to 0)")
            return None

        updated = self.storage.update_cart_item(item.id, quantity)
        if not updated:
            raise LookupError("Cart item not found")
        return updated

    def remove_item(self, user_id: int, item_id: int):
        item = self._owned_item(user_id, item_id)
        if not self.storage.remove_cart_item(item.id):
            raise LookupError("Cart item not found")
        logger.info(f"Removed cart item {item.id} from cart {item.cart_id}")

    def _find_item(self, cart_id: int, product_id: int) -> CartItem | None:
        return next(
            (i for i in self.storage.list_cart_items(cart_id) if i.product_id == product_id),
            None,
        )

    def _owned_item(self, user_id: int, item_id: int) -> CartItem:
        cart = self.storage.get_cart(user_id)
        if not cart:
            raise LookupError("Cart not found")

        item = self.storage.get_cart_item(item_id)
        if not item or item.cart_id != cart.id:
            raise LookupError("Cart item not found")
        return item
