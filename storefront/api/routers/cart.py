# storefront/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException, Response

from storefront.api.deps import get_current_user, get_storage
from storefront.domain.entities import CartItem, User
from storefront.domain.schemas import CartOut, ItemIn, MessageOut, QuantityIn
from storefront.repos.storage import Storage
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(storage: Storage = Depends(get_storage)) -> CartService:
    return CartService(storage)


@router.get("", response_model=CartOut)
def get_cart(
    user: User = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    return svc.get_cart(user.id)


@router.post("/items", response_model=CartItem)
def add_item(
    payload: ItemIn,
    response: Response,
    user: User = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        item, created = svc.add_product(user.id, payload.product_id, payload.quantity)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    response.status_code = 201 if created else 200
    return item


@router.put("/items/{item_id}", response_model=CartItem | MessageOut)
def update_item(
    item_id: int,
    payload: QuantityIn,
    user: User = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        item = svc.set_quantity(user.id, item_id, payload.quantity)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if item is None:
        return {"message": "Item removed from cart"}
    return item


@router.delete("/items/{item_id}", response_model=MessageOut)
def remove_item(
    item_id: int,
    user: User = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        svc.remove_item(user.id, item_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Item removed from cart"}
