# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.deps import get_current_user, get_storage, require_admin
from storefront.domain.entities import User
from storefront.domain.schemas import CheckoutIn, OrderOut, OrderStatusIn
from storefront.repos.storage import Storage
from storefront.services.order_service import OrderService
from storefront.utils.settings import DEFAULT_PAGE_SIZE

router = APIRouter(prefix="/api/orders", tags=["orders"])


def get_service(storage: Storage = Depends(get_storage)) -> OrderService:
    return OrderService(storage)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: CheckoutIn,
    user: User = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    """
    Places an order from the cart contents (or the explicit item list).
    The cart itself is not cleared.
    """
    try:
        return svc.place_order(user.id, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[OrderOut])
def list_orders(
    user_id: int | None = Query(None),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=0),
    offset: int = Query(0, ge=0),
    user: User = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    return svc.list_orders(user, user_id=user_id, limit=limit, offset=offset)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: User = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.get_order(order_id, user)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{order_id}/status", response_model=OrderOut, dependencies=[Depends(require_admin)])
def update_status(
    order_id: int,
    payload: OrderStatusIn,
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.update_status(order_id, payload.status)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
