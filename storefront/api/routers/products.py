# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.deps import get_storage, require_admin
from storefront.domain.entities import Product
from storefront.domain.schemas import MessageOut, ProductCreate, ProductUpdate
from storefront.repos.storage import Storage
from storefront.utils.settings import DEFAULT_PAGE_SIZE

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=List[Product])
def list_products(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=0),
    offset: int = Query(0, ge=0),
    storage: Storage = Depends(get_storage),
):
    return storage.list_products(limit=limit, offset=offset)


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: int, storage: Storage = Depends(get_storage)):
    product = storage.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("", response_model=Product, status_code=201, dependencies=[Depends(require_admin)])
def create_product(payload: ProductCreate, storage: Storage = Depends(get_storage)):
    return storage.create_product(payload)


@router.put("/{product_id}", response_model=Product, dependencies=[Depends(require_admin)])
def update_product(
    product_id: int,
    payload: ProductUpdate,
    storage: Storage = Depends(get_storage),
):
    product = storage.update_product(product_id, payload)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.delete("/{product_id}", response_model=MessageOut, dependencies=[Depends(require_admin)])
def delete_product(product_id: int, storage: Storage = Depends(get_storage)):
    if not storage.delete_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return {"message": "Product deleted successfully"}
