# storefront/api/routers/health.py
from fastapi import APIRouter, Depends

from storefront.api.deps import get_storage
from storefront.repos.storage import Storage

router = APIRouter(tags=["health"])


@router.get("/health")
def health(storage: Storage = Depends(get_storage)):
    return {"status": "ok", "storage": storage.name}
