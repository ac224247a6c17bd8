# storefront/api/errors.py
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.domain.errors import ConflictError, StorageError, TransientStorageError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Validation error", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(ConflictError)
    async def conflict_error(request: Request, exc: ConflictError):
        logger.warning(f"{request.method} {request.url.path}: conflict: {exc}")
        return JSONResponse(status_code=409, content={"detail": "Conflict with existing data"})

    @app.exception_handler(TransientStorageError)
    async def transient_error(request: Request, exc: TransientStorageError):
        logger.error(f"{request.method} {request.url.path}: storage unavailable: {exc}")
        return JSONResponse(status_code=503, content={"detail": "Storage temporarily unavailable"})

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError):
        logger.error(f"{request.method} {request.url.path}: storage error: {exc}")
        return JSONResponse(status_code=500, content={"detail": "Storage error"})
