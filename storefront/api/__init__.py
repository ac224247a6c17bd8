# storefront/api/__init__.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from storefront.api.errors import register_exception_handlers
from storefront.api.routers import auth, cart, health, orders, products
from storefront.repos.storage import Storage
from storefront.utils.settings import (
    SEED_ON_STARTUP,
    SESSION_HTTPS_ONLY,
    SESSION_MAX_AGE,
    SESSION_SECRET,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def create_app(
    storage: Storage,
    session_secret: str = SESSION_SECRET,
    seed_on_startup: bool = SEED_ON_STARTUP,
) -> FastAPI:
    """Build the app around an already constructed storage backend."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if seed_on_startup:
            from storefront.data.seed import seed

            seed(storage)
        yield
        storage.close()

    app = FastAPI(
        title="Storefront",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.storage = storage

    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret,
        session_cookie="storefront_session",
        max_age=SESSION_MAX_AGE,
        https_only=SESSION_HTTPS_ONLY,
    )
    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(products.router)
    app.include_router(cart.router)
    app.include_router(orders.router)

    logger.info(f"App created with {storage.name} storage")
    return app
