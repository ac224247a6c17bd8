# storefront/data/seed.py
from decimal import Decimal

from storefront.domain.entities import Role
from storefront.domain.schemas import ProductCreate, UserCreate
from storefront.repos import build_storage
from storefront.repos.storage import Storage
from storefront.utils.security import hash_password
from storefront.utils.settings import StorageConfig
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SEED_PASSWORD = "test_password"

SEED_USERS = [
    {"email": "test_admin@example.com", "first_name": "Admin", "last_name": "User", "role": Role.ADMIN},
    {"email": "test_customer@example.com", "first_name": "Customer", "last_name": "User", "role": Role.CUSTOMER},
]

SEED_PRODUCTS = [
    {
        "name": "Mechanical Keyboard",
        "description": "Tenkeyless keyboard with hot-swappable switches.",
        "price": Decimal("199.99"),
        "stock": 25,
    },
    {
        "name": "Wireless Mouse",
        "description": "Ergonomic mouse with a six month battery life.",
        "price": Decimal("49.50"),
        "stock": 40,
    },
    {
        "name": "27in Monitor",
        "description": "QHD IPS panel, 144 Hz, height adjustable stand.",
        "price": Decimal("899.00"),
        "stock": 8,
    },
]


def seed(storage: Storage):
    #not forcing: only create what is missing
    for data in SEED_USERS:
        if storage.get_user_by_email(data["email"]):
            logger.info(f"{data['role'].value} user already exists")
            continue
        storage.create_user(UserCreate(password=hash_password(SEED_PASSWORD), **data))
        logger.info(f"{data['role'].value} user created")

    if storage.list_products(limit=1):
        logger.info("Catalog not empty, skipping products")
        return

    for data in SEED_PRODUCTS:
        storage.create_product(ProductCreate(**data))
    logger.info(f"Created {len(SEED_PRODUCTS)} products")


if __name__ == "__main__":
    storage = build_storage(StorageConfig.from_env())
    try:
        seed(storage)
    finally:
        storage.close()
