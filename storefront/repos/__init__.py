# storefront/repos/__init__.py
from storefront.repos.storage import Storage
from storefront.repos.memory_storage import MemoryStorage
from storefront.repos.database_storage import DatabaseStorage
from storefront.utils.settings import StorageConfig
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

__all__ = ["Storage", "MemoryStorage", "DatabaseStorage", "build_storage"]


def build_storage(config: StorageConfig) -> Storage:
    """Build the storage backend named by `config`."""
    if config.backend == "memory":
        logger.info("Using in-memory storage")
        return MemoryStorage()

    if config.backend == "database":
        if not config.database_url:
            raise ValueError("STORAGE_BACKEND=database requires DATABASE_URL")
        logger.info("Using database storage")
        return DatabaseStorage.from_url(config.database_url, echo=config.echo)

    raise ValueError(f"Unknown storage backend: {config.backend!r}")
