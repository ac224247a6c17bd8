# storefront/utils/settings.py
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_ECHO = _env_bool("DATABASE_ECHO")
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "database" if DATABASE_URL else "memory")

SESSION_SECRET = os.getenv("SESSION_SECRET", "development-secret")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", 30 * 24 * 60 * 60))
SESSION_HTTPS_ONLY = _env_bool("SESSION_HTTPS_ONLY")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SEED_ON_STARTUP = _env_bool("SEED_ON_STARTUP")

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class StorageConfig:
    """Which storage backend to build, and how to reach it."""

    backend: str = "memory"
    database_url: str | None = None
    echo: bool = False

    @classmethod
    def from_env(cls) -> "StorageConfig":
        return cls(
            backend=STORAGE_BACKEND,
            database_url=DATABASE_URL,
            echo=DATABASE_ECHO,
        )
