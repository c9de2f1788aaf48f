# gameforge/storage/__init__.py

from ..config import Settings
from ..db import create_db_engine
from ..errors import ConfigurationError
from .base import Storage
from .database import DatabaseStorage
from .memory import InMemoryStorage

__all__ = ["Storage", "InMemoryStorage", "DatabaseStorage", "build_storage"]


def build_storage(settings: Settings) -> Storage:
    """Pick the backend named by ``settings.storage_backend``."""
    seed_data = settings.should_seed_sample_data

    if settings.storage_backend == "memory":
        return InMemoryStorage(seed_data=seed_data)

    if settings.storage_backend != "database":
        raise ConfigurationError(f"Unknown STORAGE_BACKEND: {settings.storage_backend!r}")

    engine = create_db_engine(settings.database_url, settings)
    return DatabaseStorage(
        engine,
        seed_data=seed_data,
        retry_attempts=settings.db_retry_attempts,
        retry_base_delay=settings.db_retry_base_delay,
    )
