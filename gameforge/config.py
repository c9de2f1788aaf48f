# gameforge/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


@dataclass(frozen=True)
class Settings:
    database_url: str | None = None
    app_env: str = "development"
    enable_sample_data: bool = False
    storage_backend: str = "database"
    secret_key: str = "dev-secret"
    session_cookie: str = "gameforge_session"

    db_retry_attempts: int = 3
    db_retry_base_delay: float = 1.0
    db_pool_size: int = 20
    db_connect_timeout: int = 10
    db_pool_recycle: int = 30

    bcrypt_rounds: int = 12

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL") or None,
            app_env=(os.getenv("APP_ENV") or os.getenv("NODE_ENV") or "development").strip().lower(),
            enable_sample_data=_env_bool("ENABLE_SAMPLE_DATA"),
            storage_backend=(os.getenv("STORAGE_BACKEND") or "database").strip().lower(),
            secret_key=os.getenv("SECRET_KEY", "dev-secret"),
            db_retry_attempts=_env_int("DB_RETRY_ATTEMPTS", 3),
            db_retry_base_delay=_env_float("DB_RETRY_BASE_DELAY", 1.0),
            db_pool_size=_env_int("DB_POOL_SIZE", 20),
            db_connect_timeout=_env_int("DB_CONNECT_TIMEOUT", 10),
            db_pool_recycle=_env_int("DB_POOL_RECYCLE", 30),
            bcrypt_rounds=_env_int("BCRYPT_ROUNDS", 12),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def should_seed_sample_data(self) -> bool:
        return self.app_env == "development" or self.enable_sample_data
