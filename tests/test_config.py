# tests/test_config.py
import pytest
from fastapi.testclient import TestClient

from gameforge.config import Settings
from gameforge.errors import ConfigurationError, StorageUnavailableError
from gameforge.main import create_app
from gameforge.storage import DatabaseStorage, InMemoryStorage, build_storage

ENV_VARS = (
    "DATABASE_URL", "APP_ENV", "NODE_ENV", "ENABLE_SAMPLE_DATA", "STORAGE_BACKEND",
    "DB_RETRY_ATTEMPTS", "DB_RETRY_BASE_DELAY", "DB_POOL_SIZE", "LOG_LEVEL", "BCRYPT_ROUNDS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings.from_env()
    assert s.database_url is None
    assert s.app_env == "development"
    assert s.storage_backend == "database"
    assert s.db_retry_attempts == 3
    assert s.db_retry_base_delay == 1.0
    assert s.db_pool_size == 20
    assert s.bcrypt_rounds == 12
    assert s.should_seed_sample_data is True
    assert s.is_production is False


def test_node_env_is_a_fallback(clean_env):
    clean_env.setenv("NODE_ENV", "production")
    assert Settings.from_env().is_production is True

    clean_env.setenv("APP_ENV", "test")
    assert Settings.from_env().app_env == "test"


def test_seeding_gate(clean_env):
    clean_env.setenv("APP_ENV", "production")
    assert Settings.from_env().should_seed_sample_data is False

    clean_env.setenv("ENABLE_SAMPLE_DATA", "true")
    assert Settings.from_env().should_seed_sample_data is True


def test_numeric_overrides(clean_env):
    clean_env.setenv("DB_RETRY_ATTEMPTS", "5")
    clean_env.setenv("DB_RETRY_BASE_DELAY", "0.1")
    clean_env.setenv("LOG_LEVEL", "debug")
    clean_env.setenv("BCRYPT_ROUNDS", "6")
    s = Settings.from_env()
    assert s.db_retry_attempts == 5
    assert s.db_retry_base_delay == 0.1
    assert s.log_level == "DEBUG"
    assert s.bcrypt_rounds == 6


def test_build_memory_storage():
    storage = build_storage(Settings(storage_backend="memory", app_env="development"))
    assert isinstance(storage, InMemoryStorage)
    assert storage.get_user("user-1") is not None

    empty = build_storage(Settings(storage_backend="memory", app_env="test"))
    assert empty.get_user("user-1") is None


def test_build_database_storage():
    storage = build_storage(Settings(database_url="sqlite://", app_env="development"))
    assert isinstance(storage, DatabaseStorage)
    assert storage.get_user("user-1") is not None
    storage.close()


def test_build_database_storage_requires_url():
    with pytest.raises(ConfigurationError):
        build_storage(Settings(storage_backend="database", database_url=None))


def test_unknown_backend():
    with pytest.raises(ConfigurationError, match="STORAGE_BACKEND"):
        build_storage(Settings(storage_backend="redis"))


def test_app_builds_its_own_storage_on_startup():
    app = create_app(Settings(storage_backend="memory", app_env="development"))
    with TestClient(app) as c:
        r = c.get("/api/projects")
        assert r.status_code == 200
        assert len(r.json()) == 8


class DownStorage(InMemoryStorage):
    def get_all_projects(self):
        raise StorageUnavailableError("get_all_projects", 3, ConnectionError("password=hunter2 refused"))


def test_storage_outage_is_a_generic_500(settings):
    with TestClient(create_app(settings, storage=DownStorage(seed_data=False))) as c:
        r = c.get("/api/projects")
    assert r.status_code == 500
    assert r.json() == {"message": "Storage temporarily unavailable"}
