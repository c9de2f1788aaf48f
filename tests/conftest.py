# tests/conftest.py
import os
import pytest
from fastapi.testclient import TestClient

# env must be set before the app is imported (bcrypt cost is read at import)
os.environ["SECRET_KEY"] = "test-secret"
os.environ["APP_ENV"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["STORAGE_BACKEND"] = "memory"

from gameforge.config import Settings  # noqa: E402
from gameforge.main import create_app  # noqa: E402
from gameforge.storage import InMemoryStorage  # noqa: E402


@pytest.fixture
def settings():
    return Settings(app_env="test", secret_key="test-secret", storage_backend="memory")


@pytest.fixture
def storage():
    # fresh, empty store per test
    return InMemoryStorage(seed_data=False)


@pytest.fixture
def client(settings, storage):
    app = create_app(settings, storage=storage)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def logged_in(client):
    r = client.post(
        "/api/auth/signup",
        json={
            "username": "devon",
            "email": "devon@test.com",
            "password": "secret1",
            "confirmPassword": "secret1",
        },
    )
    assert r.status_code == 201
    return r.json()["user"]
