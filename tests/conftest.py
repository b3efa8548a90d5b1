import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("MEMBAZA_JWT_SECRET_KEY", "tests-secret-key")
os.environ.setdefault("MEMBAZA_BCRYPT_ROUNDS", "4")
os.environ.setdefault("MEMBAZA_USER_STORE_BACKEND", "memory")

from config import Settings, get_settings_for_testing
from core.authenticator import Authenticator
from core.passwords import PasswordHasher
from core.tokens import JwtService, create_jwt_service
from core.user_store import InMemoryUserStore
from models import User


PASSWORD = "pw"


@pytest.fixture()
def settings() -> Settings:
    return get_settings_for_testing(
        jwt_secret_key="tests-secret-key",
        bcrypt_rounds=4,
        user_store_backend="memory",
    )


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture()
def jwt_service(settings: Settings) -> JwtService:
    return create_jwt_service(settings)


@pytest.fixture()
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture()
def make_user(user_store: InMemoryUserStore, hasher: PasswordHasher):
    def _make_user(
        user_id: str = "u1",
        email: str = "a@x.com",
        password: str = PASSWORD,
        confirmed: bool = True,
        enabled: bool = True,
    ) -> User:
        return user_store.save(User(
            id=user_id,
            email=email,
            password_hash=hasher.hash(password),
            confirmed=confirmed,
            enabled=enabled,
        ))

    return _make_user


@pytest.fixture()
def authenticator(user_store, hasher, jwt_service) -> Authenticator:
    return Authenticator(user_store, hasher, jwt_service)


@pytest.fixture()
def client(settings, user_store):
    from api.main import create_app

    app = create_app(settings=settings, user_store=user_store)
    with TestClient(app) as test_client:
        yield test_client
