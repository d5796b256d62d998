from __future__ import annotations

import os
import tempfile
from dataclasses import replace
from threading import Lock
from uuid import uuid4

# Settings are read once at import time, so the environment must be ready
# before any auth_service module is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="auth-service-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'auth.db')}"
os.environ["DATABASE_CONNECT_RETRIES"] = "1"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret-0123456789abcdef"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-0123456789abcdef"
os.environ["ENABLE_RATE_LIMIT"] = "false"
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "auth.log")
os.environ["APP_ENV"] = "test"

import pytest  # noqa: E402

from auth_service.application.services.tokens import JwtTokenCodec, TokenSettings  # noqa: E402
from auth_service.domain.users.entities import User  # noqa: E402
from auth_service.domain.users.exceptions import UserAlreadyExistsError  # noqa: E402
from auth_service.domain.users.repositories import (  # noqa: E402
    PasswordHasher,
    RefreshTokenRepository,
    UserRepository,
)


class InMemoryUserStore(UserRepository, RefreshTokenRepository):
    """Dict-backed store; one lock serialises every write like a row lock would."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._lock = Lock()

    def add(self, user: User) -> User:
        with self._lock:
            for existing in self._users.values():
                if existing.username == user.username or existing.email == user.email:
                    raise UserAlreadyExistsError()
            persisted = replace(user, id=str(uuid4()))
            self._users[persisted.id] = persisted
            return persisted

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def save(self, user_id: str, token: str) -> None:
        with self._lock:
            if user_id in self._users:
                self._users[user_id] = replace(self._users[user_id], refresh_token=token)

    def get(self, user_id: str) -> str | None:
        user = self._users.get(user_id)
        return user.refresh_token if user else None

    def delete(self, user_id: str) -> None:
        with self._lock:
            if user_id in self._users:
                self._users[user_id] = replace(self._users[user_id], refresh_token=None)

    def rotate(self, user_id: str, current: str, new: str) -> bool:
        with self._lock:
            user = self._users.get(user_id)
            if user is None or user.refresh_token != current:
                return False
            self._users[user_id] = replace(user, refresh_token=new)
            return True


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


@pytest.fixture()
def token_settings() -> TokenSettings:
    return TokenSettings(
        access_secret="unit-access-secret",
        refresh_secret="unit-refresh-secret",
    )


@pytest.fixture()
def codec(token_settings: TokenSettings) -> JwtTokenCodec:
    return JwtTokenCodec(token_settings)


@pytest.fixture()
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()
