# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from auth_service.domain.users.entities import Registration, User
from auth_service.domain.users.repositories import PasswordHasher, UserRepository
from auth_service.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, registration: Registration) -> str:
        """Persist a new user and return its id.

        Username/email conflicts are reported by the store as
        ``UserAlreadyExistsError``.
        """
        hashed = self._password_hasher.hash(registration.password)
        user = User(
            id="",
            username=registration.username,
            email=registration.email,
            first_name=registration.first_name,
            last_name=registration.last_name,
            password_hash=hashed,
            created_at=datetime.now(UTC),
        )
        persisted = self._users.add(user)
        logger.info(f"auth.register: created user_id={persisted.id}")
        return persisted.id
