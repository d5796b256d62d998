# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from auth_service.domain.users.entities import TokenPair
from auth_service.domain.users.exceptions import AccountLockedError, InvalidCredentialsError
from auth_service.domain.users.repositories import (
    LoginAttempts,
    PasswordHasher,
    RefreshTokenRepository,
    TokenCodec,
    UserRepository,
)
from auth_service.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        refresh_tokens: RefreshTokenRepository,
        password_hasher: PasswordHasher,
        tokens: TokenCodec,
        attempts: LoginAttempts | None = None,
    ) -> None:
        self._users = users
        self._refresh_tokens = refresh_tokens
        self._password_hasher = password_hasher
        self._tokens = tokens
        self._attempts = attempts
        self._dummy_hash: str | None = None

    def execute(self, username: str, password: str, ip_address: str | None = None) -> TokenPair:
        if self._attempts is not None and self._attempts.is_locked(username):
            raise AccountLockedError(lockout_remaining=self._attempts.lockout_remaining(username))

        user = self._users.find_by_username(username)
        if user is None:
            # burn the same hashing cost so unknown usernames are not observable
            self._password_hasher.verify(password, self._get_dummy_hash())
            password_valid = False
        else:
            password_valid = self._password_hasher.verify(password, user.password_hash)

        if not password_valid or user is None:
            if self._attempts is not None:
                self._attempts.record_attempt(username, success=False, ip_address=ip_address)
            logger.info(f"auth.login: rejected username={username}")
            raise InvalidCredentialsError()

        if self._attempts is not None:
            self._attempts.record_attempt(username, success=True, ip_address=ip_address)

        pair = self._tokens.issue_pair(user.id)
        self._refresh_tokens.save(user.id, pair.refresh_token)
        logger.info(f"auth.login: ok user_id={user.id}")
        return pair

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash("not-a-real-password")
        return self._dummy_hash
