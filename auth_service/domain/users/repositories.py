# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import TokenKind, TokenPair, User


class UserRepository(Protocol):
    def add(self, user: User) -> User: ...
    def find_by_username(self, username: str) -> User | None: ...
    def find_by_id(self, user_id: str) -> User | None: ...


class RefreshTokenRepository(Protocol):
    """Single live refresh token per user."""

    def save(self, user_id: str, token: str) -> None: ...
    def get(self, user_id: str) -> str | None: ...
    def delete(self, user_id: str) -> None: ...

    def rotate(self, user_id: str, current: str, new: str) -> bool:
        """Swap ``current`` for ``new`` only if ``current`` is still on record."""
        ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenCodec(Protocol):
    def issue(self, user_id: str, kind: TokenKind) -> str: ...
    def validate(self, token: str, expected_kind: TokenKind) -> str: ...
    def issue_pair(self, user_id: str) -> TokenPair: ...


class LoginAttempts(Protocol):
    def is_locked(self, username: str) -> bool: ...
    def lockout_remaining(self, username: str) -> float: ...
    def record_attempt(
        self, username: str, success: bool, ip_address: str | None = None
    ) -> None: ...
