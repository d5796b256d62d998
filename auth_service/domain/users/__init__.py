# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Registration, TokenKind, TokenPair, User, UserProfile
from .exceptions import (
    AccountLockedError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    TokenError,
    TokenExpiredError,
    TokenIssuerMismatchError,
    TokenKindMismatchError,
    TokenSignatureError,
    UnauthorizedError,
    UserAlreadyExistsError,
)

__all__ = [
    "AccountLockedError",
    "InvalidCredentialsError",
    "InvalidRefreshTokenError",
    "Registration",
    "TokenError",
    "TokenExpiredError",
    "TokenIssuerMismatchError",
    "TokenKind",
    "TokenKindMismatchError",
    "TokenPair",
    "TokenSignatureError",
    "UnauthorizedError",
    "User",
    "UserAlreadyExistsError",
    "UserProfile",
]
