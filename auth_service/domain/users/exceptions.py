# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from auth_service.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class InvalidRefreshTokenError(DomainError):
    code = "invalid_refresh_token"
    status = HTTPStatus.UNAUTHORIZED


class UnauthorizedError(DomainError):
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED


class AccountLockedError(DomainError):
    code = "account_locked"
    status = HTTPStatus.TOO_MANY_REQUESTS

    def __init__(self, lockout_remaining: float = 0) -> None:
        super().__init__(context={"lockout_remaining_seconds": round(lockout_remaining, 1)})


class TokenError(DomainError):
    code = "invalid_token"
    status = HTTPStatus.UNAUTHORIZED


class TokenSignatureError(TokenError):
    code = "token_signature_invalid"


class TokenExpiredError(TokenError):
    code = "token_expired"


class TokenKindMismatchError(TokenError):
    code = "token_kind_mismatch"


class TokenIssuerMismatchError(TokenError):
    code = "token_issuer_mismatch"
