# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed, typed, expiring access and refresh tokens.

Each token kind has its own signing key. Validation always selects the key
from the kind the caller expects, so a token minted for one purpose never
verifies at a use-site of the other, whatever its ``type`` claim says.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

from jose import jwt
from jose.exceptions import JWTError

from auth_service.domain.users.entities import TokenKind, TokenPair
from auth_service.domain.users.exceptions import (
    TokenExpiredError,
    TokenIssuerMismatchError,
    TokenKindMismatchError,
    TokenSignatureError,
)
from auth_service.domain.users.repositories import TokenCodec
from auth_service.shared.logging import logger

DEFAULT_ISSUER = "auth-service"
ACCESS_TTL = timedelta(minutes=30)
REFRESH_TTL = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(slots=True, frozen=True)
class TokenSettings:
    access_secret: str = field(repr=False)
    refresh_secret: str = field(repr=False)
    algorithm: str = "HS256"
    issuer: str = DEFAULT_ISSUER
    access_ttl: timedelta = ACCESS_TTL
    refresh_ttl: timedelta = REFRESH_TTL


class JwtTokenCodec(TokenCodec):
    def __init__(
        self,
        settings: TokenSettings,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._settings = settings
        self._clock = clock
        self._keys = {
            TokenKind.ACCESS: settings.access_secret,
            TokenKind.REFRESH: settings.refresh_secret,
        }
        self._ttls = {
            TokenKind.ACCESS: settings.access_ttl,
            TokenKind.REFRESH: settings.refresh_ttl,
        }

    def issue(self, user_id: str, kind: TokenKind) -> str:
        now = self._clock()
        payload: dict[str, Any] = {
            "sub": user_id,
            "user_id": user_id,
            "type": kind.value,
            "iss": self._settings.issuer,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttls[kind]).timestamp()),
            "jti": uuid4().hex,
        }
        token = jwt.encode(payload, self._keys[kind], algorithm=self._settings.algorithm)
        logger.debug(f"tokens: issued {kind.value} token for user_id={user_id}")
        return token

    def issue_pair(self, user_id: str) -> TokenPair:
        return TokenPair(
            access_token=self.issue(user_id, TokenKind.ACCESS),
            refresh_token=self.issue(user_id, TokenKind.REFRESH),
        )

    def validate(self, token: str, expected_kind: TokenKind) -> str:
        try:
            claims = self._decode(token, self._keys[expected_kind])
        except JWTError as exc:
            if self._is_authentic_other_kind(token, expected_kind):
                logger.debug(f"tokens: {expected_kind.value} expected, other kind presented")
                raise TokenKindMismatchError() from exc
            raise TokenSignatureError() from exc

        exp = claims.get("exp")
        if not isinstance(exp, int | float):
            raise TokenSignatureError()
        if self._clock().timestamp() > exp:
            raise TokenExpiredError()

        if claims.get("type") != expected_kind.value:
            raise TokenKindMismatchError()

        if claims.get("iss") != self._settings.issuer:
            raise TokenIssuerMismatchError()

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise TokenSignatureError()
        return subject

    def _decode(self, token: str, key: str) -> dict[str, Any]:
        # expiry is checked against the injected clock instead
        return jwt.decode(
            token,
            key,
            algorithms=[self._settings.algorithm],
            options={"verify_exp": False},
        )

    def _is_authentic_other_kind(self, token: str, expected_kind: TokenKind) -> bool:
        other = TokenKind.REFRESH if expected_kind is TokenKind.ACCESS else TokenKind.ACCESS
        if self._keys[other] == self._keys[expected_kind]:
            return False
        try:
            claims = self._decode(token, self._keys[other])
        except JWTError:
            return False
        # a token signed with the other key but claiming the expected kind is forged
        return claims.get("type") == other.value


__all__ = ["ACCESS_TTL", "DEFAULT_ISSUER", "JwtTokenCodec", "REFRESH_TTL", "TokenSettings"]
