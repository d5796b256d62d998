"""Use-case for ending a session by clearing the stored refresh token."""

from __future__ import annotations

from auth_service.domain.users.entities import TokenKind
from auth_service.domain.users.exceptions import TokenError, UnauthorizedError
from auth_service.domain.users.repositories import RefreshTokenRepository, TokenCodec
from auth_service.shared.logging import logger


class LogoutUserUseCase:
    def __init__(self, *, refresh_tokens: RefreshTokenRepository, tokens: TokenCodec) -> None:
        self._refresh_tokens = refresh_tokens
        self._tokens = tokens

    def execute(self, access_token: str) -> str:
        try:
            user_id = self._tokens.validate(access_token, TokenKind.ACCESS)
        except TokenError:
            raise UnauthorizedError() from None

        self._refresh_tokens.delete(user_id)
        logger.info(f"auth.logout: cleared refresh token user_id={user_id}")
        return user_id
