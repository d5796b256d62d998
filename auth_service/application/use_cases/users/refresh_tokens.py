# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case for rotating a refresh token into a fresh token pair."""

from __future__ import annotations

import hmac

from auth_service.domain.users.entities import TokenKind, TokenPair
from auth_service.domain.users.exceptions import InvalidRefreshTokenError, TokenError
from auth_service.domain.users.repositories import RefreshTokenRepository, TokenCodec
from auth_service.shared.logging import logger


class RefreshTokensUseCase:
    """Exchange the user's live refresh token for a new pair.

    A refresh token is good for exactly one successful call: the stored token
    is swapped with a conditional update, so a superseded or concurrently
    used token is rejected.
    """

    def __init__(
        self,
        *,
        refresh_tokens: RefreshTokenRepository,
        tokens: TokenCodec,
    ) -> None:
        self._refresh_tokens = refresh_tokens
        self._tokens = tokens

    def execute(self, refresh_token: str) -> TokenPair:
        try:
            user_id = self._tokens.validate(refresh_token, TokenKind.REFRESH)
        except TokenError as exc:
            logger.info(f"auth.refresh: rejected token ({exc.code})")
            raise InvalidRefreshTokenError() from None

        stored = self._refresh_tokens.get(user_id)
        if stored is None or not hmac.compare_digest(stored, refresh_token):
            logger.warning(f"auth.refresh: token not on record for user_id={user_id}")
            raise InvalidRefreshTokenError()

        pair = self._tokens.issue_pair(user_id)
        if not self._refresh_tokens.rotate(user_id, current=refresh_token, new=pair.refresh_token):
            logger.warning(f"auth.refresh: lost rotation race for user_id={user_id}")
            raise InvalidRefreshTokenError()

        logger.info(f"auth.refresh: rotated user_id={user_id}")
        return pair
