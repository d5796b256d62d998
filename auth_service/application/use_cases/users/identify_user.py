# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from auth_service.domain.users.entities import TokenKind, UserProfile
from auth_service.domain.users.exceptions import TokenError, UnauthorizedError
from auth_service.domain.users.repositories import TokenCodec, UserRepository


class IdentifyUserUseCase:
    """Resolve the user id behind an access token."""

    def __init__(self, *, tokens: TokenCodec) -> None:
        self._tokens = tokens

    def execute(self, access_token: str) -> str:
        try:
            return self._tokens.validate(access_token, TokenKind.ACCESS)
        except TokenError:
            raise UnauthorizedError() from None


class GetProfileUseCase:
    def __init__(self, *, users: UserRepository, tokens: TokenCodec) -> None:
        self._users = users
        self._identify = IdentifyUserUseCase(tokens=tokens)

    def execute(self, access_token: str) -> UserProfile:
        user_id = self._identify.execute(access_token)
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UnauthorizedError()
        return user.profile()
