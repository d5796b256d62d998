# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(slots=True, frozen=True)
class User:

    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    password_hash: str = field(repr=False)
    created_at: datetime
    refresh_token: str | None = field(default=None, repr=False)

    def profile(self) -> UserProfile:
        return UserProfile(
            id=self.id,
            username=self.username,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            created_at=self.created_at,
        )


@dataclass(slots=True, frozen=True)
class UserProfile:
    """Public view of a user; carries no credential material."""

    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class Registration:

    username: str
    email: str
    first_name: str
    last_name: str
    password: str = field(repr=False)


@dataclass(slots=True, frozen=True)
class TokenPair:

    access_token: str
    refresh_token: str = field(repr=False)
