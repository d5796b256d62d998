from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints, field_validator
from pydantic_core import PydanticCustomError

from auth_service.domain.users.entities import Registration, TokenPair, UserProfile

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Passwords are taken verbatim; only identity fields are trimmed.
_Trimmed = Annotated[str, StringConstraints(strip_whitespace=True)]


class RegisterRequestDTO(BaseModel):
    username: _Trimmed = Field(min_length=1, max_length=64)
    email: _Trimmed = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=128)
    first_name: _Trimmed = Field(min_length=1, max_length=128)
    last_name: _Trimmed = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        if not _EMAIL_RE.match(value):
            raise PydanticCustomError(
                "email_invalid",
                "Email address is not valid",
                {},
            )
        return value.lower()

    def to_registration(self) -> Registration:
        return Registration(
            username=self.username,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            password=self.password,
        )


class LoginRequestDTO(BaseModel):
    username: _Trimmed = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)


class RefreshRequestDTO(BaseModel):
    refresh_token: str = Field(min_length=1)


class RegisterResponseDTO(BaseModel):
    user_id: str


class TokenPairDTO(BaseModel):
    access_token: str
    refresh_token: str

    @classmethod
    def from_pair(cls, pair: TokenPair) -> TokenPairDTO:
        return cls(access_token=pair.access_token, refresh_token=pair.refresh_token)


class ProfileDTO(BaseModel):
    id: str
    username: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime

    @classmethod
    def from_profile(cls, profile: UserProfile) -> ProfileDTO:
        return cls(
            id=profile.id,
            username=profile.username,
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            created_at=profile.created_at,
        )


class MessageDTO(BaseModel):
    message: str
