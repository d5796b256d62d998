# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from auth_service.domain.users.entities import User
from auth_service.domain.users.exceptions import UserAlreadyExistsError
from auth_service.domain.users.repositories import RefreshTokenRepository, UserRepository
from auth_service.infrastructure.db.models import UserRow
from auth_service.infrastructure.db.session import session_scope
from auth_service.shared.logging import logger


def _to_domain(row: UserRow) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        password_hash=row.password_hash,
        refresh_token=row.refresh_token,
        created_at=row.created_at,
    )


class SqlAlchemyUserRepository(UserRepository):
    def add(self, user: User) -> User:
        try:
            with session_scope() as session:
                row = UserRow(
                    username=user.username,
                    email=user.email,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    password_hash=user.password_hash,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            logger.info(f"users.add: conflict for username={user.username}")
            raise UserAlreadyExistsError() from exc

    def find_by_username(self, username: str) -> User | None:
        with session_scope() as session:
            row = session.scalars(select(UserRow).where(UserRow.username == username)).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: str) -> User | None:
        with session_scope() as session:
            row = session.get(UserRow, user_id)
            return _to_domain(row) if row else None


class SqlAlchemyRefreshTokenRepository(RefreshTokenRepository):
    """Stores the single live refresh token on the user's row."""

    def save(self, user_id: str, token: str) -> None:
        with session_scope() as session:
            session.execute(
                update(UserRow).where(UserRow.id == user_id).values(refresh_token=token)
            )

    def get(self, user_id: str) -> str | None:
        with session_scope() as session:
            return session.scalar(select(UserRow.refresh_token).where(UserRow.id == user_id))

    def delete(self, user_id: str) -> None:
        with session_scope() as session:
            session.execute(
                update(UserRow).where(UserRow.id == user_id).values(refresh_token=None)
            )

    def rotate(self, user_id: str, current: str, new: str) -> bool:
        # single conditional UPDATE: of two racing callers only one matches
        with session_scope() as session:
            result = session.execute(
                update(UserRow)
                .where(UserRow.id == user_id, UserRow.refresh_token == current)
                .values(refresh_token=new)
            )
            return result.rowcount == 1
