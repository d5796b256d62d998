# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker

from auth_service.infrastructure.resilience import connect_with_retry
from auth_service.shared.config import load_config
from auth_service.shared.errors import StoreUnavailableError
from auth_service.shared.logging import logger

_config = load_config()


class Base(DeclarativeBase):
    pass


engine_kwargs: dict[str, object] = {}
if _config.database_url.startswith("sqlite"):
    engine_kwargs["connect_args"] = {
        "check_same_thread": False,
        "timeout": int(_config.database_pool_timeout),
    }
else:
    engine_kwargs.update(
        pool_size=_config.database_pool_size,
        max_overflow=_config.database_max_overflow,
        pool_timeout=_config.database_pool_timeout,
    )

ENGINE: Engine = create_engine(
    _config.database_url,
    echo=False,
    pool_pre_ping=True,
    **engine_kwargs,
)


SessionLocal = scoped_session(
    sessionmaker(bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False)
)


@contextmanager
def session_scope() -> Iterator[Session]:
    session = SessionLocal()
    logger.debug("db.session: opened scoped session")
    try:
        yield session
        session.commit()
        logger.debug("db.session: committed scoped session")
    except OperationalError as exc:
        logger.error(f"db.session: store unavailable, rolling back ({exc.orig!r})")
        session.rollback()
        raise StoreUnavailableError() from exc
    except Exception:
        logger.debug("db.session: error, rolling back")
        session.rollback()
        raise
    finally:
        session.close()
        SessionLocal.remove()
        logger.debug("db.session: closed scoped session")


def init_db() -> None:
    from auth_service.infrastructure.db import models  # noqa: F401

    connect_with_retry(
        ENGINE,
        attempts=_config.database_connect_retries,
        delay=_config.database_connect_delay,
    )
    Base.metadata.create_all(bind=ENGINE)
    logger.info("Database schema ensured")
