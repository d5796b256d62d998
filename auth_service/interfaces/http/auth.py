# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps

from flask import g, request

from auth_service.application.use_cases.users.identify_user import IdentifyUserUseCase
from auth_service.domain.users.exceptions import UnauthorizedError
from auth_service.shared.logging import logger


def bearer_token() -> str:
    """Return the token from ``Authorization: Bearer <token>`` or an empty string."""
    header = request.headers.get("Authorization", "")
    parts = header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return ""
    return parts[1].strip()


def client_ip() -> str | None:
    """Peer address; behind a trusted proxy ProxyFix has already resolved it."""
    return request.remote_addr


def auth_required(identify: IdentifyUserUseCase) -> Callable:
    """Reject requests without a valid access token.

    On success ``g.user_id`` and ``g.access_token`` are set for the view.
    """

    def decorator(f: Callable):
        @wraps(f)
        def inner(*args, **kwargs):
            token = bearer_token()
            if not token:
                logger.warning(
                    f"No bearer token on {request.method} {request.path} from {client_ip()}"
                )
                raise UnauthorizedError()

            g.user_id = identify.execute(token)
            g.access_token = token
            logger.debug(f"Auth OK: user={g.user_id} {request.method} {request.path}")
            return f(*args, **kwargs)

        return inner

    return decorator


__all__ = ["auth_required", "bearer_token", "client_ip"]
