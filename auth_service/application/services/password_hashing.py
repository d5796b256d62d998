"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from auth_service.domain.users.repositories import PasswordHasher
from auth_service.shared.errors import HashingError
from auth_service.shared.logging import logger


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted scrypt hashes via werkzeug, using its default cost parameters."""

    def hash(self, password: str) -> str:
        try:
            return str(generate_password_hash(password))
        except (OSError, ValueError) as exc:
            logger.error(f"password_hashing: hash failed ({type(exc).__name__})")
            raise HashingError() from exc

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError):
            # unknown method or corrupt parameters in the stored hash
            logger.warning("password_hashing: malformed stored hash")
            return False
