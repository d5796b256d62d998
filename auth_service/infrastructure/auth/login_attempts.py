# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from auth_service.domain.users.repositories import LoginAttempts
from auth_service.shared.logging import logger


@dataclass
class LoginAttempt:
    timestamp: float
    success: bool
    ip_address: str | None = None


class LoginAttemptsTracker(LoginAttempts):
    """In-process brute-force guard: locks a username after repeated failures."""

    def __init__(
        self,
        *,
        max_attempts: int = 5,
        lockout_duration: float = 15 * 60,
        attempt_window: float = 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_attempts = max(1, int(max_attempts))
        self._lockout_duration = float(lockout_duration)
        self._attempt_window = float(attempt_window)
        self._clock = clock
        self._attempts: dict[str, deque[LoginAttempt]] = defaultdict(
            lambda: deque(maxlen=self._max_attempts * 2)
        )
        self._lockouts: dict[str, float] = {}  # username -> unlock time
        self._lock = Lock()

    def record_attempt(
        self, username: str, success: bool, ip_address: str | None = None
    ) -> None:
        with self._lock:
            if success:
                self._attempts.pop(username, None)
                if self._lockouts.pop(username, None) is not None:
                    logger.info(f"login_attempts: cleared lockout for user={username}")
                return

            self._prune_stale()
            self._attempts[username].append(
                LoginAttempt(timestamp=self._clock(), success=False, ip_address=ip_address)
            )
            self._check_and_lock(username)

    def is_locked(self, username: str) -> bool:
        with self._lock:
            unlock_time = self._lockouts.get(username)
            if unlock_time is None:
                return False
            if self._clock() >= unlock_time:
                del self._lockouts[username]
                self._attempts.pop(username, None)
                logger.info(f"login_attempts: lockout expired for user={username}")
                return False
            return True

    def lockout_remaining(self, username: str) -> float:
        with self._lock:
            unlock_time = self._lockouts.get(username)
            if unlock_time is None:
                return 0.0
            return max(0.0, unlock_time - self._clock())

    def failed_attempts(self, username: str) -> int:
        with self._lock:
            return len(self._recent_failures(username))

    def tracked_usernames(self) -> int:
        with self._lock:
            return len(self._attempts)

    def _recent_failures(self, username: str) -> list[LoginAttempt]:
        if username not in self._attempts:
            return []
        cutoff = self._clock() - self._attempt_window
        return [
            attempt
            for attempt in self._attempts[username]
            if not attempt.success and attempt.timestamp > cutoff
        ]

    def _prune_stale(self) -> None:
        """Forget usernames whose failures all fell out of the window and are not locked."""
        now = self._clock()
        for name in [name for name, until in self._lockouts.items() if now >= until]:
            del self._lockouts[name]

        cutoff = now - self._attempt_window
        stale = [
            name
            for name, attempts in self._attempts.items()
            if name not in self._lockouts
            and all(attempt.timestamp <= cutoff for attempt in attempts)
        ]
        for name in stale:
            del self._attempts[name]

    def _check_and_lock(self, username: str) -> None:
        failures = self._recent_failures(username)
        if len(failures) < self._max_attempts:
            return

        self._lockouts[username] = self._clock() + self._lockout_duration
        ips = {attempt.ip_address for attempt in failures if attempt.ip_address}
        logger.warning(
            f"login_attempts: ACCOUNT LOCKED user={username} "
            f"failed_attempts={len(failures)} "
            f"lockout_duration={self._lockout_duration}s "
            f"ip_addresses={sorted(ips) if ips else 'unknown'}"
        )


__all__ = ["LoginAttempt", "LoginAttemptsTracker"]
