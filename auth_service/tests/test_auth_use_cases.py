from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import fields

import pytest

from auth_service.application.services.tokens import JwtTokenCodec
from auth_service.application.use_cases.users.identify_user import (
    GetProfileUseCase,
    IdentifyUserUseCase,
)
from auth_service.application.use_cases.users.login_user import LoginUserUseCase
from auth_service.application.use_cases.users.logout_user import LogoutUserUseCase
from auth_service.application.use_cases.users.refresh_tokens import RefreshTokensUseCase
from auth_service.application.use_cases.users.register_user import RegisterUserUseCase
from auth_service.domain.users.entities import Registration, TokenKind
from auth_service.domain.users.exceptions import (
    AccountLockedError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UnauthorizedError,
    UserAlreadyExistsError,
)
from auth_service.infrastructure.auth.login_attempts import LoginAttemptsTracker


def _bob(**overrides: str) -> Registration:
    data = {
        "username": "bob",
        "email": "bob@x.io",
        "first_name": "Bob",
        "last_name": "B",
        "password": "pw123456",
    }
    data.update(overrides)
    return Registration(**data)


class Service:
    """All use cases wired against the in-memory store."""

    def __init__(self, store, hasher, codec: JwtTokenCodec, attempts=None) -> None:
        self.register = RegisterUserUseCase(users=store, password_hasher=hasher)
        self.login = LoginUserUseCase(
            users=store,
            refresh_tokens=store,
            password_hasher=hasher,
            tokens=codec,
            attempts=attempts,
        )
        self.refresh = RefreshTokensUseCase(refresh_tokens=store, tokens=codec)
        self.logout = LogoutUserUseCase(refresh_tokens=store, tokens=codec)
        self.identify = IdentifyUserUseCase(tokens=codec)
        self.profile = GetProfileUseCase(users=store, tokens=codec)


@pytest.fixture()
def service(store, hasher, codec) -> Service:
    return Service(store, hasher, codec)


def test_register_user_success(service: Service, store) -> None:
    user_id = service.register.execute(_bob())

    user = store.find_by_username("bob")
    assert user is not None
    assert user.id == user_id
    assert user.password_hash == "hashed:pw123456"
    assert user.refresh_token is None


def test_register_duplicate_username(service: Service) -> None:
    service.register.execute(_bob())

    with pytest.raises(UserAlreadyExistsError):
        service.register.execute(_bob(email="other@x.io"))


def test_register_duplicate_email(service: Service) -> None:
    service.register.execute(_bob())

    with pytest.raises(UserAlreadyExistsError):
        service.register.execute(_bob(username="bobby"))


def test_login_returns_pair_and_stores_refresh(service: Service, store, codec) -> None:
    user_id = service.register.execute(_bob())

    pair = service.login.execute("bob", "pw123456")

    assert codec.validate(pair.access_token, TokenKind.ACCESS) == user_id
    assert codec.validate(pair.refresh_token, TokenKind.REFRESH) == user_id
    assert store.get(user_id) == pair.refresh_token


def test_second_login_supersedes_first_refresh(service: Service) -> None:
    service.register.execute(_bob())
    first = service.login.execute("bob", "pw123456")
    service.login.execute("bob", "pw123456")

    with pytest.raises(InvalidRefreshTokenError):
        service.refresh.execute(first.refresh_token)


def test_login_unknown_user_and_bad_password_are_indistinguishable(service: Service) -> None:
    service.register.execute(_bob())

    with pytest.raises(InvalidCredentialsError) as unknown:
        service.login.execute("nobody", "pw123456")
    with pytest.raises(InvalidCredentialsError) as wrong:
        service.login.execute("bob", "wrong-password")

    assert unknown.value.to_dict() == wrong.value.to_dict()


def test_login_locks_account_after_repeated_failures(store, hasher, codec) -> None:
    attempts = LoginAttemptsTracker(max_attempts=3, lockout_duration=60)
    service = Service(store, hasher, codec, attempts=attempts)
    service.register.execute(_bob())

    for _ in range(3):
        with pytest.raises(InvalidCredentialsError):
            service.login.execute("bob", "wrong-password", ip_address="10.0.0.1")

    with pytest.raises(AccountLockedError) as exc_info:
        service.login.execute("bob", "pw123456")
    assert exc_info.value.context["lockout_remaining_seconds"] > 0


def test_refresh_rotates_and_old_token_is_single_use(service: Service, store) -> None:
    user_id = service.register.execute(_bob())
    first = service.login.execute("bob", "pw123456")

    second = service.refresh.execute(first.refresh_token)

    assert second.refresh_token != first.refresh_token
    assert store.get(user_id) == second.refresh_token
    with pytest.raises(InvalidRefreshTokenError):
        service.refresh.execute(first.refresh_token)
    third = service.refresh.execute(second.refresh_token)
    assert third.refresh_token != second.refresh_token


def test_refresh_rejects_access_token(service: Service) -> None:
    service.register.execute(_bob())
    pair = service.login.execute("bob", "pw123456")

    with pytest.raises(InvalidRefreshTokenError):
        service.refresh.execute(pair.access_token)


def test_refresh_rejects_garbage(service: Service) -> None:
    with pytest.raises(InvalidRefreshTokenError):
        service.refresh.execute("not-a-token")


def test_concurrent_refresh_has_single_winner(service: Service) -> None:
    service.register.execute(_bob())
    pair = service.login.execute("bob", "pw123456")

    def attempt(_: int) -> bool:
        try:
            service.refresh.execute(pair.refresh_token)
        except InvalidRefreshTokenError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(attempt, range(8)))

    assert outcomes.count(True) == 1


def test_refresh_fails_when_rotation_is_lost(service: Service, store, monkeypatch) -> None:
    user_id = service.register.execute(_bob())
    pair = service.login.execute("bob", "pw123456")
    monkeypatch.setattr(store, "rotate", lambda user_id, current, new: False)

    with pytest.raises(InvalidRefreshTokenError):
        service.refresh.execute(pair.refresh_token)
    assert store.get(user_id) == pair.refresh_token


def test_logout_invalidates_refresh(service: Service, store) -> None:
    user_id = service.register.execute(_bob())
    pair = service.login.execute("bob", "pw123456")

    assert service.logout.execute(pair.access_token) == user_id

    assert store.get(user_id) is None
    with pytest.raises(InvalidRefreshTokenError):
        service.refresh.execute(pair.refresh_token)


def test_logout_rejects_refresh_token(service: Service) -> None:
    service.register.execute(_bob())
    pair = service.login.execute("bob", "pw123456")

    with pytest.raises(UnauthorizedError):
        service.logout.execute(pair.refresh_token)


def test_identify_returns_user_id(service: Service) -> None:
    user_id = service.register.execute(_bob())
    pair = service.login.execute("bob", "pw123456")

    assert service.identify.execute(pair.access_token) == user_id
    with pytest.raises(UnauthorizedError):
        service.identify.execute(pair.refresh_token)


def test_profile_carries_no_credentials(service: Service) -> None:
    user_id = service.register.execute(_bob())
    pair = service.login.execute("bob", "pw123456")

    profile = service.profile.execute(pair.access_token)

    assert profile.id == user_id
    assert profile.username == "bob"
    assert profile.email == "bob@x.io"
    names = {f.name for f in fields(profile)}
    assert "password_hash" not in names
    assert "refresh_token" not in names


def test_profile_for_deleted_user_is_unauthorized(service: Service, codec) -> None:
    token = codec.issue("ghost", TokenKind.ACCESS)

    with pytest.raises(UnauthorizedError):
        service.profile.execute(token)
