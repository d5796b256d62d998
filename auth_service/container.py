"""Application dependency container."""

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from auth_service.application.services.password_hashing import WerkzeugPasswordHasher
from auth_service.application.services.tokens import JwtTokenCodec, TokenSettings
from auth_service.application.use_cases.users.identify_user import (
    GetProfileUseCase,
    IdentifyUserUseCase,
)
from auth_service.application.use_cases.users.login_user import LoginUserUseCase
from auth_service.application.use_cases.users.logout_user import LogoutUserUseCase
from auth_service.application.use_cases.users.refresh_tokens import RefreshTokensUseCase
from auth_service.application.use_cases.users.register_user import RegisterUserUseCase
from auth_service.infrastructure.auth.login_attempts import LoginAttemptsTracker
from auth_service.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyRefreshTokenRepository,
    SqlAlchemyUserRepository,
)
from auth_service.interfaces.http.controllers.auth_controller import AuthController
from auth_service.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or load_config()

    @cached_property
    def token_settings(self) -> TokenSettings:
        return TokenSettings(
            access_secret=self._config.jwt_access_secret,
            refresh_secret=self._config.jwt_refresh_secret,
            algorithm=self._config.jwt_algorithm,
            issuer=self._config.jwt_issuer,
            access_ttl=timedelta(minutes=self._config.access_token_ttl_minutes),
            refresh_ttl=timedelta(days=self._config.refresh_token_ttl_days),
        )

    @cached_property
    def token_codec(self) -> JwtTokenCodec:
        return JwtTokenCodec(self.token_settings)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def login_attempts(self) -> LoginAttemptsTracker:
        return LoginAttemptsTracker(
            max_attempts=self._config.login_max_attempts,
            lockout_duration=self._config.login_lockout_seconds,
        )

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository()

    @cached_property
    def refresh_token_repository(self) -> SqlAlchemyRefreshTokenRepository:
        return SqlAlchemyRefreshTokenRepository()

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            refresh_tokens=self.refresh_token_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_codec,
            attempts=self.login_attempts,
        )

    @cached_property
    def refresh_tokens_use_case(self) -> RefreshTokensUseCase:
        return RefreshTokensUseCase(
            refresh_tokens=self.refresh_token_repository,
            tokens=self.token_codec,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(
            refresh_tokens=self.refresh_token_repository,
            tokens=self.token_codec,
        )

    @cached_property
    def identify_user_use_case(self) -> IdentifyUserUseCase:
        return IdentifyUserUseCase(tokens=self.token_codec)

    @cached_property
    def get_profile_use_case(self) -> GetProfileUseCase:
        return GetProfileUseCase(users=self.user_repository, tokens=self.token_codec)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            refresh_use_case=self.refresh_tokens_use_case,
            logout_use_case=self.logout_user_use_case,
            profile_use_case=self.get_profile_use_case,
            identify_use_case=self.identify_user_use_case,
        )
