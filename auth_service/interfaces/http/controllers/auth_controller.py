# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import TypeVar

from flask import Blueprint, Response, g, jsonify, request
from pydantic import BaseModel, ValidationError

from auth_service.application.use_cases.users.identify_user import (
    GetProfileUseCase,
    IdentifyUserUseCase,
)
from auth_service.application.use_cases.users.login_user import LoginUserUseCase
from auth_service.application.use_cases.users.logout_user import LogoutUserUseCase
from auth_service.application.use_cases.users.refresh_tokens import RefreshTokensUseCase
from auth_service.application.use_cases.users.register_user import RegisterUserUseCase
from auth_service.domain.users.exceptions import (
    InvalidRefreshTokenError,
    UserAlreadyExistsError,
)
from auth_service.infrastructure.audit import AuditAction, audit_log
from auth_service.interfaces.http.auth import auth_required, client_ip
from auth_service.interfaces.http.dto.auth import (
    LoginRequestDTO,
    MessageDTO,
    ProfileDTO,
    RefreshRequestDTO,
    RegisterRequestDTO,
    RegisterResponseDTO,
    TokenPairDTO,
)
from auth_service.shared.errors.base import DomainError
from auth_service.shared.errors.validation import raise_validation_error
from auth_service.shared.middleware.rate_limit import rate_limit


T = TypeVar("T", bound=BaseModel)


def _parse(dto_type: type[T]) -> T:
    try:
        return dto_type.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        refresh_use_case: RefreshTokensUseCase,
        logout_use_case: LogoutUserUseCase,
        profile_use_case: GetProfileUseCase,
        identify_use_case: IdentifyUserUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._refresh_use_case = refresh_use_case
        self._logout_use_case = logout_use_case
        self._profile_use_case = profile_use_case
        self._identify_use_case = identify_use_case

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        dto = _parse(RegisterRequestDTO)

        try:
            user_id = self._register_use_case.execute(dto.to_registration())
        except UserAlreadyExistsError:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=client_ip(),
                details={"username": dto.username},
                success=False,
            )
            raise

        audit_log(
            AuditAction.REGISTER,
            user_id=user_id,
            ip_address=client_ip(),
            details={"username": dto.username},
        )
        return jsonify(RegisterResponseDTO(user_id=user_id).model_dump()), 201

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        dto = _parse(LoginRequestDTO)
        ip_address = client_ip()

        try:
            pair = self._login_use_case.execute(dto.username, dto.password, ip_address)
        except DomainError as exc:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username, "error": exc.code},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            ip_address=ip_address,
            details={"username": dto.username},
        )
        return jsonify(TokenPairDTO.from_pair(pair).model_dump()), 200

    @rate_limit(limit=30, window_seconds=60.0)
    def refresh(self) -> tuple[Response, int]:
        dto = _parse(RefreshRequestDTO)

        try:
            pair = self._refresh_use_case.execute(dto.refresh_token)
        except InvalidRefreshTokenError:
            audit_log(AuditAction.TOKEN_REFRESH_FAILED, ip_address=client_ip(), success=False)
            raise

        audit_log(AuditAction.TOKEN_REFRESH, ip_address=client_ip())
        return jsonify(TokenPairDTO.from_pair(pair).model_dump()), 200

    def logout(self) -> tuple[Response, int]:
        user_id = self._logout_use_case.execute(g.access_token)
        audit_log(AuditAction.LOGOUT, user_id=user_id, ip_address=client_ip())
        return jsonify(MessageDTO(message="logged out").model_dump()), 200

    def me(self) -> tuple[Response, int]:
        profile = self._profile_use_case.execute(g.access_token)
        return jsonify(ProfileDTO.from_profile(profile).model_dump(mode="json")), 200

    def as_blueprint(self) -> Blueprint:
        protected = auth_required(self._identify_use_case)

        bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/refresh", view_func=self.refresh, methods=["POST"])
        bp.add_url_rule("/logout", view_func=protected(self.logout), methods=["POST"])
        bp.add_url_rule("/me", view_func=protected(self.me), methods=["GET"])
        return bp
