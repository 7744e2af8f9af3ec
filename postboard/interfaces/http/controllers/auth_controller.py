# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import TypeVar

from flask import Blueprint, Response, g, jsonify, request
from pydantic import BaseModel, ValidationError

from postboard.application.use_cases.users import (
    CurrentUserUseCase,
    ForgotPasswordUseCase,
    LoginUserUseCase,
    LogoutUserUseCase,
    RegisterUserUseCase,
    ResetPasswordUseCase,
    UserResult,
)
from postboard.infrastructure.sessions import CacheSessionHolder, CacheSessionStore
from postboard.interfaces.http.dto.auth import (
    ForgotPasswordRequestDTO,
    LoginRequestDTO,
    RegisterRequestDTO,
    ResetPasswordRequestDTO,
    errors_payload,
    user_payload,
)
from postboard.shared.config import SecurityConfig
from postboard.shared.errors.validation import raise_validation_error
from postboard.shared.logging import logger
from postboard.shared.middleware.rate_limit import InMemoryRateLimiter, rate_limit
from postboard.utils.asyncio_utils import run_async

DTO = TypeVar("DTO", bound=BaseModel)


def _parse(model: type[DTO]) -> DTO:
    try:
        return model.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        forgot_password_use_case: ForgotPasswordUseCase,
        reset_password_use_case: ResetPasswordUseCase,
        current_user_use_case: CurrentUserUseCase,
        session_store: CacheSessionStore,
        security: SecurityConfig,
        cookie_name: str = "qid",
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._forgot_password_use_case = forgot_password_use_case
        self._reset_password_use_case = reset_password_use_case
        self._current_user_use_case = current_user_use_case
        self._session_store = session_store
        self._security = security
        self._cookie_name = cookie_name
        self._limiters = self._build_limiters(security)

    @staticmethod
    def _build_limiters(security: SecurityConfig) -> dict[str, InMemoryRateLimiter | None]:
        endpoints = ("register", "login", "forgot_password", "reset_password")
        if not security.enable_rate_limit:
            return dict.fromkeys(endpoints)
        strict = security.rate_limit_strict_requests
        regular = security.rate_limit_requests
        window = security.rate_limit_window
        return {
            "register": InMemoryRateLimiter(strict, window),
            "login": InMemoryRateLimiter(regular, window),
            "forgot_password": InMemoryRateLimiter(strict, window),
            "reset_password": InMemoryRateLimiter(regular, window),
        }

    def _open_session(self) -> CacheSessionHolder:
        return self._session_store.open(request.cookies.get(self._cookie_name))

    def _apply_session_cookie(self, response: Response, session: CacheSessionHolder) -> None:
        if session.destroyed or session.session_id is None:
            response.delete_cookie(
                self._cookie_name,
                httponly=True,
                samesite=self._security.cookie_samesite,
                secure=self._security.cookie_secure,
            )
        elif session.modified:
            response.set_cookie(
                self._cookie_name,
                session.session_id,
                httponly=True,
                samesite=self._security.cookie_samesite,
                secure=self._security.cookie_secure,
                max_age=self._session_store.ttl_seconds,
            )

    def _user_response(
        self, result: UserResult, session: CacheSessionHolder
    ) -> tuple[Response, int]:
        if not result.ok or result.user is None:
            return jsonify(errors_payload(result.errors)), 400

        g.user_id = result.user.id
        response = jsonify(user_payload(result.user))
        self._apply_session_cookie(response, session)
        return response, 200

    def register(self) -> tuple[Response, int]:
        dto = _parse(RegisterRequestDTO)
        session = self._open_session()
        result = run_async(
            self._register_use_case.execute(dto.username, dto.email, dto.password, session)
        )
        return self._user_response(result, session)

    def login(self) -> tuple[Response, int]:
        dto = _parse(LoginRequestDTO)
        session = self._open_session()
        result = run_async(
            self._login_use_case.execute(dto.username_or_email, dto.password, session)
        )
        return self._user_response(result, session)

    def logout(self) -> tuple[Response, int]:
        session = self._open_session()
        result = run_async(self._logout_use_case.execute(session))

        response = jsonify({"ok": result.ok})
        # The cookie goes either way; a failed destroy only leaves an orphaned key to expire.
        self._apply_session_cookie(response, session)
        return response, 200

    def forgot_password(self) -> tuple[Response, int]:
        dto = _parse(ForgotPasswordRequestDTO)
        result = run_async(self._forgot_password_use_case.execute(dto.email))
        if not result.ok:
            return jsonify(errors_payload(result.errors)), 400
        return jsonify({"ok": True}), 200

    def reset_password(self) -> tuple[Response, int]:
        dto = _parse(ResetPasswordRequestDTO)
        session = self._open_session()
        result = run_async(
            self._reset_password_use_case.execute(
                dto.new_password, dto.new_password_confirm, dto.token, session
            )
        )
        return self._user_response(result, session)

    def me(self) -> tuple[Response, int]:
        session = self._open_session()
        user = run_async(self._current_user_use_case.execute(session))
        if user is not None:
            g.user_id = user.id
        else:
            logger.debug("auth.me: anonymous")
        return jsonify(user_payload(user)), 200

    def as_blueprint(self) -> Blueprint:
        limited = {name: rate_limit(limiter) for name, limiter in self._limiters.items()}

        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule(
            "/register", view_func=limited["register"](self.register), methods=["POST"]
        )
        bp.add_url_rule("/login", view_func=limited["login"](self.login), methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["DELETE"])
        bp.add_url_rule(
            "/forgot-password",
            view_func=limited["forgot_password"](self.forgot_password),
            methods=["POST"],
        )
        bp.add_url_rule(
            "/reset-password",
            view_func=limited["reset_password"](self.reset_password),
            methods=["POST"],
        )
        bp.add_url_rule("/me", view_func=self.me, methods=["GET"])
        return bp
