# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine

from postboard.application.services.password_hashing import Argon2PasswordHasher
from postboard.application.services.reset_tokens import ResetTokenStore
from postboard.application.use_cases.users import (
    CurrentUserUseCase,
    ForgotPasswordUseCase,
    GetUserUseCase,
    LoginUserUseCase,
    LogoutUserUseCase,
    RegisterUserUseCase,
    ResetPasswordUseCase,
)
from postboard.domain.users.repositories import (
    EmailSender,
    KeyValueCache,
    PasswordHasher,
    UserRepository,
)
from postboard.domain.users.validators import PasswordPolicy
from postboard.infrastructure.cache import InMemoryTTLCache
from postboard.infrastructure.db import (
    SessionFactory,
    build_engine,
    build_session_factory,
)
from postboard.infrastructure.mail import build_email_sender
from postboard.infrastructure.redis_cache import RedisCache
from postboard.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from postboard.infrastructure.sessions import CacheSessionStore
from postboard.interfaces.http.controllers.auth_controller import AuthController
from postboard.interfaces.http.controllers.users_controller import UsersController
from postboard.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        engine: Engine | None = None,
        cache: KeyValueCache | None = None,
        email_sender: EmailSender | None = None,
        password_hasher: PasswordHasher | None = None,
    ) -> None:
        self.config = config or load_config()
        self._engine = engine
        self._cache = cache
        self._email_sender = email_sender
        self._password_hasher = password_hasher

    # Infrastructure

    @cached_property
    def engine(self) -> Engine:
        return self._engine or build_engine(self.config.database)

    @cached_property
    def session_factory(self) -> SessionFactory:
        return build_session_factory(self.engine)

    @cached_property
    def cache(self) -> KeyValueCache:
        if self._cache is not None:
            return self._cache
        if self.config.cache.redis_url:
            return RedisCache.from_config(self.config.cache)
        return InMemoryTTLCache()

    @cached_property
    def email_sender(self) -> EmailSender:
        return self._email_sender or build_email_sender(self.config.mail)

    @cached_property
    def password_hasher(self) -> PasswordHasher:
        return self._password_hasher or Argon2PasswordHasher()

    @cached_property
    def password_policy(self) -> PasswordPolicy:
        auth = self.config.auth
        return PasswordPolicy(
            min_length=auth.password_min_length,
            max_length=auth.password_max_length,
            require_letter=auth.password_require_letter,
            require_digit=auth.password_require_digit,
        )

    @cached_property
    def user_repository(self) -> UserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def reset_token_store(self) -> ResetTokenStore:
        return ResetTokenStore(
            self.cache,
            prefix=self.config.cache.reset_token_prefix,
            ttl_seconds=self.config.auth.reset_token_ttl,
        )

    @cached_property
    def session_store(self) -> CacheSessionStore:
        return CacheSessionStore(
            self.cache,
            prefix=self.config.cache.session_prefix,
            ttl_seconds=self.config.auth.session_ttl,
        )

    # Use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            password_policy=self.password_policy,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            reveal_account_existence=self.config.auth.reveal_account_existence,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase()

    @cached_property
    def forgot_password_use_case(self) -> ForgotPasswordUseCase:
        return ForgotPasswordUseCase(
            users=self.user_repository,
            reset_tokens=self.reset_token_store,
            email_sender=self.email_sender,
            frontend_url=self.config.frontend_url,
            reveal_account_existence=self.config.auth.reveal_account_existence,
        )

    @cached_property
    def reset_password_use_case(self) -> ResetPasswordUseCase:
        return ResetPasswordUseCase(
            users=self.user_repository,
            reset_tokens=self.reset_token_store,
            password_hasher=self.password_hasher,
            password_policy=self.password_policy,
        )

    @cached_property
    def current_user_use_case(self) -> CurrentUserUseCase:
        return CurrentUserUseCase(users=self.user_repository)

    @cached_property
    def get_user_use_case(self) -> GetUserUseCase:
        return GetUserUseCase(users=self.user_repository)

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            forgot_password_use_case=self.forgot_password_use_case,
            reset_password_use_case=self.reset_password_use_case,
            current_user_use_case=self.current_user_use_case,
            session_store=self.session_store,
            security=self.config.security,
            cookie_name=self.config.auth.session_cookie_name,
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(get_user_use_case=self.get_user_use_case)
