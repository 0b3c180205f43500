# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from loginflow.application.services.credential_store import CredentialStore
from loginflow.application.services.password_hashing import WerkzeugPasswordHasher
from loginflow.application.use_cases.users.current_session import CurrentSessionUseCase
from loginflow.application.use_cases.users.login_user import LoginUserUseCase
from loginflow.application.use_cases.users.logout_user import LogoutUserUseCase
from loginflow.application.use_cases.users.register_user import RegisterUserUseCase
from loginflow.application.use_cases.users.require_anonymous import RequireAnonymousUseCase
from loginflow.infrastructure.cookies import SessionCookieSettings, SignedSessionCookieCodec
from loginflow.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemySessionRepository,
    SqlAlchemyUserRepository,
)
from loginflow.interfaces.http.controllers.auth_controller import AuthController
from loginflow.interfaces.http.controllers.misc_controller import MiscController
from loginflow.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        engine: Engine | None = None,
        session_factory: Callable[[], Session] | None = None,
    ) -> None:
        self._config = config
        self._engine = engine
        self._session_factory = session_factory

    @cached_property
    def config(self) -> AppConfig:
        return self._config or load_config()

    @cached_property
    def engine(self) -> Engine:
        if self._engine is not None:
            return self._engine
        from loginflow.infrastructure.db import ENGINE

        return ENGINE

    @cached_property
    def session_factory(self) -> Callable[[], Session]:
        if self._session_factory is not None:
            return self._session_factory
        from loginflow.infrastructure.db import SessionLocal

        return SessionLocal

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def session_repository(self) -> SqlAlchemySessionRepository:
        return SqlAlchemySessionRepository(self.session_factory)

    @cached_property
    def cookie_codec(self) -> SignedSessionCookieCodec:
        return SignedSessionCookieCodec(SessionCookieSettings.from_config(self.config))

    @cached_property
    def credential_store(self) -> CredentialStore:
        return CredentialStore(users=self.user_repository, password_hasher=self.password_hasher)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            credentials=self.credential_store,
            sessions=self.session_repository,
            cookies=self.cookie_codec,
            session_ttl=self.config.session.expiration,
        )

    @cached_property
    def current_session_use_case(self) -> CurrentSessionUseCase:
        return CurrentSessionUseCase(sessions=self.session_repository, cookies=self.cookie_codec)

    @cached_property
    def require_anonymous_use_case(self) -> RequireAnonymousUseCase:
        return RequireAnonymousUseCase(current_session=self.current_session_use_case)

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_repository, cookies=self.cookie_codec)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            require_anonymous=self.require_anonymous_use_case,
            home_route=self.config.session.home_route,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)
