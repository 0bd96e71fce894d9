# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property
from typing import Any, Callable

from nautilus.application.services.authentication import AuthenticationService
from nautilus.application.services.password_hashing import BcryptPasswordHasher
from nautilus.application.services.token_codec import JwtTokenCodec
from nautilus.application.use_cases.admin.revoke_user_sessions import \
    RevokeUserSessionsUseCase
from nautilus.application.use_cases.admin.sweep_sessions import \
    SweepExpiredSessionsUseCase
from nautilus.application.use_cases.admin.update_user_access import \
    UpdateUserAccessUseCase
from nautilus.application.use_cases.users.get_current_user import \
    GetCurrentUserUseCase
from nautilus.application.use_cases.users.login_user import LoginUserUseCase
from nautilus.application.use_cases.users.logout_user import (
    LogoutEverywhereUseCase, LogoutUserUseCase)
from nautilus.infrastructure.db import SessionLocal
from nautilus.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemySessionRepository, SqlAlchemyUserRepository)
from nautilus.interfaces.http.auth import RequestAuthenticator
from nautilus.interfaces.http.controllers.admin_controller import \
    AdminController
from nautilus.interfaces.http.controllers.auth_controller import AuthController
from nautilus.interfaces.http.controllers.misc_controller import MiscController
from nautilus.interfaces.http.cookies import CookieTransport
from nautilus.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        session_factory: Callable[[], Any] | None = None,
    ) -> None:
        self.config = config or load_config()
        self._session_factory = session_factory or SessionLocal

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher(rounds=self.config.auth.bcrypt_rounds)

    @cached_property
    def token_codec(self) -> JwtTokenCodec:
        return JwtTokenCodec(self.config.auth)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self._session_factory)

    @cached_property
    def session_repository(self) -> SqlAlchemySessionRepository:
        return SqlAlchemySessionRepository(
            self._session_factory,
            auth=self.config.auth,
            resilience=self.config.resilience,
        )

    @cached_property
    def authentication_service(self) -> AuthenticationService:
        return AuthenticationService(codec=self.token_codec, sessions=self.session_repository)

    @cached_property
    def cookie_transport(self) -> CookieTransport:
        return CookieTransport(
            name=self.config.auth.cookie_name,
            max_age=self.config.auth.token_ttl_seconds,
            secure=self.config.cookie_secure(),
            samesite=self.config.security.cookie_samesite,
        )

    @cached_property
    def request_authenticator(self) -> RequestAuthenticator:
        return RequestAuthenticator(
            service=self.authentication_service,
            cookies=self.cookie_transport,
        )

    # User use cases

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            sessions=self.session_repository,
            password_hasher=self.password_hasher,
            codec=self.token_codec,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_repository)

    @cached_property
    def logout_everywhere_use_case(self) -> LogoutEverywhereUseCase:
        return LogoutEverywhereUseCase(sessions=self.session_repository)

    @cached_property
    def get_current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(users=self.user_repository)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            logout_everywhere_use_case=self.logout_everywhere_use_case,
            get_current_user_use_case=self.get_current_user_use_case,
            cookies=self.cookie_transport,
        )

    # Admin use cases

    @cached_property
    def sweep_sessions_use_case(self) -> SweepExpiredSessionsUseCase:
        return SweepExpiredSessionsUseCase(sessions=self.session_repository)

    @cached_property
    def revoke_user_sessions_use_case(self) -> RevokeUserSessionsUseCase:
        return RevokeUserSessionsUseCase(
            user_repo=self.user_repository,
            sessions=self.session_repository,
        )

    @cached_property
    def update_user_access_use_case(self) -> UpdateUserAccessUseCase:
        return UpdateUserAccessUseCase(
            user_repo=self.user_repository,
            sessions=self.session_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def admin_controller(self) -> AdminController:
        return AdminController(
            sweep_sessions=self.sweep_sessions_use_case,
            revoke_user_sessions=self.revoke_user_sessions_use_case,
            update_user_access=self.update_user_access_use_case,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController()


container = Container()
