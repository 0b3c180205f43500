# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services import CredentialStore, WerkzeugPasswordHasher
from .use_cases.users.current_session import CurrentSessionUseCase
from .use_cases.users.login_user import (
    LoginAccepted,
    LoginRejected,
    LoginResult,
    LoginUserUseCase,
)
from .use_cases.users.logout_user import LogoutUserUseCase
from .use_cases.users.register_user import RegisterUserUseCase
from .use_cases.users.require_anonymous import GuardDecision, RequireAnonymousUseCase

__all__ = [
    "CredentialStore",
    "CurrentSessionUseCase",
    "GuardDecision",
    "LoginAccepted",
    "LoginRejected",
    "LoginResult",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "RegisterUserUseCase",
    "RequireAnonymousUseCase",
    "WerkzeugPasswordHasher",
]
