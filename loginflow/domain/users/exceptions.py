# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from loginflow.shared.errors.base import DomainError

INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.BAD_REQUEST

    @property
    def message(self) -> str:
        return INVALID_CREDENTIALS_MESSAGE


class MalformedSessionCookieError(DomainError):
    code = "malformed_session_cookie"
    status = HTTPStatus.BAD_REQUEST
