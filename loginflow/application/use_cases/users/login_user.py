# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from loginflow.application.services.credential_store import CredentialStore
from loginflow.domain.users.entities import Credential, Session
from loginflow.domain.users.exceptions import InvalidCredentialsError
from loginflow.domain.users.repositories import SessionCookieCodec, SessionRepository
from loginflow.shared.logging import logger


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True, frozen=True)
class LoginAccepted:
    session: Session
    set_cookie: str


@dataclass(slots=True, frozen=True)
class LoginRejected:
    error: InvalidCredentialsError


LoginResult = LoginAccepted | LoginRejected


class LoginUserUseCase:
    """Turns verified credentials into a persisted session and its cookie.

    The session deadline is computed once here and read back from the
    stored session when the cookie is encoded. Without remember-me there is no server-side deadline and
    the cookie lasts for the browser session.
    """

    def __init__(
        self,
        *,
        credentials: CredentialStore,
        sessions: SessionRepository,
        cookies: SessionCookieCodec,
        session_ttl: timedelta,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if session_ttl <= timedelta(0):
            raise ValueError("session_ttl must be positive")
        self._credentials = credentials
        self._sessions = sessions
        self._cookies = cookies
        self._session_ttl = session_ttl
        self._clock = clock

    def execute(self, credential: Credential, remember_me: bool = False) -> LoginResult:
        user = self._credentials.verify_credential(credential)
        if user is None:
            return LoginRejected(error=InvalidCredentialsError())

        expires_at = self._clock() + self._session_ttl if remember_me else None
        session = self._sessions.create(user.id, expires_at)
        set_cookie = self._cookies.encode(session.id, session.expires_at)

        logger.info(f"auth.login: session created user_id={user.id} remember_me={remember_me}")
        return LoginAccepted(session=session, set_cookie=set_cookie)
