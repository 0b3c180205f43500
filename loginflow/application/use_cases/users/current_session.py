# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Resolve the live session referenced by a request's Cookie header."""

from __future__ import annotations

from loginflow.domain.users.entities import Session
from loginflow.domain.users.repositories import SessionCookieCodec, SessionRepository


class CurrentSessionUseCase:
    def __init__(self, *, sessions: SessionRepository, cookies: SessionCookieCodec) -> None:
        self._sessions = sessions
        self._cookies = cookies

    def execute(self, cookie_header: str | None) -> Session | None:
        session_id = self._cookies.decode(cookie_header)
        if session_id is None:
            return None
        return self._sessions.get(session_id)
