"""Use-case for ending a browser session."""

from __future__ import annotations

from loginflow.domain.users.repositories import SessionCookieCodec, SessionRepository
from loginflow.shared.logging import logger


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionRepository, cookies: SessionCookieCodec) -> None:
        self._sessions = sessions
        self._cookies = cookies

    def execute(self, cookie_header: str | None) -> str:
        """Delete the referenced session and return a clearing Set-Cookie value."""
        session_id = self._cookies.decode(cookie_header)
        if session_id:
            self._sessions.delete(session_id)
            logger.info("auth.logout: session deleted")
        return self._cookies.clear()
