# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass, field
from datetime import datetime

from itsdangerous import BadData, URLSafeSerializer
from werkzeug.http import dump_cookie, parse_cookie

from loginflow.domain.users.exceptions import MalformedSessionCookieError
from loginflow.domain.users.repositories import SessionCookieCodec
from loginflow.shared.config import AppConfig
from loginflow.shared.logging import logger

_SESSION_KEY = "sid"


@dataclass(slots=True, frozen=True)
class SessionCookieSettings:
    secret_key: str = field(repr=False)
    name: str = "__session"
    salt: str = "loginflow.session.v1"
    secure: bool = False
    samesite: str = "Lax"
    path: str = "/"

    def __post_init__(self) -> None:
        if not self.secret_key:
            raise ValueError("secret_key must not be empty")

    @classmethod
    def from_config(cls, config: AppConfig) -> SessionCookieSettings:
        return cls(
            secret_key=config.secret_key,
            name=config.session.cookie_name,
            salt=config.session.signing_salt,
            secure=config.use_secure_cookies(),
            samesite=config.security.cookie_samesite,
        )


class SignedSessionCookieCodec(SessionCookieCodec):
    """Signs session ids into ``Set-Cookie`` values and reads them back.

    The ``Expires`` attribute is written only when the caller passes an
    expiry; otherwise the cookie is dropped when the browser closes.
    """

    def __init__(self, settings: SessionCookieSettings) -> None:
        self._settings = settings
        self._serializer = URLSafeSerializer(
            settings.secret_key,
            salt=settings.salt,
            signer_kwargs={"digest_method": hashlib.sha256},
        )

    @property
    def cookie_name(self) -> str:
        return self._settings.name

    def encode(self, session_id: str, expires_at: datetime | None) -> str:
        if not session_id:
            raise ValueError("session_id must not be empty")
        token = self._serializer.dumps({_SESSION_KEY: session_id})
        return self._dump(token, expires=expires_at)

    def decode(self, cookie_header: str | None) -> str | None:
        if not cookie_header:
            return None
        token = parse_cookie(cookie_header).get(self._settings.name)
        if not token:
            return None
        try:
            return self.loads(token)
        except MalformedSessionCookieError:
            logger.debug("session_cookie: rejected malformed or tampered cookie")
            return None

    def loads(self, token: str) -> str:
        """Strict variant of :meth:`decode` for a bare cookie value."""
        try:
            payload = self._serializer.loads(token)
        except BadData as exc:
            raise MalformedSessionCookieError() from exc

        session_id = payload.get(_SESSION_KEY) if isinstance(payload, dict) else None
        if not isinstance(session_id, str) or not session_id:
            raise MalformedSessionCookieError()

        # base64 tolerates non-canonical trailing bits; only the exact token we issue is valid
        canonical = self._serializer.dumps({_SESSION_KEY: session_id})
        if not hmac.compare_digest(canonical, token):
            raise MalformedSessionCookieError()
        return session_id

    def clear(self) -> str:
        return self._dump("", expires=0, max_age=0)

    def _dump(
        self,
        value: str,
        *,
        expires: datetime | int | None,
        max_age: int | None = None,
    ) -> str:
        return dump_cookie(
            self._settings.name,
            value,
            max_age=max_age,
            expires=expires,
            path=self._settings.path,
            secure=self._settings.secure,
            httponly=True,
            samesite=self._settings.samesite,
        )
