# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Entities of the login flow: credentials, users and sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from loginflow.domain.exceptions import InvariantViolation


@dataclass(slots=True, frozen=True)
class Credential:
    """A username/password pair as submitted; never persisted."""

    username: str
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.username:
            raise InvariantViolation("username must not be empty", field="username")
        if not self.password:
            raise InvariantViolation("password must not be empty", field="password")


@dataclass(slots=True, frozen=True)
class User:
    id: int
    username: str
    password_hash: str = field(repr=False)
    created_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class Session:
    """Server-side grant of authenticated access.

    ``expires_at`` of ``None`` means the session lives as long as the
    browser keeps its session cookie; no server-side deadline applies.
    """

    id: str
    user_id: int
    created_at: datetime
    expires_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.expires_at is not None and self.expires_at <= self.created_at:
            raise InvariantViolation(
                "expires_at must be later than created_at", field="expires_at"
            )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now
