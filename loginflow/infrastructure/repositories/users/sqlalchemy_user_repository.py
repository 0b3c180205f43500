# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as OrmSession

from loginflow.domain.exceptions import InvariantViolation
from loginflow.domain.users.entities import Session as DomainSession
from loginflow.domain.users.entities import User as DomainUser
from loginflow.domain.users.exceptions import UserAlreadyExistsError
from loginflow.domain.users.repositories import SessionRepository, UserRepository
from loginflow.infrastructure.db.models import LoginSession, User
from loginflow.infrastructure.unit_of_work import unit_of_work_scope
from loginflow.shared.logging import logger

SESSION_ID_BYTES = 32
MAX_CREATE_ATTEMPTS = 3


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _to_domain_user(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=_as_utc(row.created_at),
    )


def _to_domain_session(row: LoginSession) -> DomainSession:
    created_at = _as_utc(row.created_at)
    if created_at is None:
        raise InvariantViolation("session row has no created_at", field="created_at")
    return DomainSession(
        id=row.id,
        user_id=row.user_id,
        created_at=created_at,
        expires_at=_as_utc(row.expires_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], OrmSession]) -> None:
        self._session_factory = session_factory

    def find_by_username(self, username: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, store="users") as session:
            row = session.scalars(select(User).where(User.username == username)).first()
            return _to_domain_user(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, store="users") as session:
            row = session.get(User, user_id)
            return _to_domain_user(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory, store="users") as session:
                row = User(
                    username=user.username,
                    password_hash=user.password_hash,
                    created_at=user.created_at or _utcnow(),
                )
                session.add(row)
                session.flush()
                return _to_domain_user(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc


class SqlAlchemySessionRepository(SessionRepository):
    """Session records keyed by a random URL-safe identifier.

    Expiry is enforced lazily in :meth:`get`; expired rows stay in the table
    until :meth:`purge_expired` removes them.
    """

    def __init__(
        self,
        session_factory: Callable[[], OrmSession],
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock
        self._id_factory = id_factory or (lambda: secrets.token_urlsafe(SESSION_ID_BYTES))

    def create(self, user_id: int, expires_at: datetime | None) -> DomainSession:
        created_at = self._clock()
        for attempt in range(1, MAX_CREATE_ATTEMPTS + 1):
            # validates expires_at > created_at before touching the store
            candidate = DomainSession(
                id=self._id_factory(),
                user_id=user_id,
                created_at=created_at,
                expires_at=expires_at,
            )
            try:
                with unit_of_work_scope(self._session_factory, store="sessions") as session:
                    session.add(
                        LoginSession(
                            id=candidate.id,
                            user_id=candidate.user_id,
                            created_at=candidate.created_at,
                            expires_at=candidate.expires_at,
                        )
                    )
                    session.flush()
            except IntegrityError:
                logger.warning(f"sessions.create: id collision, attempt {attempt}")
                continue
            return candidate
        raise RuntimeError("could not allocate a unique session id")

    def get(self, session_id: str) -> DomainSession | None:
        if not session_id:
            return None
        with unit_of_work_scope(self._session_factory, store="sessions") as session:
            row = session.get(LoginSession, session_id)
            if row is None:
                return None
            found = _to_domain_session(row)
        if found.is_expired(self._clock()):
            return None
        return found

    def delete(self, session_id: str) -> None:
        if not session_id:
            return
        with unit_of_work_scope(self._session_factory, store="sessions") as session:
            session.execute(delete(LoginSession).where(LoginSession.id == session_id))

    def purge_expired(self, now: datetime | None = None) -> int:
        cutoff = now or self._clock()
        with unit_of_work_scope(self._session_factory, store="sessions") as session:
            result = session.execute(
                delete(LoginSession).where(
                    LoginSession.expires_at.is_not(None),
                    LoginSession.expires_at <= cutoff,
                )
            )
            removed = result.rowcount or 0
        logger.info(f"sessions.purge_expired: removed {removed} rows")
        return removed
