from __future__ import annotations

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import secrets
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session as OrmSession
from sqlalchemy.orm import sessionmaker

from loginflow.application.services.credential_store import CredentialStore
from loginflow.domain.users.entities import Session, User
from loginflow.domain.users.repositories import PasswordHasher, SessionRepository, UserRepository
from loginflow.infrastructure.cookies import SessionCookieSettings, SignedSessionCookieCodec
from loginflow.infrastructure.db import build_engine, build_session_factory, init_db
from loginflow.shared.config import DatabaseConfig

T0 = datetime(2026, 10, 19, 12, 0, 0, tzinfo=UTC)


class FrozenClock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class DeterministicHasher(PasswordHasher):
    def __init__(self) -> None:
        self.verify_calls = 0
        self.hash_calls = 0

    def hash(self, password: str) -> str:
        self.hash_calls += 1
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        self.verify_calls += 1
        return hashed == f"hashed:{password}"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._seq = 1

    def find_by_username(self, username: str) -> User | None:
        return self._users.get(username)

    def find_by_id(self, user_id: int) -> User | None:
        return next((u for u in self._users.values() if u.id == user_id), None)

    def add(self, user: User) -> User:
        new_user = User(
            id=self._seq,
            username=user.username,
            password_hash=user.password_hash,
            created_at=user.created_at,
        )
        self._seq += 1
        self._users[new_user.username] = new_user
        return new_user


class InMemorySessionRepository(SessionRepository):
    def __init__(self, clock: FrozenClock) -> None:
        self.records: dict[str, Session] = {}
        self._clock = clock

    def create(self, user_id: int, expires_at: datetime | None) -> Session:
        session = Session(
            id=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=self._clock(),
            expires_at=expires_at,
        )
        self.records[session.id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        session = self.records.get(session_id)
        if session is None or session.is_expired(self._clock()):
            return None
        return session

    def delete(self, session_id: str) -> None:
        self.records.pop(session_id, None)


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def users(hasher: DeterministicHasher) -> InMemoryUserRepository:
    repo = InMemoryUserRepository()
    repo.add(User(id=0, username="alice", password_hash=hasher.hash("correct-horse")))
    return repo


@pytest.fixture()
def sessions(clock: FrozenClock) -> InMemorySessionRepository:
    return InMemorySessionRepository(clock)


@pytest.fixture()
def cookie_settings() -> SessionCookieSettings:
    return SessionCookieSettings(secret_key="test-secret-key")


@pytest.fixture()
def codec(cookie_settings: SessionCookieSettings) -> SignedSessionCookieCodec:
    return SignedSessionCookieCodec(cookie_settings)


@pytest.fixture()
def credential_store(
    users: InMemoryUserRepository, hasher: DeterministicHasher
) -> CredentialStore:
    return CredentialStore(users=users, password_hasher=hasher)


@pytest.fixture()
def sqlite_engine() -> Iterator[Engine]:
    engine = build_engine(DatabaseConfig(url="sqlite://"))
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(sqlite_engine: Engine) -> sessionmaker[OrmSession]:
    return build_session_factory(sqlite_engine)

