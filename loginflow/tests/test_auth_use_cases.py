from __future__ import annotations

from datetime import timedelta

import pytest
from werkzeug.http import http_date

from loginflow.application.services.credential_store import CredentialStore
from loginflow.application.use_cases.users.current_session import CurrentSessionUseCase
from loginflow.application.use_cases.users.login_user import (
    LoginAccepted,
    LoginRejected,
    LoginUserUseCase,
)
from loginflow.application.use_cases.users.logout_user import LogoutUserUseCase
from loginflow.application.use_cases.users.register_user import RegisterUserUseCase
from loginflow.application.use_cases.users.require_anonymous import (
    GuardDecision,
    RequireAnonymousUseCase,
)
from loginflow.domain.users.entities import Credential
from loginflow.domain.users.exceptions import InvalidCredentialsError, UserAlreadyExistsError

SESSION_TTL = timedelta(days=30)


def _cookie_header(set_cookie: str) -> str:
    return set_cookie.split(";", 1)[0]


@pytest.fixture()
def login(credential_store, sessions, codec, clock) -> LoginUserUseCase:
    return LoginUserUseCase(
        credentials=credential_store,
        sessions=sessions,
        cookies=codec,
        session_ttl=SESSION_TTL,
        clock=clock,
    )


@pytest.fixture()
def guard(sessions, codec) -> RequireAnonymousUseCase:
    return RequireAnonymousUseCase(
        current_session=CurrentSessionUseCase(sessions=sessions, cookies=codec)
    )


def test_login_success_maps_cookie_to_users_session(login, users, sessions, codec) -> None:
    result = login.execute(Credential("alice", "correct-horse"))

    assert isinstance(result, LoginAccepted)
    session_id = codec.decode(_cookie_header(result.set_cookie))
    assert session_id == result.session.id
    stored = sessions.get(session_id)
    assert stored is not None
    assert stored.user_id == users.find_by_username("alice").id


def test_login_without_remember_me_is_browser_session(login, sessions) -> None:
    result = login.execute(Credential("alice", "correct-horse"), remember_me=False)

    assert isinstance(result, LoginAccepted)
    assert result.session.expires_at is None
    assert "Expires=" not in result.set_cookie
    assert "Max-Age" not in result.set_cookie
    assert len(sessions.records) == 1


def test_login_with_remember_me_sets_matching_expiry(login, clock) -> None:
    result = login.execute(Credential("alice", "correct-horse"), remember_me=True)

    assert isinstance(result, LoginAccepted)
    assert result.session.expires_at == clock() + SESSION_TTL
    assert f"Expires={http_date(result.session.expires_at)}" in result.set_cookie


def test_login_wrong_password_creates_no_session(login, sessions) -> None:
    result = login.execute(Credential("alice", "wrong"))

    assert isinstance(result, LoginRejected)
    assert isinstance(result.error, InvalidCredentialsError)
    assert result.error.message == "Invalid username or password"
    assert sessions.records == {}


def test_login_unknown_user_is_indistinguishable(login, sessions, hasher) -> None:
    unknown = login.execute(Credential("mallory", "correct-horse"))
    wrong = login.execute(Credential("alice", "nope-nope"))

    assert isinstance(unknown, LoginRejected)
    assert isinstance(wrong, LoginRejected)
    assert unknown.error.code == wrong.error.code
    assert unknown.error.message == wrong.error.message
    # the unknown user still paid for a hash comparison
    assert hasher.verify_calls == 2
    assert sessions.records == {}


def test_login_rejects_non_positive_ttl(credential_store, sessions, codec) -> None:
    with pytest.raises(ValueError):
        LoginUserUseCase(
            credentials=credential_store,
            sessions=sessions,
            cookies=codec,
            session_ttl=timedelta(0),
        )


def test_login_propagates_store_failures(credential_store, codec) -> None:
    class BrokenSessions:
        def create(self, user_id, expires_at):
            raise RuntimeError("store down")

    use_case = LoginUserUseCase(
        credentials=credential_store,
        sessions=BrokenSessions(),
        cookies=codec,
        session_ttl=SESSION_TTL,
    )

    with pytest.raises(RuntimeError):
        use_case.execute(Credential("alice", "correct-horse"))


def test_guard_redirects_live_session(login, guard) -> None:
    result = login.execute(Credential("alice", "correct-horse"))
    assert isinstance(result, LoginAccepted)

    assert guard.execute(_cookie_header(result.set_cookie)) is GuardDecision.REDIRECT


@pytest.mark.parametrize("header", [None, "", "theme=dark", "__session=", "__session=garbage"])
def test_guard_proceeds_without_usable_cookie(guard, header) -> None:
    assert guard.execute(header) is GuardDecision.PROCEED


def test_guard_proceeds_for_expired_session(login, guard, clock, sessions) -> None:
    result = login.execute(Credential("alice", "correct-horse"), remember_me=True)
    assert isinstance(result, LoginAccepted)

    clock.advance(SESSION_TTL + timedelta(seconds=1))

    assert guard.execute(_cookie_header(result.set_cookie)) is GuardDecision.PROCEED
    # lazy expiration leaves the record in place
    assert result.session.id in sessions.records


def test_guard_proceeds_for_deleted_session(login, guard, sessions) -> None:
    result = login.execute(Credential("alice", "correct-horse"))
    assert isinstance(result, LoginAccepted)
    sessions.delete(result.session.id)

    assert guard.execute(_cookie_header(result.set_cookie)) is GuardDecision.PROCEED


def test_guard_does_not_mutate_store(login, guard, sessions) -> None:
    result = login.execute(Credential("alice", "correct-horse"))
    assert isinstance(result, LoginAccepted)
    before = dict(sessions.records)

    guard.execute(_cookie_header(result.set_cookie))
    guard.execute("__session=garbage")

    assert sessions.records == before


def test_logout_deletes_session_and_clears_cookie(login, sessions, codec) -> None:
    result = login.execute(Credential("alice", "correct-horse"))
    assert isinstance(result, LoginAccepted)
    logout = LogoutUserUseCase(sessions=sessions, cookies=codec)

    set_cookie = logout.execute(_cookie_header(result.set_cookie))

    assert sessions.records == {}
    assert set_cookie.startswith("__session=;")
    assert "Max-Age=0" in set_cookie


def test_logout_without_cookie_still_clears(sessions, codec) -> None:
    logout = LogoutUserUseCase(sessions=sessions, cookies=codec)

    assert "Max-Age=0" in logout.execute(None)


def test_register_user_then_login(users, sessions, codec, hasher, clock) -> None:
    register = RegisterUserUseCase(users=users, password_hasher=hasher)
    user = register.execute("bob", "battery-staple")
    login = LoginUserUseCase(
        credentials=CredentialStore(users=users, password_hasher=hasher),
        sessions=sessions,
        cookies=codec,
        session_ttl=SESSION_TTL,
        clock=clock,
    )

    result = login.execute(Credential("bob", "battery-staple"))

    assert isinstance(result, LoginAccepted)
    assert result.session.user_id == user.id


def test_register_user_duplicate_raises(users, hasher) -> None:
    register = RegisterUserUseCase(users=users, password_hasher=hasher)

    with pytest.raises(UserAlreadyExistsError):
        register.execute("alice", "another-password")
