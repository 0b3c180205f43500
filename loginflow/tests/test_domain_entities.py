from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from loginflow.domain import InvariantViolation, Session
from loginflow.interfaces.http.redirects import safe_redirect

T0 = datetime(2026, 1, 1, tzinfo=UTC)


def test_session_without_expiry_never_expires() -> None:
    session = Session(id="s", user_id=1, created_at=T0)

    assert not session.is_expired(T0 + timedelta(days=3650))


def test_session_expires_at_its_deadline() -> None:
    session = Session(id="s", user_id=1, created_at=T0, expires_at=T0 + timedelta(hours=1))

    assert not session.is_expired(T0 + timedelta(minutes=59))
    assert session.is_expired(T0 + timedelta(hours=1))


@pytest.mark.parametrize("offset", [timedelta(0), timedelta(seconds=-1)])
def test_session_rejects_deadline_not_after_creation(offset: timedelta) -> None:
    with pytest.raises(InvariantViolation) as exc_info:
        Session(id="s", user_id=1, created_at=T0, expires_at=T0 + offset)

    assert exc_info.value.field == "expires_at"


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ("/notes", "/notes"),
        ("/users/alice?tab=notes", "/users/alice?tab=notes"),
        (None, "/"),
        ("", "/"),
        ("https://evil.example/", "/"),
        ("//evil.example/", "/"),
        ("/\\evil.example/", "/"),
        ("notes", "/"),
        ("/..//evil.example", "/"),
        ("/notes/../admin", "/"),
        ("/\t/evil.example", "/"),
        ("/a\nb", "/"),
        ("/a\r\nSet-Cookie: x=1", "/"),
        ("/a\x00b", "/"),
    ],
)
def test_safe_redirect(target: str | None, expected: str) -> None:
    assert safe_redirect(target) == expected


def test_safe_redirect_uses_given_default() -> None:
    assert safe_redirect("//evil.example/", default="/home") == "/home"
