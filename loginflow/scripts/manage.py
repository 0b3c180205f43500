# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Administrative helpers: provision users and sweep expired sessions."""

from __future__ import annotations

import argparse
import sys
from getpass import getpass

from loginflow.domain.users.exceptions import UserAlreadyExistsError
from loginflow.infrastructure.audit import AuditAction, audit_log
from loginflow.infrastructure.container import Container
from loginflow.infrastructure.db import init_db
from loginflow.shared.logging import setup_logging


def create_user(container: Container, username: str, password: str) -> int:
    user = container.register_user_use_case.execute(username.strip().lower(), password)
    audit_log(AuditAction.USER_CREATED, user_id=user.id, details={"username": user.username})
    return user.id


def purge_sessions(container: Container) -> int:
    return container.session_repository.purge_expired()


def _read_password() -> str:
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")
    return pw1


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="loginflow administration")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create-user", help="Create a user with a hashed password")
    create.add_argument("username")
    create.add_argument("--password", help="Read from the terminal when omitted")

    sub.add_parser("purge-sessions", help="Delete expired session records")

    args = parser.parse_args(argv)

    setup_logging()
    container = Container()
    init_db(container.engine)

    if args.command == "create-user":
        password = args.password or _read_password()
        try:
            user_id = create_user(container, args.username, password)
        except UserAlreadyExistsError:
            print(f"User {args.username!r} already exists", file=sys.stderr)
            return 1
        print(f"OK -> user_id={user_id}")
        return 0

    removed = purge_sessions(container)
    print(f"OK -> removed {removed} expired sessions")
    return 0


if __name__ == "__main__":
    sys.exit(main())
