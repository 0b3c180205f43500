# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets

from loginflow.domain.users.entities import Credential, User
from loginflow.domain.users.repositories import PasswordHasher, UserRepository
from loginflow.shared.logging import logger


class CredentialStore:
    """Verifies submitted credentials against stored password hashes.

    Usernames are matched exactly (case-sensitive). Unknown users and wrong
    passwords both yield ``None`` so callers cannot tell them apart.
    """

    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher
        # stands in for the stored hash of unknown usernames
        self._dummy_hash = password_hasher.hash(secrets.token_urlsafe(16))

    def verify(self, username: str, password: str) -> User | None:
        user = self._users.find_by_username(username)
        if user is None:
            # same hashing cost as a real mismatch
            self._password_hasher.verify(password, self._dummy_hash)
            logger.debug("credential_store: verify rejected")
            return None

        if not self._password_hasher.verify(password, user.password_hash):
            logger.debug("credential_store: verify rejected")
            return None
        return user

    def verify_credential(self, credential: Credential) -> User | None:
        return self.verify(credential.username, credential.password)
