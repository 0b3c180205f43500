# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .credential_store import CredentialStore
from .password_hashing import WerkzeugPasswordHasher

__all__ = ["CredentialStore", "WerkzeugPasswordHasher"]
