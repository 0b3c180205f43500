# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .session_cookie import SessionCookieSettings, SignedSessionCookieCodec

__all__ = ["SessionCookieSettings", "SignedSessionCookieCodec"]
