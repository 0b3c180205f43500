# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Redirect target policy used after login and logout."""

from __future__ import annotations

import re

DEFAULT_REDIRECT = "/"

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def safe_redirect(target: str | None, default: str = DEFAULT_REDIRECT) -> str:
    """Return ``target`` when it is a same-site absolute path, else ``default``.

    Browsers drop tabs and newlines from URLs, and werkzeug refuses them in
    headers, so any control character disqualifies the target.
    """
    if not target or not isinstance(target, str):
        return default
    target = target.strip()
    if _CONTROL_CHARS.search(target) or ".." in target:
        return default
    if not target.startswith("/") or target.startswith("//") or target.startswith("/\\"):
        return default
    return target
