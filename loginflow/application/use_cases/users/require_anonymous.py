# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import Enum

from loginflow.application.use_cases.users.current_session import CurrentSessionUseCase


class GuardDecision(str, Enum):
    PROCEED = "proceed"
    REDIRECT = "redirect"


class RequireAnonymousUseCase:
    """Keeps already authenticated visitors off anonymous-only pages.

    Read-only: a stale, tampered or expired cookie simply counts as
    anonymous and is left for the login flow to replace.
    """

    def __init__(self, *, current_session: CurrentSessionUseCase) -> None:
        self._current_session = current_session

    def execute(self, cookie_header: str | None) -> GuardDecision:
        if self._current_session.execute(cookie_header) is None:
            return GuardDecision.PROCEED
        return GuardDecision.REDIRECT
