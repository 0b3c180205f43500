# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Credential verification and cookie-backed session establishment."""

__version__ = "0.1.0"
