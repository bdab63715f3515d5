# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for Quizroom.

- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from quizroom.utils.datetime import expires_within, seconds_from_now, utc_now
from quizroom.utils.logging import bind_context, clear_context, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "seconds_from_now",
    "expires_within",
]
