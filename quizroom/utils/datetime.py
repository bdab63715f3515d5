# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for Quizroom.

All Python datetimes are timezone-aware UTC, so token expiry checks never
mix naive and aware values.

Usage:
------
    from quizroom.utils.datetime import utc_now, seconds_from_now

    expires_at = seconds_from_now(3600)
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def seconds_from_now(seconds: int | float) -> datetime:
    """Get a datetime N seconds in the future.

    Args:
        seconds: Number of seconds in the future.

    Returns:
        Timezone-aware UTC datetime.
    """
    return utc_now() + timedelta(seconds=seconds)


def expires_within(expiry: datetime | None, seconds: int | float) -> bool:
    """Check if a datetime has passed or will pass within a margin.

    Args:
        expiry: The expiry datetime to check.
        seconds: Safety margin in seconds.

    Returns:
        True if expiry is None, already passed, or falls inside the margin.
    """
    if expiry is None:
        return True

    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=timezone.utc)
    return utc_now() + timedelta(seconds=seconds) >= expiry
