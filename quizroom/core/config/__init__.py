# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for Quizroom.

Example:
    >>> from quizroom.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from quizroom.core.config.settings import (
    FirebaseSettings,
    ProfileSettings,
    QuizApiSettings,
    RedisSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "QuizApiSettings",
    "FirebaseSettings",
    "RedisSettings",
    "ProfileSettings",
]
