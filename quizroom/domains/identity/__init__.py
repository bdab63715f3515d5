# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity domain: who the user is and which course they belong to."""

from quizroom.domains.identity.backend import AuthBackend, AuthUser, RecordStore
from quizroom.domains.identity.models import (
    Identity,
    InstructorNameIndex,
    StoredSession,
    UserRecord,
    UserRole,
)
from quizroom.domains.identity.profile import ProfileService, profile_picture_url
from quizroom.domains.identity.service import IdentitySession
from quizroom.domains.identity.session_sink import (
    InMemorySessionSink,
    RedisSessionSink,
    SessionSink,
)

__all__ = [
    "AuthBackend",
    "AuthUser",
    "RecordStore",
    "Identity",
    "InstructorNameIndex",
    "StoredSession",
    "UserRecord",
    "UserRole",
    "IdentitySession",
    "ProfileService",
    "profile_picture_url",
    "SessionSink",
    "InMemorySessionSink",
    "RedisSessionSink",
]
