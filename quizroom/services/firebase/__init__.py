# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Firebase REST adapters for the identity and record ports."""

from quizroom.services.firebase.auth import FirebaseAuthBackend, map_auth_error
from quizroom.services.firebase.database import FirebaseRecordStore

__all__ = [
    "FirebaseAuthBackend",
    "FirebaseRecordStore",
    "map_auth_error",
]
