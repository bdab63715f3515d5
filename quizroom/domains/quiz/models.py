# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz lifecycle states and shared role checks."""

from enum import Enum

from quizroom.core.exceptions import ValidationError
from quizroom.domains.identity.models import Identity, UserRole
from quizroom.domains.identity.service import IdentitySession


class QuizState(str, Enum):
    """Lifecycle of an instructor quiz: DRAFT -> RUNNING -> FINISHED."""

    DRAFT = "draft"
    RUNNING = "running"
    FINISHED = "finished"


class AttemptState(str, Enum):
    """Lifecycle of a student attempt: ACTIVE -> FINISHED -> SCORED."""

    ACTIVE = "active"
    FINISHED = "finished"
    SCORED = "scored"


def require_role(session: IdentitySession, role: UserRole, action: str) -> Identity:
    """Return the current identity if it has the given role.

    Raises:
        AuthError: If nobody is logged in.
        ValidationError: If the identity has another role.
    """
    identity = session.require_identity()
    if identity.role != role:
        raise ValidationError(
            f"Only {role.value.lower()}s can {action}",
            {"role": identity.role.value},
        )
    return identity
