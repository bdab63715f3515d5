"""Quizroom client core.

Session and state orchestration for instructor-authored, AI-generated
quizzes: identity, course membership and quiz lifecycles on top of an
identity/record backend and a remote quiz API.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
