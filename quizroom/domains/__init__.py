# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain packages.

- identity: who the user is and which course they belong to
- course: course creation and joining
- quiz: instructor quizzes, student attempts and practice quizzes
"""
