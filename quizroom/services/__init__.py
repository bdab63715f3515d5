# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""External service clients.

- quiz_api: HTTP client for the quiz generation and scoring API
- firebase: identity and record backend adapters
"""
