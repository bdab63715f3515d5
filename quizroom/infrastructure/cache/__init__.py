# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Cache infrastructure using Redis.

Example:
    from quizroom.infrastructure.cache import RedisClient

    client = RedisClient(settings.redis)
    await client.connect()
    await client.set("quizroom:session", {"courseId": "", "role": "STUDENT"})
    await client.close()
"""

from quizroom.infrastructure.cache.redis_client import RedisClient, RedisError

__all__ = [
    "RedisClient",
    "RedisError",
]
