# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Service wiring.

Builds the backend adapters, the session sink and the domain services from
settings. Nothing here holds global state; callers keep the returned
container and pass it to close_services() on shutdown.

Example:
    services = await create_services(get_settings())
    identity = await services.identity.login(email, password)
    ...
    await close_services(services)
"""

import logging
from dataclasses import dataclass

import httpx

from quizroom.core.config.settings import Settings
from quizroom.domains.course.service import CourseMembership
from quizroom.domains.identity.profile import ProfileService
from quizroom.domains.identity.service import IdentitySession
from quizroom.domains.identity.session_sink import (
    InMemorySessionSink,
    RedisSessionSink,
    SessionSink,
)
from quizroom.domains.quiz.instructor import InstructorQuizService
from quizroom.domains.quiz.practice import PracticeQuizService
from quizroom.domains.quiz.student import StudentQuizService
from quizroom.infrastructure.cache.redis_client import RedisClient
from quizroom.services.firebase.auth import FirebaseAuthBackend
from quizroom.services.firebase.database import FirebaseRecordStore
from quizroom.services.quiz_api.client import QuizApiClient
from quizroom.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Wired services of one running client."""

    settings: Settings
    sink: SessionSink
    identity: IdentitySession
    courses: CourseMembership
    instructor_quizzes: InstructorQuizService
    student_quizzes: StudentQuizService
    practice_quizzes: PracticeQuizService
    profile: ProfileService
    redis: RedisClient | None = None


async def create_services(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Services:
    """Configure logging and build every service.

    Args:
        settings: Application settings.
        transport: Optional httpx transport shared by all HTTP adapters.

    Returns:
        The wired services.

    Raises:
        RedisError: If the Redis session sink is selected and Redis is down.
    """
    setup_logging(settings)

    redis: RedisClient | None = None
    if settings.session_sink == "redis":
        redis = RedisClient(settings.redis)
        await redis.connect()
        sink: SessionSink = RedisSessionSink(redis, settings.redis.session_key)
    else:
        sink = InMemorySessionSink()

    auth = FirebaseAuthBackend(settings.firebase, transport=transport)
    records = FirebaseRecordStore(settings.firebase, auth, transport=transport)
    identity = IdentitySession(auth, records, sink, settings.firebase.write_retries)
    client = QuizApiClient.from_settings(settings.quiz_api, transport=transport)

    logger.info(
        "Services created: environment=%s, session_sink=%s",
        settings.environment,
        settings.session_sink,
    )
    return Services(
        settings=settings,
        sink=sink,
        identity=identity,
        courses=CourseMembership(identity),
        instructor_quizzes=InstructorQuizService(client, identity),
        student_quizzes=StudentQuizService(client, identity),
        practice_quizzes=PracticeQuizService(client, identity),
        profile=ProfileService(client, identity, settings.profile),
        redis=redis,
    )


async def close_services(services: Services) -> None:
    """Release connections opened by create_services()."""
    if services.redis is not None:
        await services.redis.close()
        services.redis = None
    logger.info("Services closed")
