# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Quizroom modules log through the standard library (``logging.getLogger``
with %-style arguments). setup_logging() installs a structlog
ProcessorFormatter on the ``quizroom`` logger, so those records are rendered
by structlog: colored console lines in development, JSON in production.
Values bound with bind_context() (the signed-in user id) are merged into
every record logged in the same context.

Example:
    >>> setup_logging(get_settings())
    >>> bind_context(user_id="uid-1")
    >>> logging.getLogger("quizroom.domains.course").info("Joined: course=%s", "c1")
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from quizroom.core.config.settings import Settings

ROOT_LOGGER = "quizroom"

# Chatty client libraries; their own warnings are still shown
NOISY_LOGGERS = ("httpx", "httpcore", "redis")

_HANDLER_NAME = "quizroom-structlog"


def _renderers(settings: "Settings") -> list[Processor]:
    if settings.is_development or settings.debug:
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def build_formatter(settings: "Settings") -> structlog.stdlib.ProcessorFormatter:
    """Build the formatter that renders standard library records with structlog.

    Args:
        settings: Application settings; decides console or JSON output.

    Returns:
        A formatter for a logging.Handler.
    """
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *_renderers(settings),
        ],
    )


def setup_logging(settings: "Settings") -> None:
    """Route Quizroom's logs through structlog.

    Calling it again replaces the handler installed by the previous call.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(build_formatter(settings))

    logger = logging.getLogger(ROOT_LOGGER)
    for existing in list(logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_context(**kwargs: object) -> None:
    """Bind values to every log record emitted in the current context.

    Example:
        >>> bind_context(user_id="user-456")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
