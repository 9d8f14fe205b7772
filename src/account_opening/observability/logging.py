"""
account_opening.observability.logging

Structured logging configuration for the service.

Responsibilities:
- Configure `structlog`: JSON lines in prod/test, a readable console renderer in dev.
- Scrub credential material (secrets, bearer tokens, password hashes) from every event.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from typing import Any

import structlog
from structlog.typing import EventDict, Processor

# Event keys that may carry credential material; values are replaced, keys kept.
SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"password", "secret", "password_hash", "token", "access_token", "authorization", "jwt_secret"}
)
REDACTED = "***"


def configure_logging(*, service_name: str, level: str, json_logs: bool = True) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            redact_keys(SENSITIVE_KEYS),
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str) -> Processor:
    def processor(_: Any, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def redact_keys(keys: Iterable[str]) -> Processor:
    lowered = frozenset(k.lower() for k in keys)

    def processor(_: Any, __: str, event_dict: EventDict) -> EventDict:
        for key in event_dict:
            if key.lower() in lowered and event_dict[key] is not None:
                event_dict[key] = REDACTED
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Request-scoped metadata is bound via contextvars in `observability.middleware`.
# Principal attribution (binding id) is passed explicitly as event fields instead.
