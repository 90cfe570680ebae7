# /concierge/utils/logging.py

import logging
import sys
import structlog
from concierge.config.settings import settings

# Structured logging (JSON outside development) shared by structlog loggers
# and plain module loggers. Chat content never reaches the logs: only
# lengths and flags are logged, and the keys below are masked if bound.

REDACTED_KEYS = frozenset({"message", "answers", "user_state", "system_prompt", "api_key", "authorization"})

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "openai", "pymongo")


def redact_sensitive_fields(_, __, event_dict):
    for key in REDACTED_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def setup_logging():
    """
    Routes logging.getLogger(__name__) records and structlog loggers through
    one ProcessorFormatter on stdout, where Gunicorn/Uvicorn pick them up.
    Request-scoped values bound with structlog.contextvars (the chat user id)
    are merged into every record logged while they are bound.
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_sensitive_fields,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.environment == "development":
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        foreign_pre_chain=shared_processors,
    ))

    root_logger = logging.getLogger()
    # The lifespan runs once per TestClient, so replace our handler instead of stacking them
    for existing in list(root_logger.handlers):
        if isinstance(existing.formatter, structlog.stdlib.ProcessorFormatter):
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
