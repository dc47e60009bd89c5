"""
Structlog configuration and helpers.

Call :func:`setup_logging` once at startup. Modules log event-style keys
(``readme.analyze.failed``) through :func:`get_logger`; request-scoped fields
come from contextvars bound by the request middleware.
"""

from __future__ import annotations

import logging
from typing import Any, MutableMapping, Optional

import structlog

# Keys whose values must never reach log output
SECRET_KEYS = frozenset({"authorization", "api_key", "token", "jwt", "password"})
REDACTED = "***"

# Libraries that log every HTTP round trip at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3")


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Structlog processor masking credential-looking keys."""
    for key in event_dict:
        if key.lower() in SECRET_KEYS and event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def setup_logging(
    log_level: Optional[str] = None, log_format: Optional[str] = None
) -> None:
    """Configure structlog for the application.

    Args:
        log_level: Level name such as ``"DEBUG"``. Defaults to ``LOG_LEVEL``.
        log_format: ``"json"`` or ``"console"``. Defaults to ``LOG_FORMAT``.
    """
    from devboard.infra.config.settings import get_settings

    settings = get_settings()
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    fmt = (log_format or settings.log_format).lower()

    # stdlib logging carries uvicorn output
    logging.basicConfig(level=level, format="%(message)s")
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    renderer = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:  # type: ignore[name-defined]
    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_context(**kwargs) -> None:
    """Bind contextvars for correlation (request_id, subject)."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
