"""
Structured logging for the admin API.

structlog renders every event; stdlib logging (configured through dictConfig and
python-json-logger) carries third-party output such as uvicorn and SQLAlchemy.

- JSON output outside dev, a console renderer in dev (LOG_FORMAT overrides)
- correlation id and request fields pulled from contextvars into each event
- contact details (patient/doctor emails and phone numbers) masked in staging and prod
- bearer tokens and secrets dropped from event payloads everywhere
"""

from __future__ import annotations

import contextlib
import logging
import logging.config
import re
import sys
import time
import uuid
from typing import Any, Dict, Iterator, List, Optional

import structlog

from src.config import Settings, get_settings

_REQUEST_FIELDS = ("user_id", "path", "method", "client_ip")
_SECRET_KEYS = frozenset({"authorization", "token", "access_token", "password", "api_secret", "signature"})


# ---------------------------------------------------------------------
# Processors
# ---------------------------------------------------------------------


class ContactMaskingProcessor:
    """
    Masks email local parts and phone numbers in string values (nested dicts and
    lists included). Admin listings carry both for patients, doctors and referrers.
    """

    EMAIL = re.compile(r"\b([A-Za-z0-9._%+-]+)@([A-Za-z0-9.-]+\.[A-Za-z]{2,})\b")
    # Indian mobiles with or without +91, and other E.164 numbers
    PHONE = re.compile(r"\+?\d{10,15}\b")

    def __call__(self, logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        return {key: self._mask(value) for key, value in event_dict.items()}

    def _mask(self, value: Any) -> Any:
        if isinstance(value, str):
            value = self.EMAIL.sub(lambda m: f"***@{m.group(2)}", value)
            return self.PHONE.sub(lambda m: f"{m.group(0)[:2]}****{m.group(0)[-4:]}", value)
        if isinstance(value, dict):
            return {k: self._mask(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._mask(v) for v in value]
        return value


def drop_secrets(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    for key in list(event_dict):
        if key.lower() in _SECRET_KEYS:
            event_dict[key] = "[redacted]"
    return event_dict


def add_request_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Copy request fields bound by the HTTP middleware into the event."""
    bound = structlog.contextvars.get_contextvars()
    for key in _REQUEST_FIELDS:
        if key in bound:
            event_dict.setdefault(key, bound[key])
    cid = bound.get("correlation_id")
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


# ---------------------------------------------------------------------
# Request context
# ---------------------------------------------------------------------


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind the given id, or a fresh uuid4, for the rest of the request."""
    cid = correlation_id or str(uuid.uuid4())
    structlog.contextvars.bind_contextvars(correlation_id=cid)
    return cid


def get_correlation_id() -> Optional[str]:
    return structlog.contextvars.get_contextvars().get("correlation_id")


def bind_request_context(**fields: Any) -> None:
    values = {key: value for key, value in fields.items() if value is not None}
    if values:
        structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextlib.contextmanager
def time_block(name: str, *, logger: Optional[structlog.stdlib.BoundLogger] = None, **labels: Any) -> Iterator[None]:
    """Log the wall time of the enclosed block at debug level."""
    log = logger or structlog.get_logger("performance")
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        log.debug("timed_block", block=name, duration_ms=elapsed_ms, **labels)


# ---------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------


def resolve_log_format(settings: Settings) -> str:
    fmt = (settings.LOG_FORMAT or "").lower()
    if fmt in ("json", "console"):
        return fmt
    return "console" if settings.is_dev else "json"


def _stdlib_config(settings: Settings, log_format: str) -> Dict[str, Any]:
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    def quiet(name_level: str) -> Dict[str, Any]:
        return {"level": name_level, "handlers": ["stdout"], "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
                "datefmt": "%Y-%m-%dT%H:%M:%S",
            },
            "console": {
                "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                "datefmt": "%H:%M:%S",
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": log_format,
                "stream": sys.stdout,
            },
        },
        "root": {"level": level, "handlers": ["stdout"]},
        "loggers": {
            "uvicorn.error": quiet("INFO"),
            "uvicorn.access": quiet("WARNING"),
            "sqlalchemy.engine": quiet("INFO" if settings.SQLALCHEMY_ECHO else "WARNING"),
            "httpx": quiet("WARNING"),
        },
    }


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure stdlib logging and structlog; safe to call more than once."""
    settings = settings or get_settings()
    log_format = resolve_log_format(settings)
    logging.config.dictConfig(_stdlib_config(settings, log_format))

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_request_context,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        drop_secrets,
    ]
    if settings.is_prod or settings.is_staging:
        processors.append(ContactMaskingProcessor())
    processors += [
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if log_format == "json" else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def log_security_event(
    event_type: str,
    *,
    user_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> None:
    """Admin actions and denied access, on the dedicated "security" logger."""
    structlog.get_logger("security").info(
        "security_event",
        event_type=event_type,
        user_id=user_id,
        details=details or {},
        **kwargs,
    )
