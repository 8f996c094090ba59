"""
Central logging configuration for UserHub.

Every record is stamped with the correlation fields of the request that
produced it: `request_id` (bound by the request middleware) and `actor_id`
(bound by the access gate once a bearer token checks out). Production emits
one JSON object per line; development a compact single line.

Usage:
    from userhub.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("User created", extra={"user_id": user.id})
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from userhub.config import Settings

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
actor_id_var: ContextVar[Optional[str]] = ContextVar("actor_id", default=None)

CONTEXT_FIELDS: Dict[str, ContextVar] = {
    "request_id": request_id_var,
    "actor_id": actor_id_var,
}

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "botocore", "urllib3")


class RequestContextFilter(logging.Filter):
    """Copy the request's correlation fields onto each record, unless passed explicitly."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, var in CONTEXT_FIELDS.items():
            if getattr(record, name, None) is None:
                setattr(record, name, var.get() or "-")
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record: fixed header, correlation fields, then extras."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or value is None or value == "-":
                continue
            try:
                json.dumps(value)
                log_obj[key] = value
            except (TypeError, ValueError):
                log_obj[key] = str(value)

        return json.dumps(log_obj, ensure_ascii=False)


def configure_logging(settings: Settings) -> None:
    """Install a single stderr handler on the root logger. Safe to call again on reload."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    if settings.environment == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-5s [%(name)s] req=%(request_id)s actor=%(actor_id)s %(message)s",
            datefmt="%H:%M:%S",
        ))

    root = logging.getLogger()
    root.setLevel(level)
    for h in root.handlers[:]:
        root.removeHandler(h)
    root.addHandler(handler)

    # Requests are logged by our middleware; the access log would duplicate them
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
