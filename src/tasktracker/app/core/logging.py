"""JSON logging for the task tracker.

Every record is rendered as one JSON object on stdout. Request handlers do
not pass the correlation id around; :class:`RequestContextFilter` reads it
from the request context instead.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Mapping

from .config import Settings
from .context import get_request_id

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "request_id",
}

SENSITIVE_FIELDS = frozenset({"password", "hashed_password", "token", "authorization", "secret"})
REDACTED = "***"


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class JsonLogFormatter(logging.Formatter):
    """Render a record as ``{timestamp, level, logger, message, request_id, ...}``.

    ``defaults`` (service name and environment) are written first. Extra
    fields follow, with credential-like keys masked.
    """

    def __init__(
        self,
        *,
        defaults: Mapping[str, Any] | None = None,
        datefmt: str | None = None,
    ) -> None:
        super().__init__(datefmt=datefmt)
        self._defaults = dict(defaults or {})

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            **self._defaults,
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None) or get_request_id(),
        }
        for key, value in self.extra_fields(record).items():
            payload.setdefault(key, value)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False, default=str)

    @staticmethod
    def extra_fields(record: logging.LogRecord) -> dict[str, Any]:
        """Return the ``extra=`` values attached to ``record``, redacted."""

        fields: dict[str, Any] = {}
        for key, value in vars(record).items():
            if key in _STANDARD_ATTRS or key.startswith("_"):
                continue
            fields[key] = REDACTED if key.lower() in SENSITIVE_FIELDS else _jsonable(value)
        return fields


class RequestContextFilter(logging.Filter):
    """Stamp records with the id of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        return True


def configure_logging(settings: Settings) -> None:
    """Route the root and uvicorn loggers to a single JSON stdout handler."""

    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.captureWarnings(True)

    uvicorn_logger = {"handlers": ["stdout"], "level": level, "propagate": False}
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonLogFormatter,
                    "defaults": {
                        "service": settings.project_name,
                        "environment": settings.environment,
                    },
                }
            },
            "filters": {"request_context": {"()": RequestContextFilter}},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "json",
                    "level": level,
                    "filters": ["request_context"],
                }
            },
            "root": {"handlers": ["stdout"], "level": level},
            "loggers": {
                name: dict(uvicorn_logger) for name in ("uvicorn", "uvicorn.error", "uvicorn.access")
            },
        }
    )


__all__ = [
    "JsonLogFormatter",
    "REDACTED",
    "RequestContextFilter",
    "SENSITIVE_FIELDS",
    "configure_logging",
]
