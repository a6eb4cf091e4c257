"""Centralised JSON logging configuration."""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from .config import Settings
from .context import get_request_id

_RESERVED_LOG_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


class JsonLogFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def __init__(
        self,
        *,
        defaults: dict[str, Any] | None = None,
        fmt: str | None = None,
        datefmt: str | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._defaults = defaults or {}

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = dict(self._defaults)
        payload.update(
            {
                "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
                "request_id": getattr(record, "request_id", "-"),
            }
        )

        for key, value in record.__dict__.items():
            if key in _RESERVED_LOG_RECORD_ATTRS or key == "request_id":
                continue
            payload.setdefault(key, self._coerce_extra(value))

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)

        return json.dumps(payload, ensure_ascii=False, default=str)

    @staticmethod
    def _coerce_extra(value: Any) -> Any:
        try:
            json.dumps(value)
        except TypeError:
            return str(value)
        return value


class RequestContextFilter(logging.Filter):
    """Attach the current request id to emitted log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.request_id = get_request_id()
        return True


def configure_logging(settings: Settings) -> None:
    """Install the JSON stream handler on the root and uvicorn loggers."""

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.captureWarnings(True)

    handler_names = ["default"]
    config: dict[str, Any] = {
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
        "filters": {
            "request_context": {"()": RequestContextFilter},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "json",
                "level": level,
                "filters": ["request_context"],
            }
        },
        "loggers": {
            "": {"handlers": handler_names, "level": level},
            "uvicorn": {"handlers": handler_names, "level": level, "propagate": False},
            "uvicorn.error": {"handlers": handler_names, "level": level, "propagate": False},
            "uvicorn.access": {"handlers": handler_names, "level": level, "propagate": False},
            "sqlalchemy.engine": {
                "handlers": handler_names,
                "level": logging.INFO if settings.db_echo else logging.WARNING,
                "propagate": False,
            },
        },
    }
    logging.config.dictConfig(config)


__all__ = ["JsonLogFormatter", "RequestContextFilter", "configure_logging"]
