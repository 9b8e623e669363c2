"""
Process-wide logging setup.

`setup_logging` is called once when the app starts. Plain text is used in
development and tests, a one-line JSON record per event in production (or
whenever `LOG_FORMAT=json`). Uvicorn's loggers propagate to the root handler
so every line shares one format.
"""

import json
import logging
from logging.config import dictConfig
from traceback import format_exception

from boxcloud.database.config.config import settings

MAX_STACK = 4000


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter for production logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "pid": record.process,
            "message": record.getMessage(),
        }

        http_ctx = {
            k: v for k, v in {
                "method": getattr(record, "http_method", None),
                "path": getattr(record, "path", None),
                "status": getattr(record, "status_code", None),
            }.items() if v is not None
        }
        if http_ctx:
            payload["http"] = http_ctx

        if record.exc_info:
            exc_type, exc_value = record.exc_info[0], record.exc_info[1]
            stack = "".join(format_exception(*record.exc_info))
            payload["error"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "stack": stack[:MAX_STACK] + ("...(truncated)" if len(stack) > MAX_STACK else ""),
            }

        return json.dumps(payload, ensure_ascii=False)


def _read_level() -> str:
    if settings.LOG_LEVEL:
        return settings.LOG_LEVEL.upper()
    return "INFO" if settings.is_production else "DEBUG"


def _read_format() -> str:
    if settings.LOG_FORMAT:
        return settings.LOG_FORMAT.lower()
    return "json" if settings.is_production else "plain"


def setup_logging() -> None:
    level = _read_level()
    formatter_name = "json" if _read_format() == "json" else "plain"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)-5s [pid:%(process)d] %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
                "json": {
                    "()": JsonFormatter,
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                },
            },
            "handlers": {
                "stream": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": formatter_name,
                }
            },
            "root": {
                "level": level,
                "handlers": ["stream"],
            },
            "loggers": {
                "uvicorn": {"level": "INFO", "handlers": [], "propagate": True},
                "uvicorn.error": {"level": "INFO", "handlers": [], "propagate": True},
                "uvicorn.access": {"level": "INFO", "handlers": [], "propagate": True},
                # SQL echo stays off unless asked for explicitly.
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
