from __future__ import annotations

import logging
from logging.config import dictConfig

from asgi_correlation_id.context import correlation_id
from pythonjsonlogger import jsonlogger


class CorrelationIdFilter(logging.Filter):
    """Attach the current request correlation ID to each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id.get() or "unknown"
        return True


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Route app and uvicorn logs through one correlation-aware handler.

    ``json_output=False`` switches to a plain single-line format for local
    development.
    """
    formatter = (
        {
            "()": jsonlogger.JsonFormatter,
            "fmt": (
                "%(asctime)s %(levelname)s %(name)s "
                "%(message)s %(correlation_id)s"
            ),
        }
        if json_output
        else {
            "format": (
                "%(asctime)s %(levelname)-8s [%(correlation_id)s] "
                "%(name)s: %(message)s"
            ),
        }
    )
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"with_correlation": {"()": CorrelationIdFilter}},
            "formatters": {"default": formatter},
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["with_correlation"],
                }
            },
            "root": {"handlers": ["default"], "level": level},
            "loggers": {
                "postgate": {"level": level},
                "uvicorn.error": {
                    "handlers": ["default"],
                    "level": level,
                    "propagate": False,
                },
                "uvicorn.access": {
                    "handlers": ["default"],
                    "level": level,
                    "propagate": False,
                },
                # supabase/postgrest use httpx; keep request lines out of INFO
                "httpx": {"level": "WARNING"},
            },
        }
    )
