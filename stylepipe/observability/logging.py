from __future__ import annotations

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from logging.config import dictConfig

from pythonjsonlogger import jsonlogger

build_id: ContextVar[str | None] = ContextVar("build_id", default=None)


class BuildIdFilter(logging.Filter):
    """Attach the id of the build in progress to each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.build_id = build_id.get() or "-"
        return True


@contextmanager
def bind_build_id(value: str | None = None) -> Iterator[str]:
    """Bind a build id for the duration of the block."""
    value = value or uuid.uuid4().hex[:8]
    token = build_id.set(value)
    try:
        yield value
    finally:
        build_id.reset(token)


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"with_build_id": {"()": BuildIdFilter}},
            "formatters": {
                "json": {
                    "()": jsonlogger.JsonFormatter,
                    "fmt": (
                        "%(asctime)s %(levelname)s %(name)s "
                        "%(message)s %(build_id)s"
                    ),
                },
                "text": {
                    "format": "%(asctime)s %(levelname)-7s [%(build_id)s] %(message)s",
                    "datefmt": "%H:%M:%S",
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if fmt == "json" else "text",
                    "filters": ["with_build_id"],
                }
            },
            "root": {"handlers": ["default"], "level": level},
            "loggers": {
                "watchdog": {"level": "WARNING"},
            },
        }
    )
