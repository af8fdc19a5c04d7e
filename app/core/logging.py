"""Structured logging configuration.

Log calls across the app use an event name as the message and attach
context through ``extra={...}``.  ``StructuredFormatter`` renders those
extra fields as ``key=value`` pairs after the message so that they are
not silently dropped by the standard formatter.
"""

import logging
import sys

from app.core.config import settings

# Attributes present on every LogRecord; anything else came from ``extra``.
_RESERVED_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class StructuredFormatter(logging.Formatter):
    """Formatter that appends ``extra`` context to the rendered line."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{line} | {pairs}"


def setup_logging() -> None:
    """Configure the root logger for the application.

    Level comes from ``settings.LOG_LEVEL``; output goes to *stdout*.
    Calling it again replaces the previously installed handler.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(
        StructuredFormatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    # Supabase talks through httpx; its request lines are noise here
    for noisy in ("httpx", "httpcore", "postgrest", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
