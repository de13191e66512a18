"""Logging helpers for slim-postgres.

Loggers live under the ``slim_postgres`` namespace. Statement log records
carry their fields (operation, positional parameter count, ...) under the
``extra_fields`` attribute built by :func:`statement_fields`; the
:class:`StructuredFormatter` lifts them into the JSON document. Parameter
values are never logged. :func:`configure_logging` is opt-in; importing the
package installs no handlers.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

from slim_postgres._serialization import encode_json

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = ("StructuredFormatter", "configure_logging", "get_logger", "statement_fields")

ROOT_LOGGER_NAME = "slim_postgres"
SIMPLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def statement_fields(operation: str, parameter_count: int, **fields: Any) -> dict[str, Any]:
    """Build the ``extra`` mapping for a statement log record.

    Args:
        operation: The facade helper issuing the statement (``"query"``, ``"insert"``, ...).
        parameter_count: Number of positional values sent with the statement.
        **fields: Additional fields, e.g. ``table``.

    Returns:
        A mapping suitable for the ``extra`` argument of a logging call.
    """
    return {"extra_fields": {"operation": operation, "parameter_count": parameter_count, **fields}}


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_entry.update(getattr(record, "extra_fields", {}))
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return encode_json(log_entry)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``slim_postgres`` or a child logger of it.

    Args:
        name: Child name; names already under ``slim_postgres`` are used as-is.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    extra_handlers: list[logging.Handler] | None = None,
) -> None:
    """Attach a stdout handler to the ``slim_postgres`` logger tree.

    Args:
        level: Logging level name (DEBUG, INFO, ...).
        format_style: ``"structured"`` for JSON lines, anything else for plain text.
        extra_handlers: Additional handlers to attach as-is.
    """
    root_logger = get_logger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(
        StructuredFormatter() if format_style == "structured" else logging.Formatter(SIMPLE_FORMAT)
    )
    root_logger.addHandler(console_handler)
    for handler in extra_handlers or ():
        root_logger.addHandler(handler)
    root_logger.propagate = False
