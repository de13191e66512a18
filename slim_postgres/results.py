"""Result shapes returned by the mutation helpers."""

import re
from dataclasses import dataclass
from typing import Any, Final, Optional

__all__ = ("ExecuteResult", "InsertResult", "parse_status_row_count")

STATUS_REGEX: Final[re.Pattern[str]] = re.compile(r"^([A-Z]+)(?:\s+(\d+))?\s+(\d+)$", re.IGNORECASE)


@dataclass(frozen=True)
class ExecuteResult:
    """Result of running an INSERT, UPDATE or DELETE statement."""

    affected_rows: int
    """Number of rows affected by the statement."""
    changed_rows: int
    """Number of existing rows modified by the statement.

    PostgreSQL reports a single count, so this equals ``affected_rows``.
    """


@dataclass(frozen=True)
class InsertResult(ExecuteResult):
    """Result of :meth:`SlimPostgres.insert`."""

    insert_id: Optional[Any] = None
    """Value of the ``id`` column returned by the insert, if any."""


def parse_status_row_count(status: Optional[str]) -> int:
    """Extract the row count from an asyncpg command status.

    Args:
        status: Status string like ``"INSERT 0 1"``, ``"UPDATE 3"``, ``"DELETE 2"``.

    Returns:
        Number of affected rows, or 0 when the status carries no count.
    """
    if not status:
        return 0
    match = STATUS_REGEX.match(status.strip())
    if match is None:
        return 0
    return int(match.group(3))
