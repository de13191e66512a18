from typing import Any, Optional

__all__ = (
    "ColumnValueMismatchError",
    "ConnectionStringParseError",
    "ImproperConfigurationError",
    "MissingParameterError",
    "ParameterError",
    "PoolAlreadyOpenError",
    "PoolError",
    "PoolNotOpenError",
    "SlimPostgresError",
)


class SlimPostgresError(Exception):
    """Base exception class from which all slim-postgres exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SlimPostgresError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(SlimPostgresError):
    """Improper Configuration error.

    Raised when the facade receives connection settings it cannot use.
    """


class ConnectionStringParseError(SlimPostgresError):
    """No registered parser accepts the supplied connection string."""

    scheme: Optional[str]

    def __init__(self, message: Optional[str] = None, scheme: Optional[str] = None) -> None:
        if message is None:
            message = "No parser for connection string type"
        if scheme:
            message = f"{message} (scheme: {scheme!r})"
        super().__init__(detail=message)
        self.scheme = scheme


# -- SQL Parameter Errors --
class ParameterError(SlimPostgresError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MissingParameterError(ParameterError):
    """Raised when a named parameter in the SQL has no supplied value."""

    parameter: str

    def __init__(self, parameter: str, sql: Optional[str] = None) -> None:
        super().__init__(f"Missing prepared statement value for SQL variable '{parameter}'", sql)
        self.parameter = parameter


class ColumnValueMismatchError(SlimPostgresError):
    """Raised when ``insert`` receives a different number of columns and values."""

    def __init__(self, column_count: int, value_count: int) -> None:
        super().__init__(
            detail=f"Columns length must match values length ({column_count} columns, {value_count} values)."
        )
        self.column_count = column_count
        self.value_count = value_count


# -- Pool Lifecycle Errors --
class PoolError(SlimPostgresError):
    """Base class for pool lifecycle errors."""


class PoolAlreadyOpenError(PoolError):
    """Raised when ``connect()`` is called while a pool is already open."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = (
                "The pool has already been initialized. Please close the current pool first "
                "or create another instance of SlimPostgres."
            )
        super().__init__(detail=message)


class PoolNotOpenError(PoolError):
    """Raised when a query is issued after the pool has been closed."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "The pool is closed. Call connect() before issuing queries."
        super().__init__(detail=message)
