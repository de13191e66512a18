"""The slim-postgres database facade."""

import asyncio
import os
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Optional, Union, overload

from slim_postgres.config import SlimPostgresConfig, resolve_pool_config
from slim_postgres.exceptions import (
    ColumnValueMismatchError,
    ImproperConfigurationError,
    PoolAlreadyOpenError,
    PoolNotOpenError,
)
from slim_postgres.parameters import ParameterPreparer
from slim_postgres.results import ExecuteResult, InsertResult, parse_status_row_count
from slim_postgres.utils.logging import get_logger, statement_fields
from slim_postgres.utils.schema import to_schema
from slim_postgres.utils.text import quote_identifier

if TYPE_CHECKING:
    from types import TracebackType

    from asyncpg import Record
    from asyncpg.pool import Pool, PoolConnectionProxy
    from typing_extensions import Self

    from slim_postgres.config import PoolConfig
    from slim_postgres.typing import DictRow, NamedParameters, SchemaT

__all__ = ("DEFAULT_ENV_VAR", "SlimPostgres")

logger = get_logger("base")

DEFAULT_ENV_VAR = "DATABASE_URL"


class SlimPostgres:
    """Connection pool owner with helpers for common query shapes.

    SQL passed to the helpers may use ``@name`` placeholders, which are
    rewritten into positional parameters before the query is sent.

    The facade is ``Connected`` as soon as it is constructed. The asyncpg
    pool itself is created on first use, or eagerly by ``async with``.
    """

    __slots__ = ("_config", "_is_open", "_pool_adopted", "_pool_lock", "preparer")

    def __init__(
        self,
        config: "Union[str, PoolConfig, Mapping[str, Any], None]" = None,
        pool_options: "Optional[Union[PoolConfig, Mapping[str, Any]]]" = None,
        *,
        pool_instance: "Optional[Pool[Record]]" = None,
        preparer: "Optional[ParameterPreparer]" = None,
    ) -> None:
        """Initialize the facade and open its pool.

        Args:
            config: A connection string or a mapping of pool parameters.
            pool_options: Pool tuning parameters merged under ``config``.
            pool_instance: An already created asyncpg pool to adopt.
            preparer: Named-parameter preparer; defaults to ``$``-style placeholders.
        """
        pool_config = resolve_pool_config(config, pool_options)
        self._config = SlimPostgresConfig(pool_config=pool_config, pool_instance=pool_instance)
        # An adopted pool with no parameters cannot be rebuilt once closed.
        self._pool_adopted = pool_instance is not None and not pool_config
        self._pool_lock = asyncio.Lock()
        self._is_open = True
        self.preparer = preparer or ParameterPreparer()

    @classmethod
    def from_env(
        cls, var: str = DEFAULT_ENV_VAR, pool_options: "Optional[Union[PoolConfig, Mapping[str, Any]]]" = None
    ) -> "SlimPostgres":
        """Build a facade from a connection string stored in an environment variable.

        Raises:
            ImproperConfigurationError: The variable is unset or empty.
        """
        connection_string = os.environ.get(var)
        if not connection_string:
            msg = f"Environment variable {var!r} must be set to a connection string"
            raise ImproperConfigurationError(msg)
        return cls(connection_string, pool_options)

    def __repr__(self) -> str:
        state = "connected" if self._is_open else "disconnected"
        return f"{type(self).__name__}({state}, config={self._config!r})"

    async def __aenter__(self) -> "Self":
        await self._provide_pool()
        return self

    async def __aexit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        await self.close()

    # -- Pool lifecycle --------------------------------------------------

    def has_open_pool(self) -> bool:
        """Check if there is an open pool."""
        return self._is_open

    def connect(self) -> None:
        """Re-open the pool after :meth:`close`.

        Construction already connects, so this is only needed after a close.

        Raises:
            PoolAlreadyOpenError: The pool is already open.
            ImproperConfigurationError: The facade only wrapped an adopted
                ``pool_instance`` and has no parameters to build a new pool from.
        """
        if self._is_open:
            raise PoolAlreadyOpenError
        if self._pool_adopted:
            msg = "Cannot re-open an adopted pool_instance after close(); pass connection parameters instead"
            raise ImproperConfigurationError(msg)
        self._is_open = True
        logger.debug("Pool re-opened")

    async def close(self) -> None:
        """Close the pool and wait for its connections to be released.

        Closing an already closed facade does nothing.
        """
        async with self._pool_lock:
            if not self._is_open:
                return
            self._is_open = False
            await self._config.close_pool()

    async def _provide_pool(self) -> "Pool[Record]":
        pool = self._config.pool_instance
        if self._is_open and pool is not None:
            return pool
        async with self._pool_lock:
            if not self._is_open:
                raise PoolNotOpenError
            return await self._config.provide_pool()

    @asynccontextmanager
    async def _provide_connection(self) -> "AsyncIterator[PoolConnectionProxy[Record]]":
        pool = await self._provide_pool()
        async with pool.acquire() as connection:
            yield connection

    # -- Query helpers ---------------------------------------------------

    async def _fetch(self, operation: str, sql: str, parameters: "Optional[NamedParameters]") -> "list[DictRow]":
        prepared = self.preparer.prepare(sql, parameters)
        async with self._provide_connection() as connection:
            logger.debug("Fetching rows", extra=statement_fields(operation, len(prepared.parameters)))
            records = await connection.fetch(prepared.sql, *prepared.parameters)
        return [dict(record) for record in records]

    @overload
    async def query(self, sql: str, parameters: "Optional[NamedParameters]" = None) -> "list[DictRow]": ...

    @overload
    async def query(
        self, sql: str, parameters: "Optional[NamedParameters]" = None, *, schema_type: "type[SchemaT]"
    ) -> "list[SchemaT]": ...

    async def query(
        self, sql: str, parameters: "Optional[NamedParameters]" = None, *, schema_type: "Optional[type[Any]]" = None
    ) -> "list[Any]":
        """Query the database for a list of records.

        Args:
            sql: The SQL to run, optionally with ``@name`` placeholders.
            parameters: Values for the ``@name`` placeholders.
            schema_type: Type each row is converted to. Rows are dicts by default.

        Returns:
            Every matching row; an empty list when nothing matched.
        """
        return to_schema(await self._fetch("query", sql, parameters), schema_type)

    @overload
    async def get_one(self, sql: str, parameters: "Optional[NamedParameters]" = None) -> "Optional[DictRow]": ...

    @overload
    async def get_one(
        self, sql: str, parameters: "Optional[NamedParameters]" = None, *, schema_type: "type[SchemaT]"
    ) -> "Optional[SchemaT]": ...

    async def get_one(
        self, sql: str, parameters: "Optional[NamedParameters]" = None, *, schema_type: "Optional[type[Any]]" = None
    ) -> "Optional[Any]":
        """Return the first matching record or ``None``.

        No LIMIT is added; for large result sets, include one in ``sql``.
        """
        rows = await self._fetch("get_one", sql, parameters)
        if not rows:
            return None
        return to_schema(rows[:1], schema_type)[0]

    async def get_value(self, column: str, sql: str, parameters: "Optional[NamedParameters]" = None) -> Any:
        """Get a single column value from the first matching record.

        ``None`` is returned both when no record matched and when the value
        itself is NULL. Use :meth:`get_one` to tell the two apart.

        A ``column`` absent from the returned record is an error here rather
        than another ``None``, so a misspelt column name is never mistaken for
        a NULL value.

        Args:
            column: The column of the record to return.
            sql: The SQL to run to get the record.
            parameters: Values for the ``@name`` placeholders.

        Raises:
            KeyError: The record has no ``column``.

        Returns:
            The column value or ``None``.
        """
        rows = await self._fetch("get_value", sql, parameters)
        if not rows:
            return None
        return rows[0][column]

    async def exists(self, sql: str, parameters: "Optional[NamedParameters]" = None) -> bool:
        """Check if the query matches at least one record."""
        return bool(await self._fetch("exists", sql, parameters))

    async def execute(self, sql: str, parameters: "Optional[NamedParameters]" = None) -> ExecuteResult:
        """Run an insert, update, delete or DDL statement.

        Args:
            sql: SQL to run, optionally with ``@name`` placeholders.
            parameters: Values for the ``@name`` placeholders.

        Returns:
            The affected row count reported by PostgreSQL.
        """
        prepared = self.preparer.prepare(sql, parameters)
        async with self._provide_connection() as connection:
            logger.debug("Executing statement", extra=statement_fields("execute", len(prepared.parameters)))
            status = await connection.execute(prepared.sql, *prepared.parameters)
        row_count = parse_status_row_count(status)
        return ExecuteResult(affected_rows=row_count, changed_rows=row_count)

    async def insert(self, table: str, columns: "Sequence[str]", values: "Sequence[Any]") -> InsertResult:
        """Insert one record and return its generated ``id``.

        Args:
            table: The table to insert into.
            columns: Column names to insert values into.
            values: Values in the same order as ``columns``.

        Raises:
            ColumnValueMismatchError: ``columns`` and ``values`` differ in length.

        Returns:
            The insert outcome; ``insert_id`` is ``None`` if no ``id`` came back.
        """
        if len(columns) != len(values):
            raise ColumnValueMismatchError(len(columns), len(values))

        placeholders = ", ".join(self.preparer.placeholder(index) for index in range(1, len(values) + 1))
        sql = (
            f"INSERT INTO {quote_identifier(table)} ({', '.join(quote_identifier(column) for column in columns)}) "
            f"VALUES ({placeholders}) RETURNING id"
        )
        async with self._provide_connection() as connection:
            logger.debug("Inserting record", extra=statement_fields("insert", len(values), table=table))
            records = await connection.fetch(sql, *values)
        return InsertResult(
            affected_rows=len(records), changed_rows=0, insert_id=records[0]["id"] if records else None
        )
