"""slim-postgres: a small async PostgreSQL helper layer with ``@name`` parameters."""

from slim_postgres import exceptions, parameters, typing
from slim_postgres.__metadata__ import __version__
from slim_postgres.base import SlimPostgres
from slim_postgres.config import ConnectionConfig, PoolConfig, SlimPostgresConfig
from slim_postgres.connection_string import ConnectionStringParser, register_parser
from slim_postgres.exceptions import (
    ColumnValueMismatchError,
    ConnectionStringParseError,
    ImproperConfigurationError,
    MissingParameterError,
    ParameterError,
    PoolAlreadyOpenError,
    PoolNotOpenError,
    SlimPostgresError,
)
from slim_postgres.parameters import ParameterPreparer, PreparedStatement, prepare
from slim_postgres.results import ExecuteResult, InsertResult
from slim_postgres.typing import DictRow, NamedParameters

__all__ = (
    "ColumnValueMismatchError",
    "ConnectionConfig",
    "ConnectionStringParseError",
    "ConnectionStringParser",
    "DictRow",
    "ExecuteResult",
    "ImproperConfigurationError",
    "InsertResult",
    "MissingParameterError",
    "NamedParameters",
    "ParameterError",
    "ParameterPreparer",
    "PoolAlreadyOpenError",
    "PoolConfig",
    "PoolNotOpenError",
    "PreparedStatement",
    "SlimPostgres",
    "SlimPostgresConfig",
    "SlimPostgresError",
    "__version__",
    "exceptions",
    "parameters",
    "prepare",
    "register_parser",
    "typing",
)
