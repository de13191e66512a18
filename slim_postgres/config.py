"""Connection pool configuration for slim-postgres."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional, TypedDict, Union

from asyncpg import Record
from asyncpg import create_pool as asyncpg_create_pool
from asyncpg.pool import Pool
from typing_extensions import NotRequired

from slim_postgres.connection_string import parse_connection_string
from slim_postgres.exceptions import ImproperConfigurationError
from slim_postgres.utils.logging import get_logger

if TYPE_CHECKING:
    from asyncio.events import AbstractEventLoop
    from collections.abc import Awaitable, Callable

    from asyncpg import Connection


__all__ = ("ConnectionConfig", "PoolConfig", "SlimPostgresConfig", "resolve_pool_config")

logger = get_logger("config")


class ConnectionConfig(TypedDict, total=False):
    """TypedDict for asyncpg connection parameters."""

    dsn: NotRequired[str]
    host: NotRequired[str]
    port: NotRequired[int]
    user: NotRequired[str]
    password: NotRequired[str]
    database: NotRequired[str]
    ssl: NotRequired[Any]
    passfile: NotRequired[str]
    direct_tls: NotRequired[bool]
    connect_timeout: NotRequired[float]
    command_timeout: NotRequired[float]
    statement_cache_size: NotRequired[int]
    max_cached_statement_lifetime: NotRequired[int]
    max_cacheable_statement_size: NotRequired[int]
    server_settings: NotRequired[dict[str, str]]


class PoolConfig(ConnectionConfig, total=False):
    """TypedDict for asyncpg pool parameters, inheriting connection parameters."""

    min_size: NotRequired[int]
    max_size: NotRequired[int]
    max_queries: NotRequired[int]
    max_inactive_connection_lifetime: NotRequired[float]
    setup: NotRequired["Callable[[Connection[Record]], Awaitable[None]]"]
    init: NotRequired["Callable[[Connection[Record]], Awaitable[None]]"]
    loop: NotRequired["AbstractEventLoop"]
    connection_class: NotRequired[type["Connection[Record]"]]
    record_class: NotRequired[type[Record]]
    extra: NotRequired[dict[str, Any]]


def resolve_pool_config(
    config: "Union[str, Mapping[str, Any], None]", pool_options: "Optional[Mapping[str, Any]]" = None
) -> "dict[str, Any]":
    """Merge facade construction input into one pool configuration.

    Connection strings are parsed into structured fields first. Explicit
    connection fields take precedence over ``pool_options``.

    Args:
        config: A connection string, a mapping of pool parameters, or ``None``.
        pool_options: Additional pool tuning parameters.

    Raises:
        ImproperConfigurationError: ``config`` is neither a string nor a mapping.

    Returns:
        The merged pool configuration.
    """
    merged: dict[str, Any] = dict(pool_options) if pool_options else {}
    if config is None:
        return merged
    if isinstance(config, str):
        merged.update(parse_connection_string(config))
        return merged
    if isinstance(config, Mapping):
        merged.update(config)
        return merged
    msg = f"Expected a connection string or a mapping of pool parameters, got {type(config).__name__}"
    raise ImproperConfigurationError(msg)


class SlimPostgresConfig:
    """Owns the creation and release of a single asyncpg pool."""

    __slots__ = ("pool_config", "pool_instance")

    def __init__(
        self,
        *,
        pool_config: "Optional[Union[PoolConfig, dict[str, Any]]]" = None,
        pool_instance: "Optional[Pool[Record]]" = None,
    ) -> None:
        """Initialize the pool configuration.

        Args:
            pool_config: Pool configuration parameters (TypedDict or dict)
            pool_instance: Existing pool instance to use
        """
        self.pool_config: dict[str, Any] = dict(pool_config) if pool_config else {}
        self.pool_instance = pool_instance

    def __repr__(self) -> str:
        safe_config = {k: ("***" if k in {"password", "dsn"} else v) for k, v in self.pool_config.items()}
        return f"{type(self).__name__}(pool_config={safe_config!r}, pool_instance={self.pool_instance!r})"

    def _get_pool_config_dict(self) -> "dict[str, Any]":
        """Get pool configuration as plain dict for asyncpg.

        Returns:
            Dictionary with pool parameters, filtering out None values.
        """
        config: dict[str, Any] = dict(self.pool_config)
        extras = config.pop("extra", {})
        config.update(extras)
        return {k: v for k, v in config.items() if v is not None}

    async def create_pool(self) -> "Pool[Record]":
        """Create the asyncpg pool and remember it."""
        config = self._get_pool_config_dict()
        self.pool_instance = await asyncpg_create_pool(**config)
        logger.debug(
            "Created connection pool",
            extra={"extra_fields": {"host": config.get("host"), "database": config.get("database")}},
        )
        return self.pool_instance

    async def close_pool(self) -> None:
        """Close the pool, waiting for every connection to be released."""
        if self.pool_instance is None:
            return
        pool, self.pool_instance = self.pool_instance, None
        await pool.close()
        logger.debug("Closed connection pool")

    async def provide_pool(self) -> "Pool[Record]":
        """Provide the pool instance, creating it on first use.

        Returns:
            The async connection pool.
        """
        if self.pool_instance is None:
            return await self.create_pool()
        return self.pool_instance
