"""Unit tests for pool configuration.

This module tests:
- Merging connection strings, mappings and pool options
- Pool creation and release
- Filtering of None values and ``extra`` parameters
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from slim_postgres.config import ConnectionConfig, PoolConfig, SlimPostgresConfig, resolve_pool_config
from slim_postgres.exceptions import ConnectionStringParseError, ImproperConfigurationError


def test_typeddict_inheritance() -> None:
    """PoolConfig carries every connection field."""
    for field in ConnectionConfig.__annotations__:
        assert field in PoolConfig.__annotations__


@pytest.mark.parametrize(
    ("config", "pool_options", "expected"),
    [
        (None, None, {}),
        (None, {"min_size": 1}, {"min_size": 1}),
        ({"host": "localhost", "database": "app"}, None, {"host": "localhost", "database": "app"}),
        ({"host": "a"}, {"host": "b", "max_size": 4}, {"host": "a", "max_size": 4}),
        (
            "postgres://app:secret@db:5433/orders",
            {"max_size": 10, "host": "ignored"},
            {"host": "db", "port": 5433, "user": "app", "password": "secret", "database": "orders", "max_size": 10},
        ),
    ],
    ids=["empty", "options_only", "mapping", "mapping_overrides_options", "connection_string"],
)
def test_resolve_pool_config(
    config: Any, pool_options: dict[str, Any] | None, expected: dict[str, Any]
) -> None:
    assert resolve_pool_config(config, pool_options) == expected


def test_resolve_pool_config_does_not_mutate_inputs() -> None:
    options = {"min_size": 1}
    config = {"host": "localhost"}

    resolve_pool_config(config, options)

    assert options == {"min_size": 1}
    assert config == {"host": "localhost"}


def test_resolve_pool_config_rejects_other_types() -> None:
    with pytest.raises(ImproperConfigurationError):
        resolve_pool_config(42)  # type: ignore[arg-type]


def test_resolve_pool_config_unknown_connection_string() -> None:
    with pytest.raises(ConnectionStringParseError):
        resolve_pool_config("mysql://root@localhost/db")


def test_pool_config_dict_merges_extra_and_drops_none() -> None:
    config = SlimPostgresConfig(
        pool_config={"host": "localhost", "password": None, "extra": {"custom_param": "value"}}
    )

    assert config._get_pool_config_dict() == {"host": "localhost", "custom_param": "value"}
    assert config.pool_config["extra"] == {"custom_param": "value"}


def test_repr_hides_secrets() -> None:
    config = SlimPostgresConfig(pool_config={"host": "localhost", "password": "hunter2"})

    assert "hunter2" not in repr(config)
    assert "localhost" in repr(config)


@pytest.mark.asyncio
async def test_create_pool_passes_config_to_asyncpg() -> None:
    mock_pool = MagicMock()
    config = SlimPostgresConfig(pool_config={"host": "localhost", "min_size": 2, "ssl": None})

    with patch("slim_postgres.config.asyncpg_create_pool", new=AsyncMock(return_value=mock_pool)) as create_pool:
        pool = await config.create_pool()

    create_pool.assert_awaited_once_with(host="localhost", min_size=2)
    assert pool is mock_pool
    assert config.pool_instance is mock_pool


@pytest.mark.asyncio
async def test_provide_pool_creates_once() -> None:
    mock_pool = MagicMock()
    config = SlimPostgresConfig(pool_config={"host": "localhost"})

    with patch("slim_postgres.config.asyncpg_create_pool", new=AsyncMock(return_value=mock_pool)) as create_pool:
        first = await config.provide_pool()
        second = await config.provide_pool()

    assert first is second is mock_pool
    create_pool.assert_awaited_once()


@pytest.mark.asyncio
async def test_provide_pool_uses_existing_instance() -> None:
    mock_pool = MagicMock()
    config = SlimPostgresConfig(pool_instance=mock_pool)

    with patch("slim_postgres.config.asyncpg_create_pool", new=AsyncMock()) as create_pool:
        assert await config.provide_pool() is mock_pool

    create_pool.assert_not_awaited()


@pytest.mark.asyncio
async def test_close_pool() -> None:
    mock_pool = MagicMock()
    mock_pool.close = AsyncMock()
    config = SlimPostgresConfig(pool_instance=mock_pool)

    await config.close_pool()
    await config.close_pool()

    mock_pool.close.assert_awaited_once()
    assert config.pool_instance is None
