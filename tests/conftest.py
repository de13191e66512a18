from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest

pytest_plugins = ["pytest_databases.docker.postgres"]

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


class FakePool:
    """Stand-in for ``asyncpg.Pool`` that hands out a single mocked connection."""

    def __init__(self, connection: MagicMock) -> None:
        self.connection = connection
        self.close = AsyncMock()
        self.acquired = 0
        self.released = 0

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[MagicMock]:
        self.acquired += 1
        try:
            yield self.connection
        finally:
            self.released += 1


@pytest.fixture
def mock_connection() -> MagicMock:
    """Create a mock asyncpg connection."""
    connection = MagicMock()
    connection.fetch = AsyncMock(return_value=[])
    connection.execute = AsyncMock(return_value="SELECT 0")
    return connection


@pytest.fixture
def fake_pool(mock_connection: MagicMock) -> FakePool:
    return FakePool(mock_connection)

