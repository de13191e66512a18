from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from pytest_databases.docker.postgres import PostgresService

from slim_postgres import SlimPostgres

TEMP_TABLE = "temptable"


@pytest.fixture
def postgres_dsn(postgres_service: PostgresService) -> str:
    return (
        f"postgres://{postgres_service.user}:{postgres_service.password}"
        f"@{postgres_service.host}:{postgres_service.port}/{postgres_service.database}"
    )


@pytest_asyncio.fixture
async def db(postgres_dsn: str) -> AsyncGenerator[SlimPostgres, None]:
    """Facade with an empty ``temptable (id SERIAL PRIMARY KEY, name VARCHAR(255))``."""
    database = SlimPostgres(postgres_dsn, {"min_size": 1, "max_size": 4})
    await database.execute(f"DROP TABLE IF EXISTS {TEMP_TABLE}")
    await database.execute(f"CREATE TABLE {TEMP_TABLE} (id SERIAL PRIMARY KEY, name VARCHAR(255))")
    try:
        yield database
    finally:
        if not database.has_open_pool():
            database.connect()
        await database.execute(f"DROP TABLE IF EXISTS {TEMP_TABLE}")
        await database.close()
