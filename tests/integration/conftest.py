import pytest
import pytest_asyncio

from postdeck.db_context import DatabaseManager, PoolConfig
from postdeck.post_repository import PostRepository


@pytest.fixture(scope="session")
def postgres_container():
    """Start a PostgreSQL test container for the session."""
    postgres = pytest.importorskip("testcontainers.postgres")
    try:
        container = postgres.PostgresContainer("postgres:17")
        container.start()
    except Exception as exc:  # no docker daemon on this machine
        pytest.skip(f"PostgreSQL container unavailable: {exc}")
    yield container
    container.stop()


@pytest.fixture(scope="session")
def postgres_dsn(postgres_container):
    host = postgres_container.get_container_host_ip()
    port = postgres_container.get_exposed_port(5432)
    return (
        f"postgresql://{postgres_container.username}:{postgres_container.password}"
        f"@{host}:{port}/{postgres_container.dbname}"
    )


@pytest_asyncio.fixture
async def pg_pool(postgres_dsn):
    """Create a fresh pool and an empty posts table for each test."""
    pool = await DatabaseManager.create_pool(
        postgres_dsn, PoolConfig(min_size=1, max_size=5), name="default"
    )
    await PostRepository().create_schema()

    yield pool

    async with pool.acquire() as conn:
        await conn.execute("DROP TABLE IF EXISTS posts;")
    await DatabaseManager.close_pool("default")


@pytest.fixture
def post_repo(pg_pool):
    return PostRepository()


