import logging
import traceback
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import wraps
from typing import Any

import asyncpg
from pydantic import BaseModel, Field

from postdeck.errors import InternalError

logger = logging.getLogger(__name__)

# Driver-level failures that surface as InternalError
DRIVER_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    TimeoutError,
)

# Context variable to store the current database connection (only one per context)
_current_connection: ContextVar[asyncpg.Connection | None] = ContextVar(
    "current_connection", default=None
)
_db_pools: dict[str, asyncpg.Pool] = {}
_acquire_timeouts: dict[str, float | None] = {}


class PoolConfig(BaseModel):
    """Connection pool bounds and timeouts (seconds)"""

    min_size: int = Field(default=5, ge=0)
    max_size: int = Field(default=100, ge=1)
    connect_timeout: float = Field(default=8.0, gt=0)
    acquire_timeout: float = Field(default=8.0, gt=0)
    idle_timeout: float = Field(default=8.0, ge=0)


@dataclass
class QueryLog:
    """Represents a logged query"""

    query: str
    params: list[Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    stack_trace: str | None = None

    def __repr__(self) -> str:
        return f"QueryLog(query={self.query!r}, params={self.params!r}, timestamp={self.timestamp})"


class QueryTracker:
    """Tracks queries executed during a context"""

    def __init__(self):
        self.queries: list[QueryLog] = []
        self._enabled: bool = False

    def enable(self):
        self._enabled = True

    def disable(self):
        self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def log_query(self, query: str, params: list[Any], stack_trace: str | None = None):
        """Log a query with its parameters and optional stack trace"""
        if self._enabled:
            self.queries.append(
                QueryLog(query=query, params=params, stack_trace=stack_trace)
            )

    def get_queries(self) -> list[QueryLog]:
        return self.queries.copy()

    def clear(self):
        self.queries.clear()

    def count(self) -> int:
        return len(self.queries)


# Context variable to store the query tracker
_query_tracker: ContextVar[QueryTracker | None] = ContextVar(
    "query_tracker", default=None
)


class DatabaseManager:
    """Manages database pools and connections"""

    @classmethod
    async def create_pool(
        cls, dsn: str, config: PoolConfig | None = None, name: str = "default"
    ) -> asyncpg.Pool:
        """Open an asyncpg pool for ``dsn`` and register it under ``name``."""
        config = config or PoolConfig()
        try:
            pool = await asyncpg.create_pool(
                dsn,
                min_size=config.min_size,
                max_size=config.max_size,
                timeout=config.connect_timeout,
                max_inactive_connection_lifetime=config.idle_timeout,
            )
        except DRIVER_ERRORS as exc:
            raise InternalError(f"could not connect to database: {exc}") from exc
        await cls.add_pool(name, pool, acquire_timeout=config.acquire_timeout)
        logger.info(
            "database pool %r ready (min=%d, max=%d)",
            name,
            config.min_size,
            config.max_size,
        )
        return pool

    @classmethod
    async def add_pool(
        cls, name: str, pool: asyncpg.Pool, acquire_timeout: float | None = None
    ):
        """Add a database pool with a name"""
        _db_pools[name] = pool
        _acquire_timeouts[name] = acquire_timeout

    @classmethod
    async def get_pool(cls, name: str = "default") -> asyncpg.Pool:
        """Get a database pool by name"""
        if name not in _db_pools:
            raise ValueError(f"Database pool '{name}' not found")
        return _db_pools[name]

    @classmethod
    async def close_pool(cls, name: str = "default"):
        """Close and forget a pool; unknown names are ignored"""
        pool = _db_pools.pop(name, None)
        _acquire_timeouts.pop(name, None)
        if pool is not None:
            await pool.close()
            logger.info("database pool %r closed", name)

    @classmethod
    def get_current_connection(cls) -> asyncpg.Connection | None:
        """Get the current active connection from context"""
        return _current_connection.get()

    @classmethod
    def get_query_tracker(cls) -> QueryTracker | None:
        """Get the current query tracker from context"""
        return _query_tracker.get()

    @classmethod
    def log_query(cls, query: str, params: list[Any]):
        """Log a query and record it in the current query tracker if available"""
        logger.debug("query: %s params: %r", query, params)
        tracker = _query_tracker.get()
        if tracker:
            # Skip the last 2 frames: this method and the DatabaseOperations method
            stack = traceback.extract_stack()
            stack_trace = "".join(traceback.format_list(stack[:-2]))
            tracker.log_query(query, params, stack_trace)

    @classmethod
    @asynccontextmanager
    async def transaction(cls, db_name: str = "default", track_queries: bool = False):
        """Context manager for database transactions.

        Behavior:
        - If called within an existing transaction/connection, it opens a nested transaction using the same connection.
        - Otherwise it acquires a connection from the pool, waiting at most the pool's acquire timeout,
          and starts a transaction. The connection is always released back to the pool on exit.
        - Failing to acquire a connection, or to begin or commit the transaction, raises InternalError.

        Args:
            db_name: Name of the database pool to use
            track_queries: Whether to enable query tracking for this transaction
        """
        current_conn = _current_connection.get()
        current_tracker = _query_tracker.get()

        if current_conn:
            try:
                async with current_conn.transaction():
                    yield current_conn
            except (asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
                raise InternalError(f"transaction failed: {exc}") from exc
            return

        pool = await cls.get_pool(db_name)
        try:
            conn = await pool.acquire(timeout=_acquire_timeouts.get(db_name))
        except DRIVER_ERRORS as exc:
            logger.error("could not acquire connection from pool %r: %s", db_name, exc)
            raise InternalError(f"could not acquire database connection: {exc}") from exc

        conn_token = _current_connection.set(conn)
        tracker_token = None
        if track_queries and not current_tracker:
            tracker = QueryTracker()
            tracker.enable()
            tracker_token = _query_tracker.set(tracker)

        try:
            async with conn.transaction():
                yield conn
        except (asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
            raise InternalError(f"transaction failed: {exc}") from exc
        finally:
            _current_connection.reset(conn_token)
            if tracker_token:
                _query_tracker.reset(tracker_token)
            await pool.release(conn)

    @classmethod
    @asynccontextmanager
    async def track_queries(cls):
        """Context manager specifically for query tracking.

        async with DatabaseManager.track_queries() as tracker:
            await repo.get_by_id(post_id)
            queries = tracker.get_queries()
        """
        current_tracker = _query_tracker.get()

        if current_tracker:
            was_enabled = current_tracker.is_enabled()
            current_tracker.enable()
            try:
                yield current_tracker
            finally:
                if not was_enabled:
                    current_tracker.disable()
        else:
            tracker = QueryTracker()
            tracker.enable()
            token = _query_tracker.set(tracker)
            try:
                yield tracker
            finally:
                _query_tracker.reset(token)


def transactional(db_name: str = "default", query_logs: bool = False):
    """Decorator to run a function within a database transaction.

    Args:
        db_name: Name of the database pool to use
        query_logs: Whether to enable query tracking for this transaction

    Example:
        @transactional(query_logs=True)
        async def publish(repo, payload):
            post_id = await repo.create(payload.title, payload.excerpt, payload.content)
            return await repo.get_by_id(post_id)
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            async with DatabaseManager.transaction(db_name, track_queries=query_logs):
                return await func(*args, **kwargs)

        return wrapper

    return decorator
