"""
Database connection management
Async PostgreSQL executor using asyncpg
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional, Sequence

import asyncpg

from actions.errors import ExecutionError
from actions.executor import ExecuteOptions, QueryResult
from config import DatabaseConfig
from utils.error_messages import enhance_error_message

logger = logging.getLogger(__name__)

# Failures that belong to the database side of the contract
DATABASE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, asyncio.TimeoutError, OSError)


def _row_count(status: Optional[str], fetched: int) -> int:
    """
    Row count from a command tag ("INSERT 0 3", "UPDATE 2", "SELECT 5").
    Tags without a count (BEGIN, VACUUM, ...) fall back to the rows fetched.
    """
    if status:
        last = status.rsplit(" ", 1)[-1]
        if last.isdigit():
            return int(last)
    return fetched


async def _run(conn, sql: str, params: Sequence[Any], options: Optional[ExecuteOptions]) -> QueryResult:
    timeout = options.timeout_seconds if options else None
    try:
        stmt = await conn.prepare(sql, timeout=timeout)
        records = await stmt.fetch(*params, timeout=timeout)
    except DATABASE_ERRORS as e:
        message = enhance_error_message(e)
        logger.error(f"❌ Statement failed: {message}")
        raise ExecutionError(message, sqlstate=getattr(e, "sqlstate", None)) from e

    rows = [dict(r) for r in records]
    return QueryResult(rows=rows, row_count=_row_count(stmt.get_statusmsg(), len(rows)))


class DatabaseSession:
    """
    One pooled connection reserved for a caller until release().

    Used to keep BEGIN ... COMMIT on the same connection across separate
    tool calls.
    """

    def __init__(self, pool: asyncpg.Pool, connection):
        self._pool = pool
        self._connection = connection

    async def execute(
        self,
        sql: str,
        params: Sequence[Any] = (),
        options: Optional[ExecuteOptions] = None,
    ) -> QueryResult:
        if self._connection is None:
            raise RuntimeError("Session already released")
        return await _run(self._connection, sql, params, options)

    async def release(self):
        """Return the connection to the pool; safe to call twice."""
        if self._connection is None:
            return
        connection, self._connection = self._connection, None
        await self._pool.release(connection)
        logger.info("Transaction session released")


class DatabaseConnection:
    """
    Manages the PostgreSQL connection pool and runs built statements
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self):
        """Initialize connection pool"""
        if self.pool is not None:
            logger.warning("Connection pool already initialized")
            return

        try:
            self.pool = await asyncpg.create_pool(
                host=self.config.host,
                port=self.config.port,
                database=self.config.database,
                user=self.config.user,
                password=self.config.password,
                min_size=self.config.min_pool_size,
                max_size=self.config.max_pool_size,
                command_timeout=self.config.command_timeout,
                ssl=self.config.ssl_setting,
                # built statements are never reused
                statement_cache_size=0,
            )
            logger.info(f"✅ Connected to PostgreSQL at {self.config.host}:{self.config.port}")

        except Exception as e:
            logger.error(f"❌ Failed to connect to database: {e}")
            raise

    async def disconnect(self):
        """Close connection pool"""
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            logger.info("Database connection pool closed")

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.pool

    @asynccontextmanager
    async def acquire(self):
        """
        Acquire a connection from the pool.

        Usage:
            async with db.acquire() as conn:
                rows = await conn.fetch("SELECT 1")
        """
        async with self._require_pool().acquire() as connection:
            yield connection

    async def execute(
        self,
        sql: str,
        params: Sequence[Any] = (),
        options: Optional[ExecuteOptions] = None,
    ) -> QueryResult:
        """
        Run one statement on a pooled connection.

        Args:
            sql: SQL text with $n placeholders
            params: Positional parameter values
            options: timeout_ms for this statement

        Raises:
            ExecutionError: database-side failure, timeout or lost connection
        """
        async with self.acquire() as conn:
            return await _run(conn, sql, params, options)

    async def create_session(self) -> DatabaseSession:
        """Reserve one connection until the returned session is released."""
        pool = self._require_pool()
        connection = await pool.acquire()
        logger.info("Transaction session opened")
        return DatabaseSession(pool, connection)

    async def get_pool_stats(self) -> Dict[str, Any]:
        """
        Get connection pool statistics for monitoring.

        Returns:
            Dictionary with pool stats (size, free connections, etc.)
        """
        if self.pool is None:
            return {
                'status': 'disconnected',
                'size': 0,
                'freesize': 0
            }

        return {
            'status': 'connected',
            'size': self.pool.get_size(),
            'freesize': self.pool.get_idle_size(),
            'min_size': self.config.min_pool_size,
            'max_size': self.config.max_pool_size
        }
