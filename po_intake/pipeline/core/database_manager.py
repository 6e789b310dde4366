"""
Asyncpg pool owner for the inventory-mapping store.

The pool is opened in the application lifespan and shared by the
repository; nothing in the pipeline writes through it.
"""

import logging
import time
from typing import Any, Optional

import asyncpg

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Connection pool manager with explicit connect/disconnect lifecycle."""

    def __init__(
        self,
        host: str,
        database: str,
        user: str,
        password: str,
        port: int = 5432,
        min_size: int = 1,
        max_size: int = 10,
        timeout: float = 10.0,
        command_timeout: float = 10.0,
    ):
        self._config = dict(
            host=host,
            port=port,
            database=database,
            user=user,
            password=password,
            min_size=min_size,
            max_size=max_size,
            timeout=timeout,
            command_timeout=command_timeout,
        )
        self._pool: Optional[asyncpg.Pool] = None
        self._closed = False

    async def connect(self) -> None:
        if self._pool:
            logger.warning("Mapping store pool already initialized")
            return
        self._pool = await asyncpg.create_pool(**self._config)
        logger.info(
            "Mapping store pool created",
            extra={"service": "mapping_store"},
        )

    async def disconnect(self) -> None:
        if not self._pool:
            return
        await self._pool.close()
        self._pool = None
        self._closed = True
        logger.info("Mapping store pool closed", extra={"service": "mapping_store"})

    async def get_pool(self) -> asyncpg.Pool:
        """Return the live pool or raise RuntimeError if unavailable."""
        if self._closed:
            raise RuntimeError("DatabaseManager is closed")
        if not self._pool:
            raise RuntimeError("Database pool not initialized. Call connect() first")
        return self._pool

    async def health_check(self) -> dict[str, Any]:
        """Round-trip `SELECT 1` and report latency in milliseconds."""
        try:
            pool = await self.get_pool()
            start = time.perf_counter()
            async with pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            latency_ms = round((time.perf_counter() - start) * 1000, 2)
            return {"healthy": True, "error": None, "latency_ms": latency_ms}
        except Exception as e:
            logger.error("Mapping store health check failed", exc_info=True)
            return {"healthy": False, "error": str(e), "latency_ms": None}

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()


def create_database_manager(settings) -> Optional[DatabaseManager]:
    """Build a DatabaseManager from DatabaseSettings.

    Returns None when DB_HOST is unset; the service then resolves lines
    against an empty in-memory store.
    """
    if not settings.DB_HOST:
        return None

    return DatabaseManager(
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_NAME,
        user=settings.DB_USER,
        password=settings.DB_PASSWORD.get_secret_value(),
        min_size=settings.DB_POOL_MIN_SIZE,
        max_size=settings.DB_POOL_MAX_SIZE,
        timeout=settings.DB_POOL_TIMEOUT,
        command_timeout=settings.DB_COMMAND_TIMEOUT,
    )
