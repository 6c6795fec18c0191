from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import psycopg
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from account_service.domain.errors import StoreUnavailable
from account_service.settings import get_settings

logger = logging.getLogger(__name__)

_pool: Optional[AsyncConnectionPool] = None


@dataclass(frozen=True)
class RetryPolicy:
    base: int = 1  # base delay (seconds)
    max_delay: int = 30  # cap (seconds)

    def compute_delay(self, attempts: int) -> int:
        # attempts is the *current* number of attempts already made
        delay = self.base * (2**attempts)
        return delay if delay < self.max_delay else self.max_delay


def _add_connect_timeout(dsn: str, seconds: int = 3) -> str:
    if "connect_timeout=" in dsn:
        return dsn
    sep = "&" if "?" in dsn else "?"
    return f"{dsn}{sep}connect_timeout={seconds}"


def get_pool() -> AsyncConnectionPool:
    """
    Create (if needed) and return the global pool WITHOUT opening it.
    No deprecation warning because we pass open=False.
    """
    global _pool
    if _pool is None:
        _pool = AsyncConnectionPool(
            _add_connect_timeout(get_settings().database_url),
            min_size=1,
            max_size=10,
            timeout=5,
            open=False,  # created closed; caller decides when to open
        )
    return _pool


async def open_pool(
    *,
    attempts: int | None = None,
    retry_policy: RetryPolicy | None = None,
    open_timeout: float = 5.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncConnectionPool:
    """
    Open the global pool, retrying with exponential backoff while Postgres
    is not accepting connections. Raises StoreUnavailable once attempts run out.
    """
    settings = get_settings()
    attempts = attempts or settings.db_connect_attempts
    policy = retry_policy or RetryPolicy(base=settings.db_connect_backoff_seconds)

    for attempt in range(attempts):
        pool = get_pool()
        try:
            await pool.open(wait=True, timeout=open_timeout)
            logger.info("database pool opened", extra={"attempt": attempt + 1})
            return pool
        except (PoolTimeout, psycopg.OperationalError) as e:
            if attempt + 1 == attempts:
                await close_pool()
                raise StoreUnavailable() from e
            delay = policy.compute_delay(attempt)
            logger.warning(
                "database not ready; retrying",
                extra={"attempt": attempt + 1, "retry_in_s": delay, "error": str(e)},
            )
            await close_pool()
            await sleep(delay)
    raise StoreUnavailable()


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
