from __future__ import annotations

import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from account_service.domain.errors import StoreUnavailable
from account_service.settings import get_settings

logger = logging.getLogger(__name__)

_client: Optional[Redis] = None


def get_redis() -> Redis:
    """
    Lazy process-wide client for the session cache.
    decode_responses=True, so snapshots come back as str.
    """
    global _client
    if _client is None:
        _client = Redis.from_url(
            get_settings().redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=3,
            socket_timeout=3,
        )
    return _client


async def open_redis() -> Redis:
    """Create the client and check the server answers before serving traffic."""
    client = get_redis()
    try:
        await client.ping()
    except RedisError as e:
        logger.error("session cache unreachable", extra={"error": str(e)})
        await close_redis()
        raise StoreUnavailable("Session cache is unavailable.") from e
    logger.info("session cache connected")
    return client


async def close_redis() -> None:
    global _client
    client, _client = _client, None
    if client is not None:
        await client.aclose()
