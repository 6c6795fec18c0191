from __future__ import annotations

from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from account_service.domain.errors import StoreUnavailable
from account_service.domain.ports.session_cache import SessionCachePort


class RedisSessionCache(SessionCachePort):
    """
    One session snapshot per user id under `<prefix><user_id>`.
    Every login overwrites the previous snapshot.
    """

    def __init__(
        self, redis: Redis, *, key_prefix: str = "sess:", ttl_seconds: int = 604800
    ) -> None:
        self._redis = redis
        self._prefix = key_prefix
        self._ttl = ttl_seconds

    def _key(self, user_id: str) -> str:
        return f"{self._prefix}{user_id}"

    async def set(self, user_id: str, snapshot: str) -> None:
        try:
            await self._redis.set(self._key(user_id), snapshot, ex=self._ttl)
        except RedisError as e:
            raise StoreUnavailable("Session cache is unavailable.") from e

    async def get(self, user_id: str) -> Optional[str]:
        try:
            return await self._redis.get(self._key(user_id))
        except RedisError as e:
            raise StoreUnavailable("Session cache is unavailable.") from e

    async def delete(self, user_id: str) -> None:
        try:
            await self._redis.delete(self._key(user_id))
        except RedisError as e:
            raise StoreUnavailable("Session cache is unavailable.") from e
