import pytest_asyncio
from redis.asyncio import Redis

from account_service.settings import get_settings


@pytest_asyncio.fixture
async def redis_client():
    """Real Redis at REDIS_URL; each test namespaces its own keys."""
    client = Redis.from_url(get_settings().redis_url, decode_responses=True)
    try:
        yield client
    finally:
        await client.aclose()
