from __future__ import annotations

from typing import Optional

import httpx

_client: Optional[httpx.AsyncClient] = None

DEFAULT_LIMITS = httpx.Limits(max_connections=20, max_keepalive_connections=5)


async def open_http_client(
    timeout: float = 10.0,
    *,
    user_agent: str | None = None,
    limits: httpx.Limits = DEFAULT_LIMITS,
) -> httpx.AsyncClient:
    """
    Create the process-wide AsyncClient used for outbound mail relay calls.
    A second call returns the already-open client unchanged.
    """
    global _client
    if _client is None:
        headers = {"User-Agent": user_agent} if user_agent else None
        _client = httpx.AsyncClient(timeout=timeout, limits=limits, headers=headers)
    return _client


def get_http_client() -> httpx.AsyncClient:
    if _client is None:
        raise RuntimeError("HTTP client is not open; the app lifespan opens it.")
    return _client


async def close_http_client() -> None:
    global _client
    client, _client = _client, None
    if client is not None:
        await client.aclose()
