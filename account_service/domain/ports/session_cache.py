from typing import Optional, Protocol


class SessionCachePort(Protocol):
    async def set(self, user_id: str, snapshot: str) -> None:
        """Store/replace the session snapshot of a user (last write wins)."""

    async def get(self, user_id: str) -> Optional[str]:
        """Return the cached snapshot, or None if absent/expired."""

    async def delete(self, user_id: str) -> None:
        """Drop the session of a user (logout)."""
