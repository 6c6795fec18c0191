from __future__ import annotations

from typing import Any, Protocol


class NotificationPort(Protocol):
    async def send(
        self,
        *,
        to: str,
        subject: str,
        template: str,
        data: dict[str, Any],
    ) -> None:
        """Render `template` with `data` and deliver it. Raise DeliveryError on failure."""
