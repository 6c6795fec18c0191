from __future__ import annotations

from typing import Protocol

from account_service.domain.entities import PendingRegistration


class TokenCodecPort(Protocol):
    def issue_activation_token(self, pending: PendingRegistration) -> tuple[str, str]:
        """Return (signed token, activation code)."""

    def verify_activation_token(self, token: str) -> tuple[PendingRegistration, str]:
        """Return (pending registration, embedded code). Raise TokenInvalid/TokenExpired."""

    def issue_access_token(self, user_id: str) -> str: ...

    def issue_refresh_token(self, user_id: str) -> str: ...

    def verify_access_token(self, token: str) -> str:
        """Return the user id. Raise TokenInvalid/TokenExpired."""

    def verify_refresh_token(self, token: str) -> str:
        """Return the user id. Raise TokenInvalid/TokenExpired."""
