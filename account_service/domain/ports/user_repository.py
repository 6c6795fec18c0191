from __future__ import annotations

from typing import Optional, Protocol

from account_service.domain.entities import UserRecord


class UserRepositoryPort(Protocol):
    async def find_by_email(self, email: str) -> Optional[tuple[UserRecord, str]]:
        """
        Fetch user by (normalized) email together with its password hash.
        Return None if not found.
        """

    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        """Fetch user by id. Return None if not found."""

    async def create(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        is_verified: bool = False,
        role: str = "user",
    ) -> UserRecord:
        """
        Insert a new user and return it.
        Raise DuplicateEmail if the email is taken; the check must be atomic
        (unique index), not a prior read.
        """
