from __future__ import annotations

from typing import Any, Optional

import psycopg
from psycopg import errors as pg_errors
from psycopg.types.json import Json

from account_service.domain.entities import UserRecord, normalize_email
from account_service.domain.errors import DuplicateEmail, StoreUnavailable
from account_service.domain.ports.user_repository import UserRepositoryPort

_COLUMNS = "id, name, email, role, is_verified, avatar, created_at, updated_at"


def _to_user(row: tuple[Any, ...]) -> UserRecord:
    id_, name, email, role, is_verified, avatar, created_at, updated_at = row
    return UserRecord(
        id=str(id_),
        name=str(name),
        email=str(email),
        role=role,
        is_verified=bool(is_verified),
        avatar=avatar,
        created_at=created_at,
        updated_at=updated_at,
    )


class PgUserRepository(UserRepositoryPort):
    """
    Postgres implementation of UserRepositoryPort.

    NOTE:
    - This repo is constructed with an *active async connection* supplied by the UoW.
    - It does not commit; the UnitOfWork controls the transaction boundary.
    - Email uniqueness is the job of the `users_email_key` unique index.
    """

    def __init__(self, conn: psycopg.AsyncConnection) -> None:
        self._conn = conn

    async def find_by_email(self, email: str) -> Optional[tuple[UserRecord, str]]:
        sql = f"""
        SELECT {_COLUMNS}, password_hash
        FROM users
        WHERE email = %s
        """
        try:
            async with self._conn.cursor() as cur:
                await cur.execute(sql, (normalize_email(email),))
                row = await cur.fetchone()
        except psycopg.OperationalError as e:
            raise StoreUnavailable() from e
        if not row:
            return None
        return _to_user(row[:-1]), row[-1]

    async def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        sql = f"SELECT {_COLUMNS} FROM users WHERE id = %s"
        try:
            async with self._conn.cursor() as cur:
                await cur.execute(sql, (user_id,))
                row = await cur.fetchone()
        except pg_errors.InvalidTextRepresentation:
            # not a uuid
            return None
        except psycopg.OperationalError as e:
            raise StoreUnavailable() from e
        return _to_user(row) if row else None

    async def create(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        is_verified: bool = False,
        role: str = "user",
        avatar: dict[str, str] | None = None,
    ) -> UserRecord:
        sql = f"""
        INSERT INTO users (name, email, password_hash, role, is_verified, avatar)
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING {_COLUMNS}
        """
        params = (
            name,
            normalize_email(email),
            password_hash,
            role,
            is_verified,
            Json(avatar) if avatar is not None else None,
        )
        try:
            async with self._conn.cursor() as cur:
                await cur.execute(sql, params)
                row = await cur.fetchone()
        except pg_errors.UniqueViolation as e:
            raise DuplicateEmail() from e
        except psycopg.OperationalError as e:
            raise StoreUnavailable() from e

        if not row:
            raise RuntimeError("create returned no row")
        return _to_user(row)
