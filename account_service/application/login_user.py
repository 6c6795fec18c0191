import logging
from dataclasses import dataclass
from typing import Callable

from fastapi.concurrency import run_in_threadpool

from account_service.domain.entities import SessionTokens, UserRecord, normalize_email
from account_service.domain.errors import InvalidCredentials
from account_service.domain.ports.session_cache import SessionCachePort
from account_service.domain.ports.unit_of_work import UnitOfWorkPort
from account_service.domain.services import session_snapshot
from account_service.domain.ports.token_codec import TokenCodecPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    user: UserRecord
    tokens: SessionTokens


async def login_user(
    uow: UnitOfWorkPort,
    codec: TokenCodecPort,
    sessions: SessionCachePort,
    email: str,
    password: str,
    verify_password: Callable[[str, str], bool],
    dummy_hash: str | None = None,
) -> LoginResult:
    try:
        normalized_email = normalize_email(email)
    except ValueError:
        raise InvalidCredentials() from None

    async with uow as transaction:
        record = await transaction.users.find_by_email(normalized_email)

    if record is None:
        if dummy_hash is not None:
            await run_in_threadpool(verify_password, password, dummy_hash)
        raise InvalidCredentials()

    user, password_hash = record
    if not await run_in_threadpool(verify_password, password, password_hash):
        raise InvalidCredentials()

    tokens = await issue_session(codec, sessions, user)
    logger.info("user logged in", extra={"user_id": user.id})
    return LoginResult(user=user, tokens=tokens)


async def issue_session(
    codec: TokenCodecPort, sessions: SessionCachePort, user: UserRecord
) -> SessionTokens:
    """Sign a fresh token pair and overwrite the cached snapshot of the user."""
    tokens = SessionTokens(
        access_token=codec.issue_access_token(user.id),
        refresh_token=codec.issue_refresh_token(user.id),
    )
    await sessions.set(user.id, session_snapshot(user))
    return tokens
