import logging

from account_service.application.login_user import LoginResult, issue_session
from account_service.domain.entities import UserRecord
from account_service.domain.errors import StoreUnavailable, TokenExpired, TokenInvalid
from account_service.domain.ports.session_cache import SessionCachePort
from account_service.domain.ports.unit_of_work import UnitOfWorkPort
from account_service.domain.ports.token_codec import TokenCodecPort

logger = logging.getLogger(__name__)

SESSION_EXPIRED = "Session expired. Please login again."


async def logout_user(
    codec: TokenCodecPort,
    sessions: SessionCachePort,
    access_token: str | None,
    refresh_token: str | None = None,
) -> None:
    """
    Drop the cached session of whoever holds the presented tokens.

    The access token is tried first; the refresh token covers the common
    case of an access token that already expired. Never fails: the caller
    clears the cookies regardless.
    """
    user_id = _session_owner(codec, access_token, refresh_token)
    if user_id is None:
        return
    try:
        await sessions.delete(user_id)
    except StoreUnavailable as e:
        logger.warning(
            "logout could not drop session",
            extra={"user_id": user_id, "reason": e.message},
        )
        return
    logger.info("user logged out", extra={"user_id": user_id})


def _session_owner(
    codec: TokenCodecPort, access_token: str | None, refresh_token: str | None
) -> str | None:
    for verify, token in (
        (codec.verify_access_token, access_token),
        (codec.verify_refresh_token, refresh_token),
    ):
        if not token:
            continue
        try:
            return verify(token)
        except (TokenInvalid, TokenExpired) as e:
            logger.info("logout token rejected", extra={"reason": e.message})
    return None


async def current_user(
    uow: UnitOfWorkPort,
    codec: TokenCodecPort,
    sessions: SessionCachePort,
    access_token: str,
) -> UserRecord:
    user_id = codec.verify_access_token(access_token)
    if await sessions.get(user_id) is None:
        raise TokenInvalid(SESSION_EXPIRED)
    async with uow as transaction:
        user = await transaction.users.get_by_id(user_id)
    if user is None:
        raise TokenInvalid(SESSION_EXPIRED)
    return user


async def refresh_session(
    uow: UnitOfWorkPort,
    codec: TokenCodecPort,
    sessions: SessionCachePort,
    refresh_token: str,
) -> LoginResult:
    """Rotate both tokens for a live session."""
    user_id = codec.verify_refresh_token(refresh_token)
    if await sessions.get(user_id) is None:
        raise TokenInvalid(SESSION_EXPIRED)
    async with uow as transaction:
        user = await transaction.users.get_by_id(user_id)
    if user is None:
        await sessions.delete(user_id)
        raise TokenInvalid(SESSION_EXPIRED)
    tokens = await issue_session(codec, sessions, user)
    logger.info("session refreshed", extra={"user_id": user.id})
    return LoginResult(user=user, tokens=tokens)
