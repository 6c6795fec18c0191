from typing import Callable, Optional

from fastapi import Cookie, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from account_service.domain.ports.notification_port import NotificationPort
from account_service.domain.ports.session_cache import SessionCachePort
from account_service.domain.ports.token_codec import TokenCodecPort
from account_service.domain.ports.unit_of_work import UnitOfWorkPort
from account_service.infrastructure.db.pool import get_pool
from account_service.infrastructure.db.uow import PgUnitOfWork
from account_service.infrastructure.redis_cache.pool import get_redis
from account_service.infrastructure.redis_cache.sessions import RedisSessionCache
from account_service.infrastructure.security.password import (
    dummy_password_hash,
    hash_password,
    verify_password,
)
from account_service.infrastructure.security.tokens import TokenCodec
from account_service.settings import Settings, get_settings

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings() -> Settings:
    return get_settings()


def get_uow() -> UnitOfWorkPort:
    return PgUnitOfWork(get_pool())


def get_token_codec(
    settings: Settings = Depends(get_app_settings),
) -> TokenCodecPort:
    return TokenCodec(settings)


def get_sessions(
    settings: Settings = Depends(get_app_settings),
) -> SessionCachePort:
    return RedisSessionCache(get_redis(), ttl_seconds=settings.session_ttl_seconds)


def get_hash_password() -> Callable[..., str]:
    return hash_password


def get_verify_password() -> Callable[[str, str], bool]:
    return verify_password


def get_dummy_hash() -> Optional[str]:
    return dummy_password_hash()


def get_notifier(request: Request) -> NotificationPort:
    # This is set in account_service.main lifespan()
    return request.app.state.notifier


def get_access_token(
    access_token: Optional[str] = Cookie(default=None),
    auth: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Access token from the cookie, else from an `Authorization: Bearer` header."""
    if access_token:
        return access_token
    if auth and auth.credentials:
        return auth.credentials
    return None


def get_refresh_token(
    refresh_token: Optional[str] = Cookie(default=None),
) -> Optional[str]:
    return refresh_token
