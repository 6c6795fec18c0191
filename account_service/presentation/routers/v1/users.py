from typing import Annotated, Callable, Optional

from fastapi import APIRouter, Depends, Response, status

from account_service.application.activate_user import activate_user
from account_service.application.login_user import login_user
from account_service.application.manage_session import (
    current_user,
    logout_user,
    refresh_session,
)
from account_service.application.register_user import register_user
from account_service.domain.entities import SessionTokens, UserRecord
from account_service.domain.errors import LoginRequired
from account_service.domain.ports.notification_port import NotificationPort
from account_service.domain.ports.session_cache import SessionCachePort
from account_service.domain.ports.token_codec import TokenCodecPort
from account_service.domain.ports.unit_of_work import UnitOfWorkPort
from account_service.domain.services import public_projection
from account_service.presentation.dependencies import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    get_access_token,
    get_app_settings,
    get_dummy_hash,
    get_hash_password,
    get_notifier,
    get_refresh_token,
    get_sessions,
    get_token_codec,
    get_uow,
    get_verify_password,
)
from account_service.schemas.requests import ActivationIn, LoginIn, RegistrationIn
from account_service.schemas.responses import (
    LoginOut,
    MeOut,
    RefreshOut,
    RegistrationOut,
    SuccessOut,
    UserOut,
)
from account_service.settings import Settings

router = APIRouter(tags=["Users"])


def _user_out(user: UserRecord) -> UserOut:
    return UserOut.model_validate(public_projection(user))


def _set_session_cookies(
    response: Response, tokens: SessionTokens, settings: Settings
) -> None:
    for name, value, ttl in (
        (ACCESS_COOKIE, tokens.access_token, settings.access_token_ttl_seconds),
        (REFRESH_COOKIE, tokens.refresh_token, settings.refresh_token_ttl_seconds),
    ):
        response.set_cookie(
            name,
            value,
            max_age=ttl,
            expires=ttl,
            httponly=True,
            samesite="lax",
            secure=settings.is_production,
        )


def _clear_session_cookies(response: Response, settings: Settings) -> None:
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            name, httponly=True, samesite="lax", secure=settings.is_production
        )


@router.post(
    "/registration",
    status_code=status.HTTP_201_CREATED,
    response_model=RegistrationOut,
)
async def post_registration(
    body: RegistrationIn,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    codec: Annotated[TokenCodecPort, Depends(get_token_codec)],
    notifier: Annotated[NotificationPort, Depends(get_notifier)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    token = await register_user(
        uow=uow,
        codec=codec,
        notifier=notifier,
        name=body.name,
        email=body.email,
        password=body.password,
        app_name=settings.app_name,
        activation_ttl_seconds=settings.activation_ttl_seconds,
    )
    return RegistrationOut(
        message=(
            f"An email has been sent to {body.email}. "
            "Please check your email to activate your account."
        ),
        activation_token=token,
    )


@router.post(
    "/activation",
    status_code=status.HTTP_201_CREATED,
    response_model=SuccessOut,
)
async def post_activation(
    body: ActivationIn,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    codec: Annotated[TokenCodecPort, Depends(get_token_codec)],
    hash_password: Annotated[Callable[..., str], Depends(get_hash_password)],
):
    await activate_user(
        uow=uow,
        codec=codec,
        activation_token=body.activation_token,
        activation_code=body.activation_code,
        hash_password=hash_password,
    )
    return SuccessOut(message="Account has been activated.")


@router.post("/login", response_model=LoginOut)
async def post_login(
    body: LoginIn,
    response: Response,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    codec: Annotated[TokenCodecPort, Depends(get_token_codec)],
    sessions: Annotated[SessionCachePort, Depends(get_sessions)],
    verify_password: Annotated[Callable[[str, str], bool], Depends(get_verify_password)],
    dummy_hash: Annotated[Optional[str], Depends(get_dummy_hash)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    result = await login_user(
        uow=uow,
        codec=codec,
        sessions=sessions,
        email=body.email,
        password=body.password,
        verify_password=verify_password,
        dummy_hash=dummy_hash,
    )
    _set_session_cookies(response, result.tokens, settings)
    return LoginOut(access_token=result.tokens.access_token, user=_user_out(result.user))


@router.get("/logout", response_model=SuccessOut)
async def get_logout(
    response: Response,
    codec: Annotated[TokenCodecPort, Depends(get_token_codec)],
    sessions: Annotated[SessionCachePort, Depends(get_sessions)],
    access_token: Annotated[Optional[str], Depends(get_access_token)],
    refresh_token: Annotated[Optional[str], Depends(get_refresh_token)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    await logout_user(
        codec=codec,
        sessions=sessions,
        access_token=access_token,
        refresh_token=refresh_token,
    )
    _clear_session_cookies(response, settings)
    return SuccessOut(message="Logged out successfully.")


@router.post("/refresh", response_model=RefreshOut)
async def post_refresh(
    response: Response,
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    codec: Annotated[TokenCodecPort, Depends(get_token_codec)],
    sessions: Annotated[SessionCachePort, Depends(get_sessions)],
    refresh_token: Annotated[Optional[str], Depends(get_refresh_token)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    if not refresh_token:
        raise LoginRequired()
    result = await refresh_session(
        uow=uow, codec=codec, sessions=sessions, refresh_token=refresh_token
    )
    _set_session_cookies(response, result.tokens, settings)
    return RefreshOut(access_token=result.tokens.access_token)


@router.get("/me", response_model=MeOut)
async def get_me(
    uow: Annotated[UnitOfWorkPort, Depends(get_uow)],
    codec: Annotated[TokenCodecPort, Depends(get_token_codec)],
    sessions: Annotated[SessionCachePort, Depends(get_sessions)],
    access_token: Annotated[Optional[str], Depends(get_access_token)],
):
    if not access_token:
        raise LoginRequired()
    user = await current_user(
        uow=uow, codec=codec, sessions=sessions, access_token=access_token
    )
    return MeOut(user=_user_out(user))
