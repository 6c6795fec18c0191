from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from account_service.infrastructure.db.pool import close_pool, open_pool
from account_service.infrastructure.email.http_smtp_adapter import (
    HttpSmtpNotificationAdapter,
)
from account_service.infrastructure.http.client import (
    close_http_client,
    get_http_client,
    open_http_client,
)
from account_service.infrastructure.redis_cache.pool import close_redis, open_redis
from account_service.logging import setup_logging
from account_service.presentation.api import api
from account_service.presentation.errors import register_error_handlers
from account_service.settings import get_settings

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    await open_pool()
    await open_redis()
    await open_http_client(
        timeout=settings.smtp_timeout_seconds, user_agent=settings.app_name
    )

    # ONE shared notifier, using the shared HTTP client
    notifier = HttpSmtpNotificationAdapter(
        base_url=settings.smtp_base_url,
        from_address=settings.mail_from_address,
        client=get_http_client(),
    )
    app.state.notifier = notifier  # expose to dependencies

    try:
        yield
    finally:
        # shutdown
        await notifier.aclose()  # it won't close the shared client
        await close_http_client()
        await close_redis()
        await close_pool()


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(api)
    return app


app = create_app()
