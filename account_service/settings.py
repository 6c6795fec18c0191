from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_SECRET_PREFIX = "dev-"


class Settings(BaseSettings):
    # App
    app_name: str = "Account Service"
    app_env: str = "dev"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Infra
    database_url: str = "postgresql://app:app@db:5432/app"
    db_connect_attempts: int = 5
    db_connect_backoff_seconds: int = 1
    redis_url: str = "redis://redis:6379/0"
    smtp_base_url: str = "http://smtp-mock:8025"
    smtp_timeout_seconds: float = 10.0
    mail_from_address: str = "no-reply@example.com"

    # Tokens
    activation_secret: str = "dev-activation-secret-change-me-in-env"
    access_token_secret: str = "dev-access-secret-change-me-in-env"
    refresh_token_secret: str = "dev-refresh-secret-change-me-in-env"
    activation_ttl_seconds: int = 600
    access_token_ttl_seconds: int = 300
    refresh_token_ttl_seconds: int = 1200
    session_ttl_seconds: int = 7 * 24 * 3600

    # Security / policies
    bcrypt_rounds: int = 12

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="after")
    def _check_secrets(self) -> "Settings":
        secrets = (
            self.activation_secret,
            self.access_token_secret,
            self.refresh_token_secret,
        )
        if len(set(secrets)) != len(secrets):
            raise ValueError("activation, access and refresh secrets must differ")
        if self.is_production and any(
            s.startswith(DEV_SECRET_PREFIX) for s in secrets
        ):
            raise ValueError("development token secrets are not allowed in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
