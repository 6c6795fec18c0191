from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import jwt

import account_service.domain.services as domain_services
from account_service.domain.entities import PendingRegistration
from account_service.domain.errors import TokenExpired, TokenInvalid
from account_service.domain.ports.token_codec import TokenCodecPort
from account_service.settings import Settings

ALGORITHM = "HS256"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec(TokenCodecPort):
    """
    Signs and verifies the three token kinds.

    Each kind has its own secret, so a token of one kind never verifies as
    another. Expiry is carried in the `exp` claim and enforced by PyJWT.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._activation_secret = settings.activation_secret
        self._access_secret = settings.access_token_secret
        self._refresh_secret = settings.refresh_token_secret
        self._activation_ttl = timedelta(seconds=settings.activation_ttl_seconds)
        self._access_ttl = timedelta(seconds=settings.access_token_ttl_seconds)
        self._refresh_ttl = timedelta(seconds=settings.refresh_token_ttl_seconds)
        self._clock = clock

    def _encode(self, claims: dict[str, Any], secret: str, ttl: timedelta) -> str:
        now = self._clock()
        payload = {**claims, "iat": now, "exp": now + ttl}
        return jwt.encode(payload, secret, algorithm=ALGORITHM)

    def _decode(self, token: str, secret: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired() from e
        except jwt.InvalidTokenError as e:
            raise TokenInvalid() from e

    # activation

    def issue_activation_token(
        self, pending: PendingRegistration
    ) -> tuple[str, str]:
        """Return (token, code); the code is also sent out-of-band."""
        code = domain_services.generate_4digit_code()
        claims = {
            "user": {
                "name": pending.name,
                "email": pending.email,
                "password": pending.password,
            },
            "activationCode": code,
        }
        token = self._encode(claims, self._activation_secret, self._activation_ttl)
        return token, code

    def verify_activation_token(self, token: str) -> tuple[PendingRegistration, str]:
        claims = self._decode(token, self._activation_secret)
        user = claims.get("user")
        code = claims.get("activationCode")
        if not isinstance(user, dict) or not isinstance(code, str):
            raise TokenInvalid()
        try:
            pending = PendingRegistration(
                name=str(user["name"]),
                email=str(user["email"]),
                password=str(user["password"]),
            )
        except (KeyError, ValueError) as e:
            raise TokenInvalid() from e
        return pending, code

    # sessions

    def issue_access_token(self, user_id: str) -> str:
        return self._encode({"sub": user_id}, self._access_secret, self._access_ttl)

    def issue_refresh_token(self, user_id: str) -> str:
        return self._encode({"sub": user_id}, self._refresh_secret, self._refresh_ttl)

    def verify_access_token(self, token: str) -> str:
        return self._subject(self._decode(token, self._access_secret))

    def verify_refresh_token(self, token: str) -> str:
        return self._subject(self._decode(token, self._refresh_secret))

    @staticmethod
    def _subject(claims: dict[str, Any]) -> str:
        sub = claims.get("sub")
        if not isinstance(sub, str) or not sub:
            raise TokenInvalid()
        return sub
