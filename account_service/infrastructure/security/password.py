from __future__ import annotations

import secrets
from functools import lru_cache

from passlib.context import CryptContext

from account_service.settings import get_settings

# One global context; bcrypt is the only scheme we use.
_pwd = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str, *, rounds: int | None = None) -> str:
    """
    Hash a password using bcrypt. If rounds is None, use settings.bcrypt_rounds.
    """
    if rounds is None:
        rounds = int(get_settings().bcrypt_rounds)
    return _pwd.hash(plain, rounds=rounds)


def verify_password(plain: str, password_hash: str) -> bool:
    """
    Verify a password against its bcrypt hash (safe timing).
    Malformed hashes count as a mismatch.
    """
    try:
        return _pwd.verify(plain, password_hash)
    except ValueError:
        return False


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """
    Hash compared against when the email is unknown, so both login failures
    cost one bcrypt verification.
    """
    return hash_password(secrets.token_urlsafe(16))
