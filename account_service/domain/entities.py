from dataclasses import dataclass
from datetime import datetime
from typing import Literal


def normalize_email(email: str) -> str:
    normalized = (email or "").strip().lower()
    if not normalized:
        raise ValueError("email is required")
    return normalized


@dataclass(frozen=True)
class PendingRegistration:
    """Registration data carried inside an activation token until redeemed."""

    name: str
    email: str
    password: str

    def __post_init__(self):
        object.__setattr__(self, "email", normalize_email(self.email))


@dataclass
class UserRecord:
    id: str
    name: str
    email: str
    role: Literal["user", "admin"] = "user"
    is_verified: bool = False
    avatar: dict[str, str] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self):
        self.email = normalize_email(self.email)


@dataclass(frozen=True)
class SessionTokens:
    access_token: str
    refresh_token: str
