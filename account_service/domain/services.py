# account_service/domain/services.py
from __future__ import annotations

import hmac
import json
import secrets
from dataclasses import asdict
from typing import Any

from account_service.domain.entities import UserRecord


def generate_4digit_code() -> str:
    """Zero-padded 4-digit numeric code."""
    return f"{secrets.randbelow(10_000):04d}"


def secure_compare(a: str, b: str) -> bool:
    """
    Constant-time comparison for secrets.
    Accepts strings; falls back to bytes if needed.
    """
    try:
        # hmac.compare_digest supports str if types match
        return hmac.compare_digest(a, b)
    except TypeError:
        return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def public_projection(user: UserRecord) -> dict[str, Any]:
    """Everything about a user that may leave the service."""
    data = asdict(user)
    for field in ("created_at", "updated_at"):
        if data[field] is not None:
            data[field] = data[field].isoformat()
    return data


def session_snapshot(user: UserRecord) -> str:
    """JSON document cached per user id at login."""
    return json.dumps(public_projection(user), sort_keys=True)
