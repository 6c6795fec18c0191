import json
from datetime import datetime, timezone

import pytest

from account_service.domain.entities import PendingRegistration, UserRecord
from account_service.domain.services import public_projection, session_snapshot


def test_email_normalized_and_defaults():
    u = UserRecord(id="u1", name="Alice", email=" Alice@Example.COM ")
    assert u.email == "alice@example.com"
    assert u.role == "user"
    assert u.is_verified is False
    assert u.avatar is None
    assert u.created_at is None


def test_empty_email_is_rejected():
    with pytest.raises(ValueError):
        UserRecord(id="u1", name="Alice", email="   ")


def test_pending_registration_normalizes_email_and_is_frozen():
    p = PendingRegistration(name="Alice", email="A@X.com", password="secret1")
    assert p.email == "a@x.com"
    with pytest.raises(AttributeError):
        p.email = "b@x.com"  # type: ignore[misc]


def test_public_projection_has_no_password_and_iso_dates():
    when = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    u = UserRecord(
        id="u1",
        name="Alice",
        email="a@x.com",
        is_verified=True,
        avatar={"public_id": "p1", "url": "https://cdn/x.png"},
        created_at=when,
        updated_at=when,
    )
    data = public_projection(u)
    assert "password" not in data and "password_hash" not in data
    assert data["created_at"] == "2024-05-01T12:00:00+00:00"
    assert data["avatar"]["url"] == "https://cdn/x.png"


def test_session_snapshot_is_json_of_projection():
    u = UserRecord(id="u1", name="Alice", email="a@x.com", is_verified=True)
    assert json.loads(session_snapshot(u)) == public_projection(u)
