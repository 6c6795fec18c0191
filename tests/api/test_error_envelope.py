import pytest

from account_service.domain.errors import (
    AccountError,
    CodeMismatch,
    DeliveryError,
    DuplicateEmail,
    InvalidCredentials,
    StoreUnavailable,
    TokenExpired,
    TokenInvalid,
)
from account_service.presentation.dependencies import get_uow


def test_health(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "API is working!"}


def test_unknown_route(client):
    r = client.get("/v1/nope")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Route /v1/nope does not exist"}


@pytest.mark.parametrize(
    "error, status",
    [
        (DuplicateEmail(), 400),
        (TokenInvalid(), 400),
        (TokenExpired(), 400),
        (CodeMismatch(), 400),
        (InvalidCredentials(), 401),
        (DeliveryError(), 500),
        (StoreUnavailable(), 500),
    ],
)
def test_every_error_kind_renders_the_envelope(client, app_and_deps, error, status):
    app, _ = app_and_deps

    def broken_uow():
        raise error

    app.dependency_overrides[get_uow] = broken_uow
    r = client.post("/v1/login", json={"email": "a@x.com", "password": "secret1"})

    assert r.status_code == status
    assert r.json() == {"success": False, "message": error.message}


def test_unexpected_error_is_a_generic_500(client, app_and_deps):
    app, _ = app_and_deps

    def broken_uow():
        raise KeyError("boom")

    app.dependency_overrides[get_uow] = broken_uow
    r = client.post("/v1/login", json={"email": "a@x.com", "password": "secret1"})

    assert r.status_code == 500
    assert r.json() == {"success": False, "message": "Internal Server Error"}


def test_custom_message_overrides_default():
    assert AccountError().message == "Internal Server Error"
    assert TokenInvalid("Session expired.").message == "Session expired."
    assert TokenInvalid("Session expired.").status_code == 400
