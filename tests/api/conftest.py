import pytest
from fastapi.testclient import TestClient

from account_service.infrastructure.security.tokens import TokenCodec
from account_service.main import create_app
from account_service.presentation.dependencies import (
    get_app_settings,
    get_dummy_hash,
    get_hash_password,
    get_notifier,
    get_sessions,
    get_token_codec,
    get_uow,
    get_verify_password,
)
from tests.fakes import FakeUoW, fake_hash, fake_verify


@pytest.fixture()
def app_and_deps(settings, users, notifier, sessions):
    app = create_app()
    codec = TokenCodec(settings)

    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_uow] = lambda: FakeUoW(users)
    app.dependency_overrides[get_token_codec] = lambda: codec
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_sessions] = lambda: sessions
    app.dependency_overrides[get_hash_password] = lambda: fake_hash
    app.dependency_overrides[get_verify_password] = lambda: fake_verify
    app.dependency_overrides[get_dummy_hash] = lambda: None

    try:
        yield app, codec
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app_and_deps):
    app, _ = app_and_deps
    return TestClient(app, raise_server_exceptions=False)


def register_and_activate(client: TestClient, email="a@x.com", password="secret1"):
    r = client.post(
        "/v1/registration",
        json={"name": "Alice", "email": email, "password": password},
    )
    assert r.status_code == 201, r.text
    r = client.post(
        "/v1/activation",
        json={"activation_token": r.json()["activationToken"], "activation_code": "1234"},
    )
    assert r.status_code == 201, r.text


@pytest.fixture()
def logged_in(client: TestClient):
    """Registered, activated and logged-in Alice; returns the login response."""
    register_and_activate(client)
    r = client.post("/v1/login", json={"email": "a@x.com", "password": "secret1"})
    assert r.status_code == 200, r.text
    return r
