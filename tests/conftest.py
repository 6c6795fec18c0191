import pytest

from account_service.infrastructure.security.tokens import TokenCodec
from account_service.settings import Settings
from tests.fakes import FakeNotifier, FakeSessions, FakeUoW, FakeUserRepo


@pytest.fixture()
def settings():
    return Settings(
        activation_secret="test-activation-secret-0123456789abcdef",
        access_token_secret="test-access-secret-0123456789abcdef",
        refresh_token_secret="test-refresh-secret-0123456789abcdef",
    )


@pytest.fixture()
def codec(settings):
    return TokenCodec(settings)


@pytest.fixture()
def users():
    return FakeUserRepo()


@pytest.fixture()
def uow(users):
    return FakeUoW(users)


@pytest.fixture()
def notifier():
    return FakeNotifier()


@pytest.fixture()
def failing_notifier():
    return FakeNotifier(fail=True)


@pytest.fixture()
def sessions():
    return FakeSessions()


@pytest.fixture(autouse=True)
def patch_code(monkeypatch):
    """
    Make the 4-digit code deterministic in all tests.
    You can override in a specific test by re-monkeypatching.
    """
    from account_service.domain import services as domain_services

    monkeypatch.setattr(domain_services, "generate_4digit_code", lambda: "1234")
    yield
