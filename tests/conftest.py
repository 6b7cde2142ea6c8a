import os

import pytest

# Required settings; deployments provide real values through the environment.
for _name, _value in {
    "DATABASE_URI": "postgresql://app:app@db:5432",
    "DATABASE_NAME": "clubhouse",
    "ALLOWED_ORIGIN": "http://localhost:3000",
    "LISTEN_PORT": "8000",
    "SENDER_ADDRESS": "noreply@club.example.com",
    "SENDER_CREDENTIALS": "mailer:s3cret",
    "RELAY_HOST": "http://relay:8025",
}.items():
    os.environ.setdefault(_name, _value)

from tests.fakes import TEST_CODE, FakeClock, FakeEmailOK, FakeUoW  # noqa: E402


@pytest.fixture()
def uow():
    return FakeUoW()


@pytest.fixture()
def mailer():
    return FakeEmailOK()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def patch_code(monkeypatch):
    """
    Make the login code deterministic in all tests.
    You can override in a specific test by re-monkeypatching.
    """
    from clubhouse.domain import services as domain_services

    monkeypatch.setattr(domain_services, "generate_code", lambda: TEST_CODE)
    yield
