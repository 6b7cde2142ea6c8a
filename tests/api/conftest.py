import pytest
from fastapi.testclient import TestClient

from clubhouse.main import create_app
from clubhouse.presentation.dependencies import (
    SESSION_HEADER,
    get_clock,
    get_email_port,
    get_rate_limiter,
    get_uow,
)
from tests.fakes import TEST_CODE, FakeClock, FakeEmailOK, FakeRateLimiter, FakeUoW


@pytest.fixture()
def app_and_deps():
    app = create_app()
    deps = {
        "uow": FakeUoW(),
        "mailer": FakeEmailOK(),
        "limiter": FakeRateLimiter(allow=True),
        "clock": FakeClock(),
    }

    app.dependency_overrides[get_uow] = lambda: deps["uow"]
    app.dependency_overrides[get_email_port] = lambda: deps["mailer"]
    app.dependency_overrides[get_rate_limiter] = lambda: deps["limiter"]
    app.dependency_overrides[get_clock] = lambda: deps["clock"]

    try:
        yield app, deps
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app_and_deps):
    app, _ = app_and_deps
    return TestClient(app, raise_server_exceptions=False)


def session_header(token: str) -> dict[str, str]:
    return {SESSION_HEADER: token}


@pytest.fixture()
def login(client, app_and_deps):
    """Request a code for `email` and log in with it; returns the session id."""

    def _login(email: str = "member@example.com") -> str:
        assert client.post("/requestcode", json={"email": email}).status_code == 200
        r = client.post(
            "/login", json={"email": email, "code": TEST_CODE, "ip_address": "10.0.0.7"}
        )
        assert r.status_code == 200, r.text
        return r.json()["session_id"]

    return _login
