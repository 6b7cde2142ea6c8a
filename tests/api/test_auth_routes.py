from fastapi.testclient import TestClient

from clubhouse.presentation.dependencies import get_email_port, get_rate_limiter
from tests.api.conftest import session_header
from tests.fakes import TEST_CODE, FakeEmailDown, FakeRateLimiter


def test_request_code_creates_identity_and_sends_mail(client: TestClient, app_and_deps):
    _, deps = app_and_deps

    r = client.post("/requestcode", json={"email": "new@example.com"})

    assert r.status_code == 200, r.text
    assert r.json() == {"message": "Authorization code sent"}
    record = deps["uow"].identities.records["NEW@EXAMPLE.COM"]
    assert record.current_code == TEST_CODE
    assert deps["mailer"].calls[0]["to"] == "new@example.com"


def test_request_code_rejects_malformed_email(client: TestClient, app_and_deps):
    _, deps = app_and_deps
    r = client.post("/requestcode", json={"email": "not-an-email"})
    assert r.status_code == 422
    assert deps["mailer"].calls == []


def test_request_code_delivery_failure_is_internal_error(client: TestClient, app_and_deps):
    app, deps = app_and_deps
    app.dependency_overrides[get_email_port] = lambda: FakeEmailDown()

    r = client.post("/requestcode", json={"email": "new@example.com"})

    assert r.status_code == 500
    assert r.json() == {"message": "Internal server error"}
    # code stays stored even though it was never delivered
    assert deps["uow"].identities.records["NEW@EXAMPLE.COM"].current_code == TEST_CODE


def test_login_returns_session_id(client: TestClient, app_and_deps):
    _, deps = app_and_deps
    client.post("/requestcode", json={"email": "member@example.com"})

    r = client.post(
        "/login",
        json={"email": "MEMBER@example.com", "code": TEST_CODE, "ip_address": "10.0.0.7"},
    )

    assert r.status_code == 200, r.text
    session_id = r.json()["session_id"]
    record = deps["uow"].identities.records["MEMBER@EXAMPLE.COM"]
    assert record.session_token == session_id
    assert record.ip_address == "10.0.0.7"


def test_login_unknown_email_is_404(client: TestClient):
    r = client.post("/login", json={"email": "ghost@example.com", "code": TEST_CODE})
    assert r.status_code == 404


def test_login_wrong_code_is_403(client: TestClient):
    client.post("/requestcode", json={"email": "member@example.com"})
    r = client.post("/login", json={"email": "member@example.com", "code": "wrong00"})
    assert r.status_code == 403
    assert r.json() == {"message": "Invalid authorization code"}


def test_full_scenario(client: TestClient, app_and_deps):
    _, deps = app_and_deps

    assert client.post("/requestcode", json={"email": "new@x.com"}).status_code == 200
    deps["clock"].advance(30)
    r = client.post(
        "/login", json={"email": "new@x.com", "code": TEST_CODE, "ip_address": "1.1.1.1"}
    )
    assert r.status_code == 200
    session_id = r.json()["session_id"]

    ok = client.post("/getuser", json={"email": "new@x.com"}, headers=session_header(session_id))
    assert ok.status_code == 200
    denied = client.post("/getuser", json={"email": "new@x.com"}, headers=session_header("wrong"))
    assert denied.status_code == 403

    deps["clock"].advance(31)  # 61s after issuance
    expired = client.post("/login", json={"email": "new@x.com", "code": TEST_CODE})
    assert expired.status_code == 403
    assert expired.json() == {"message": "Expired authorization code"}

    # the earlier session is still valid
    still = client.post("/getuser", json={"email": "new@x.com"}, headers=session_header(session_id))
    assert still.status_code == 200


def test_auth_routes_are_rate_limited(client: TestClient, app_and_deps):
    app, deps = app_and_deps
    limiter = FakeRateLimiter(allow=False)
    app.dependency_overrides[get_rate_limiter] = lambda: limiter

    r1 = client.post("/requestcode", json={"email": "new@example.com"})
    r2 = client.post("/login", json={"email": "new@example.com", "code": TEST_CODE})

    assert r1.status_code == 429
    assert r2.status_code == 429
    assert r1.json() == {
        "message": "Too many authentication attempts, please try again later"
    }
    assert deps["mailer"].calls == []
    keys = [key for key, _, _ in limiter.hits]
    assert keys == ["/requestcode:testclient", "/login:testclient"]
    assert limiter.hits[0][1:] == (15, 900)


def test_protected_routes_are_not_rate_limited(client: TestClient, app_and_deps, login):
    _, deps = app_and_deps
    token = login()
    hits_after_login = len(deps["limiter"].hits)

    client.post("/getuser", json={"email": "member@example.com"}, headers=session_header(token))

    assert len(deps["limiter"].hits) == hits_after_login


def test_healthz(client: TestClient):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_cors_allows_configured_origin(client: TestClient):
    r = client.options(
        "/login",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authentication-Session-Id",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_unicode_local_parts_stay_separate_identities(client: TestClient, app_and_deps):
    _, deps = app_and_deps
    client.post("/requestcode", json={"email": "straße@example.com"})
    client.post("/requestcode", json={"email": "strasse@example.com"})

    r = client.post("/login", json={"email": "strasse@example.com", "code": TEST_CODE})

    assert r.status_code == 200, r.text
    records = deps["uow"].identities.records
    assert len(records) == 2
    assert records["STRASSE@EXAMPLE.COM"].session_token == r.json()["session_id"]
    assert records["STRAßE@EXAMPLE.COM"].session_token is None
