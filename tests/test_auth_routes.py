from boxcloud.api.utils import issue_token, verify_token
from boxcloud.database.core.funcs import add_license_code, get_license_code

from conftest import auth_headers


def _register(client, code, email="carol@example.com", password="secret1", name="Carol"):
    return client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, "licenseCode": code},
    )


def test_register_returns_token_for_new_user(client, license_code):
    r = _register(client, license_code)
    assert r.status_code == 201
    body = r.json()
    assert set(body) == {"id", "name", "email", "token"}
    assert body["email"] == "carol@example.com"
    assert verify_token(body["token"]) == body["id"]


def test_register_trims_fields_and_consumes_one_use(client, license_code):
    r = _register(client, f"  {license_code} ", email=" carol@example.com ", name=" Carol ")
    assert r.status_code == 201
    assert r.json()["name"] == "Carol"
    assert r.json()["email"] == "carol@example.com"
    assert get_license_code(code=license_code)["currentUses"] == 1


def test_duplicate_email_is_conflict(client, license_code):
    assert _register(client, license_code).status_code == 201
    r = _register(client, license_code, password="other-pass")
    assert r.status_code == 409
    assert r.json()["error"] == "User already exists"
    assert get_license_code(code=license_code)["currentUses"] == 1


def test_missing_fields(client, license_code):
    r = client.post("/api/auth/register", json={"email": "x@example.com", "password": "secret1"})
    assert r.status_code == 400
    assert r.json()["error"] == "Missing required fields"


def test_short_password(client, license_code):
    r = _register(client, license_code, password="12345")
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid password"


def test_unknown_license(client):
    r = _register(client, "NO-SUCH-CODE")
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid license code"


def test_license_cannot_exceed_max_uses(client):
    add_license_code(code="ONE-SHOT", max_uses=1)
    assert _register(client, "ONE-SHOT", email="first@example.com").status_code == 201

    r = _register(client, "ONE-SHOT", email="second@example.com")
    assert r.status_code == 400
    assert r.json()["message"] == "License code has reached maximum usage limit"
    assert get_license_code(code="ONE-SHOT") == {"code": "ONE-SHOT", "maxUses": 1, "currentUses": 1}


def test_failed_registration_does_not_consume_license(client, license_code):
    _register(client, license_code, password="short")
    assert get_license_code(code=license_code)["currentUses"] == 0


def test_login_and_me(client, alice):
    r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret1"})
    assert r.status_code == 200
    token = r.json()["token"]
    assert verify_token(token) == alice["id"]

    me = client.get("/api/auth/me", headers=auth_headers(token))
    assert me.status_code == 200
    assert me.json() == {"id": alice["id"], "name": "Alice", "email": "alice@example.com"}


def test_login_with_wrong_password(client, alice):
    r = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-pass"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid credentials"


def test_login_with_unknown_email(client, license_code):
    r = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret1"})
    assert r.status_code == 401


def test_login_missing_fields(client):
    assert client.post("/api/auth/login", json={"email": "alice@example.com"}).status_code == 400


def test_me_without_token_is_401(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["message"] == "No token provided"


def test_me_with_bad_token_is_403(client):
    r = client.get("/api/auth/me", headers=auth_headers("garbage.token.value"))
    assert r.status_code == 403


def test_token_of_unknown_user_is_403(client):
    r = client.get("/api/auth/me", headers=auth_headers(issue_token("no-such-user")))
    assert r.status_code == 403


def test_logout(client, alice):
    r = client.post("/api/auth/logout", headers=alice["headers"])
    assert r.status_code == 200
    assert "message" in r.json()
