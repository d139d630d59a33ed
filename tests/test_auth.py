from datetime import datetime, timedelta, timezone

from jose import jwt

from dashboard.core import security

REGISTRATION = {
    "email": "Mulder@Example.com",
    "password": "trustno1",
    "first_name": " Fox ",
    "last_name": "Mulder",
}


def _register(client, **overrides):
    payload = dict(REGISTRATION, **overrides)
    return client.post("/api/auth/register", json=payload)


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_register(client, settings):
    response = _register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Customer registered successfully"

    customer = body["data"]["customer"]
    assert customer["email"] == "mulder@example.com"
    assert customer["first_name"] == "Fox"
    assert customer["role"] == "customer"
    assert "password_hash" not in customer

    claims = jwt.decode(body["data"]["token"], settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert claims["sub"] == str(customer["id"])
    assert claims["email"] == "mulder@example.com"
    assert claims["role"] == "customer"
    assert claims["type"] == "customer"


def test_registered_customer_shows_up_with_full_name(client):
    customer_id = _register(client).json()["data"]["customer"]["id"]
    customer = client.get(f"/api/customers/{customer_id}").json()["data"]
    assert customer["name"] == "Fox Mulder"


def test_password_is_stored_hashed(client, store):
    _register(client)
    stored = store.get_customer_by_email("mulder@example.com")["password_hash"]
    assert stored != REGISTRATION["password"]
    assert security.verify_password(REGISTRATION["password"], stored)


def test_register_duplicate_email(client):
    assert _register(client).status_code == 201
    response = _register(client, email="MULDER@example.com")
    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "A customer with this email already exists"}


def test_register_loses_race_to_concurrent_signup(client, store, monkeypatch):
    assert _register(client).status_code == 201
    # the duplicate only surfaces at insert time, as with a concurrent request
    monkeypatch.setattr(store, "get_customer_by_email", lambda email: None)
    response = _register(client)
    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "A customer with this email already exists"}


def test_register_existing_dashboard_customer(client):
    assert _register(client, email="john@example.com").status_code == 409


def test_register_validation(client):
    assert _register(client, password="short").status_code == 400
    assert _register(client, email="nope").status_code == 400
    assert _register(client, last_name="").status_code == 400


def test_login(client):
    _register(client)
    response = client.post("/api/auth/login", json={"email": "MULDER@example.com", "password": "trustno1"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["data"]["customer"]["email"] == "mulder@example.com"
    assert body["data"]["token"]


def test_wrong_password_looks_like_unknown_email(client):
    _register(client)
    wrong_password = client.post("/api/auth/login", json={"email": "mulder@example.com", "password": "wrong-pass"})
    unknown_email = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "trustno1"})
    no_password = client.post("/api/auth/login", json={"email": "john@example.com", "password": "trustno1"})

    for response in (wrong_password, unknown_email, no_password):
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Invalid email or password"}


def test_login_requires_fields(client):
    assert client.post("/api/auth/login", json={"email": "mulder@example.com"}).status_code == 400


def test_me(client):
    token = _register(client).json()["data"]["token"]
    response = client.get("/api/auth/me", headers=_bearer(token))
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "mulder@example.com"


def test_me_accepts_bare_token(client):
    token = _register(client).json()["data"]["token"]
    response = client.get("/api/auth/me", headers={"Authorization": token})
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "mulder@example.com"


def test_me_with_empty_bearer_scheme(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer "})
    assert response.status_code == 401
    assert response.json()["error"] == "Authorization header is required"


def test_me_without_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_me_with_garbage_token(client):
    response = client.get("/api/auth/me", headers=_bearer("not.a.jwt"))
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid token"


def test_me_with_foreign_signature(client, settings):
    token = jwt.encode({"sub": "1", "type": "customer"}, "some-other-secret", algorithm=settings.jwt_algorithm)
    assert client.get("/api/auth/me", headers=_bearer(token)).json()["error"] == "Invalid token"


def test_me_with_expired_token(client, settings):
    token = security.create_token(settings, subject=1, email="john@example.com", role="customer", expires_minutes=-5)
    response = client.get("/api/auth/me", headers=_bearer(token))
    assert response.status_code == 401
    assert response.json()["error"] == "Token has expired"


def test_me_with_wrong_token_type(client, settings):
    token = jwt.encode(
        {"sub": "1", "type": "staff", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    assert client.get("/api/auth/me", headers=_bearer(token)).status_code == 403
