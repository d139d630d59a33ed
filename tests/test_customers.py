def _create(client, **overrides):
    payload = {"name": "Dana Scully", "email": "dana@example.com", "phone": "555-0199"}
    payload.update(overrides)
    return client.post("/api/customers", json=payload)


def test_list_customers(client):
    data = client.get("/api/customers").json()["data"]
    assert len(data) == 5
    assert [c["id"] for c in data] == [5, 4, 3, 2, 1]
    assert all("password_hash" not in c for c in data)


def test_search_matches_name_or_email(client):
    by_name = client.get("/api/customers", params={"search": "smith"}).json()["data"]
    assert [c["name"] for c in by_name] == ["Jane Smith"]

    by_email = client.get("/api/customers", params={"search": "CHARLIE@"}).json()["data"]
    assert [c["email"] for c in by_email] == ["charlie@example.com"]


def test_create_customer(client):
    response = _create(client, email="Dana@Example.com", address="  ")
    assert response.status_code == 201
    customer = response.json()["data"]
    assert customer["email"] == "dana@example.com"
    assert customer["phone"] == "555-0199"
    assert customer["address"] is None
    assert customer["created_at"] is not None
    assert "password_hash" not in customer


def test_duplicate_email_is_a_conflict(client):
    assert _create(client).status_code == 201

    response = _create(client, name="Another Dana", email="DANA@example.com")
    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "Email already exists"}


def test_invalid_email_is_rejected(client):
    response = _create(client, email="not-an-email")
    assert response.status_code == 400
    assert "email" in response.json()["error"]


def test_name_is_required(client):
    response = client.post("/api/customers", json={"email": "x@example.com"})
    assert response.status_code == 400


def test_get_missing_customer(client):
    response = client.get("/api/customers/999")
    assert response.status_code == 404
    assert response.json()["error"] == "Customer not found"


def test_update_customer(client):
    response = client.put(
        "/api/customers/2",
        json={"name": "Jane Smith-Jones", "email": "jane@example.com", "address": "1 New Rd"},
    )
    assert response.status_code == 200
    customer = response.json()["data"]
    assert customer["name"] == "Jane Smith-Jones"
    assert customer["address"] == "1 New Rd"
    assert customer["phone"] is None


def test_update_to_taken_email_is_a_conflict(client):
    response = client.put("/api/customers/2", json={"name": "Jane", "email": "john@example.com"})
    assert response.status_code == 409


def test_update_missing_customer(client):
    response = client.put("/api/customers/999", json={"name": "Nobody", "email": "nobody@example.com"})
    assert response.status_code == 404


def test_delete_customer(client):
    customer = _create(client).json()["data"]
    response = client.delete(f"/api/customers/{customer['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["message"] == "Customer deleted successfully"


def test_delete_missing_customer(client):
    assert client.delete("/api/customers/999").status_code == 404


def test_delete_customer_with_orders_is_a_conflict(client):
    assert client.delete("/api/customers/1").status_code == 409
