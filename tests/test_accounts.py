"""Authentication and the signed-in customer's order history"""

from datetime import timedelta

from app.core.config import settings
from app.core.exceptions import error_payload
from app.core.security import create_access_token, create_refresh_token

from conftest import create_catalog_model, create_order


def test_register_and_login(client):
    registered = client.post("/api/v1/auth/register", json={
        "email": "New.User@Example.com",
        "password": "correct-horse",
        "first_name": "New",
    })

    assert registered.status_code == 201
    assert registered.json()["user"]["email"] == "new.user@example.com"
    assert registered.json()["user"]["role"] == "user"

    login = client.post("/api/v1/auth/login", json={
        "email": "new.user@example.com",
        "password": "correct-horse",
    })

    assert login.status_code == 200
    token = login.json()["tokens"]["access_token"]
    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "new.user@example.com"
    assert me.json()["last_login"] is not None


def test_duplicate_registration(client, customer):
    response = client.post("/api/v1/auth/register", json={
        "email": "buyer@example.com", "password": "password123",
    })

    assert response.status_code == 400


def test_wrong_password(client, customer):
    response = client.post("/api/v1/auth/login", json={
        "email": "buyer@example.com", "password": "wrong-password",
    })

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"
    assert response.headers["www-authenticate"] == "Bearer"


def test_refresh_token_is_not_a_bearer_credential(client, customer):
    headers = {"Authorization": f"Bearer {create_refresh_token(str(customer.id))}"}

    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


def test_garbage_token(client):
    headers = {"Authorization": "Bearer not-a-jwt"}

    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


def test_my_orders_lists_only_my_orders_newest_first(client, customer_headers):
    model = create_catalog_model()
    older = create_order(session_id="cs_test_older", model=model)
    newer = create_order(session_id="cs_test_newer", model=model, expires_in=timedelta(days=-1))
    create_order(session_id="cs_test_theirs", email="someone@example.com", model=model)

    body = client.get("/api/v1/orders/", headers=customer_headers).json()

    assert [o["id"] for o in body] == [newer.id, older.id]
    assert body[0]["download_available"] is False
    assert body[1]["download_available"] is True
    assert body[1]["downloads_remaining"] == 5


def test_my_orders_requires_authentication(client):
    assert client.get("/api/v1/orders/").status_code == 401


def test_health_endpoints(client):
    assert client.get("/health").json()["database"] == "healthy"
    assert client.get("/api/v1/health").json()["status"] == "healthy"
    assert client.get("/api/v1/orders/health").json() == {"status": "ok", "service": "orders"}


def test_error_details_only_in_development():
    assert error_payload("Boom", "stack") == {"error": "Boom", "details": "stack"}
    settings.ENVIRONMENT = "production"
    try:
        assert error_payload("Boom", "stack") == {"error": "Boom"}
    finally:
        settings.ENVIRONMENT = "development"


def test_token_with_out_of_range_subject(client):
    headers = {"Authorization": f"Bearer {create_access_token('99999999999999999999')}"}

    response = client.get("/api/v1/auth/me", headers=headers)

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid token"
