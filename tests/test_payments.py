"""Stripe checkout creation and webhook reconciliation"""

from app.infrastructure.external_services.payment_service import snapshot_from_session
from app.db.database import SessionLocal
from app.infrastructure.orm import OrderModel

from conftest import checkout_event, create_catalog_model, stripe_signature


CHECKOUT = "/api/v1/payments/create-checkout-session"
WEBHOOK = "/api/v1/payments/webhook"


def post_event(client, payload, signature=None):
    return client.post(
        WEBHOOK,
        content=payload,
        headers={
            "Content-Type": "application/json",
            "Stripe-Signature": signature or stripe_signature(payload),
        },
    )


def test_create_checkout_session(client, payment_service):
    create_catalog_model()

    response = client.post(CHECKOUT, json={
        "model_slug": "dcf-valuation",
        "customer_email": "buyer@example.com",
        "customer_name": "Jane Buyer",
    })

    assert response.status_code == 200
    assert response.json() == {
        "url": "https://checkout.stripe.test/cs_test_1",
        "session_id": "cs_test_1",
    }
    assert payment_service.created == [{
        "model_slug": "dcf-valuation",
        "customer_email": "buyer@example.com",
        "customer_name": "Jane Buyer",
    }]


def test_checkout_for_unknown_model(client):
    response = client.post(CHECKOUT, json={"model_slug": "nope"})

    assert response.status_code == 404
    assert response.json()["error"] == "Model not found"


def test_checkout_for_archived_model(client, payment_service):
    create_catalog_model(status="archived")

    response = client.post(CHECKOUT, json={"model_slug": "dcf-valuation"})

    assert response.status_code == 400
    assert payment_service.created == []


def test_checkout_rejects_unknown_fields(client):
    response = client.post(CHECKOUT, json={"model_slug": "dcf-valuation", "price": 1})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    assert "price: Extra inputs are not permitted" in response.json()["details"]


def test_completed_webhook_creates_order(client, payment_service):
    model = create_catalog_model()
    payload = checkout_event("cs_test_hook", metadata={
        "modelId": str(model.id),
        "modelTitle": model.title,
        "modelSlug": model.slug,
    })

    response = post_event(client, payload)

    assert response.status_code == 200
    assert response.json() == {"received": True}
    assert payment_service.retrieve_calls == 0

    with SessionLocal() as session:
        order = session.query(OrderModel).filter(OrderModel.stripe_session_id == "cs_test_hook").one()
        assert order.status == "completed"
        assert order.model_id == model.id
        assert str(order.amount) == "4985.00"
        assert order.stripe_payment_intent_id == "pi_cs_test_hook"


def test_webhook_and_lookup_share_one_order(client):
    payload = checkout_event("cs_test_both")
    post_event(client, payload)
    post_event(client, payload)

    body = client.get("/api/v1/orders/lookup", params={"session_id": "cs_test_both"}).json()

    with SessionLocal() as session:
        orders = session.query(OrderModel).all()
        assert [o.id for o in orders] == [body["id"]]


def test_async_payment_succeeded_is_reconciled(client):
    payload = checkout_event("cs_test_async", event_type="checkout.session.async_payment_succeeded")

    assert post_event(client, payload).status_code == 200

    with SessionLocal() as session:
        assert session.query(OrderModel).count() == 1


def test_unpaid_completion_is_acknowledged_without_order(client):
    payload = checkout_event("cs_test_pending", payment_status="unpaid")

    response = post_event(client, payload)

    assert response.status_code == 200
    with SessionLocal() as session:
        assert session.query(OrderModel).count() == 0


def test_unrelated_event_is_acknowledged(client):
    payload = checkout_event("cs_test_other", event_type="checkout.session.expired")

    assert post_event(client, payload).json() == {"received": True}
    with SessionLocal() as session:
        assert session.query(OrderModel).count() == 0


def test_bad_signature_is_rejected(client):
    payload = checkout_event("cs_test_forged")

    response = post_event(client, payload, signature=stripe_signature(payload, secret="whsec_wrong"))

    assert response.status_code == 400
    assert response.json()["error"] == "Webhook Error: Invalid signature"
    with SessionLocal() as session:
        assert session.query(OrderModel).count() == 0


def test_missing_signature_is_rejected(client):
    response = client.post(WEBHOOK, content=checkout_event("cs_test_unsigned"))

    assert response.status_code == 400
    assert response.json()["error"] == "Webhook Error: Missing Stripe-Signature header"


def test_snapshot_from_session_flattens_stripe_payload():
    snapshot = snapshot_from_session({
        "id": "cs_test_flat",
        "payment_status": "paid",
        "amount_total": 1250,
        "currency": "usd",
        "customer_email": "fallback@example.com",
        "customer_details": {"email": "buyer@example.com", "name": None},
        "payment_intent": {"id": "pi_expanded"},
        "metadata": {"modelId": 7, "customerName": "Jane", "empty": None},
    })

    assert snapshot.is_paid
    assert snapshot.customer_email == "buyer@example.com"
    assert snapshot.customer_name == "Jane"
    assert snapshot.payment_intent_id == "pi_expanded"
    assert snapshot.metadata == {"modelId": "7", "customerName": "Jane"}
