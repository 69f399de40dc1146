import asyncio
import hashlib
import hmac
import json
import os
import tempfile
import time
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

# Set test environment variables before the app reads its settings
os.environ["TESTING"] = "true"
os.environ["ENVIRONMENT"] = "development"
os.environ["SECRET_KEY"] = "test-secret-key-for-jwt-signing"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["PUBLIC_DIR"] = tempfile.mkdtemp(prefix="modelvault-public-")

from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.api.dependencies import get_payment_service, get_storage_service  # noqa: E402
from app.core.security import create_access_token, get_password_hash  # noqa: E402
from app.db.database import SessionLocal, engine  # noqa: E402
from app.db.models import Base  # noqa: E402
from app.domain.enums import UserRole  # noqa: E402
from app.infrastructure.orm import UserModel, CatalogModelORM, OrderModel  # noqa: E402
from app.infrastructure.external_services.payment_service import (  # noqa: E402
    PaymentService,
    CheckoutSessionSnapshot,
)
from app.infrastructure.external_services.storage_service import ExcelStorageService  # noqa: E402


WEBHOOK_SECRET = "whsec_test_secret"


def run(coro):
    """Drive an async repository or use case call from a sync test"""
    return asyncio.run(coro)


class FakePaymentService(PaymentService):
    """Stripe stand-in: sessions come from a dict, webhook signatures are really verified"""

    def __init__(self):
        super().__init__()
        self.sessions = {}
        self.created = []
        self.retrieve_calls = 0

    def add_session(self, session_id, payment_status="paid", amount_total=498500,
                    email="buyer@example.com", name="Jane Buyer", metadata=None):
        snapshot = CheckoutSessionSnapshot(
            id=session_id,
            payment_status=payment_status,
            amount_total=amount_total,
            currency="usd",
            customer_email=email,
            customer_name=name,
            payment_intent_id=f"pi_{session_id}",
            metadata=metadata or {},
        )
        self.sessions[session_id] = snapshot
        return snapshot

    async def retrieve_checkout_session(self, session_id):
        self.retrieve_calls += 1
        return self.sessions.get(session_id)

    async def create_checkout_session(self, model, customer_email=None, customer_name=None):
        session_id = f"cs_test_{len(self.created) + 1}"
        self.created.append({
            "model_slug": model.slug,
            "customer_email": customer_email,
            "customer_name": customer_name,
        })
        return {"url": f"https://checkout.stripe.test/{session_id}", "session_id": session_id}


def stripe_signature(payload: bytes, secret: str = WEBHOOK_SECRET) -> str:
    timestamp = int(time.time())
    signed = f"{timestamp}.{payload.decode('utf-8')}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def checkout_event(session_id, event_type="checkout.session.completed", payment_status="paid",
                   amount_total=498500, email="buyer@example.com", metadata=None) -> bytes:
    return json.dumps({
        "id": f"evt_{session_id}",
        "object": "event",
        "type": event_type,
        "data": {
            "object": {
                "id": session_id,
                "object": "checkout.session",
                "payment_status": payment_status,
                "amount_total": amount_total,
                "currency": "usd",
                "customer_details": {"email": email, "name": "Jane Buyer"},
                "payment_intent": f"pi_{session_id}",
                "metadata": metadata or {},
            }
        },
    }).encode("utf-8")


@pytest.fixture
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def payment_service():
    return FakePaymentService()


@pytest.fixture
def storage_service(tmp_path):
    service = ExcelStorageService(public_dir=str(tmp_path), subdir="uploads/excel")
    service.initialize()
    return service


@pytest.fixture
def client(database, payment_service, storage_service):
    app.dependency_overrides[get_payment_service] = lambda: payment_service
    app.dependency_overrides[get_storage_service] = lambda: storage_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def persist(instance):
    """Insert a row and hand it back detached, with its columns loaded.

    The in-memory database is a single shared connection, so the session is
    closed before returning and never holds a transaction open across requests.
    """
    with SessionLocal() as session:
        session.add(instance)
        session.commit()
        session.refresh(instance)
        session.expunge(instance)
    return instance


def fetch_order(order_id):
    with SessionLocal() as session:
        order = session.get(OrderModel, order_id)
        if order is not None:
            session.expunge(order)
        return order


def create_user(email="buyer@example.com", role=UserRole.USER):
    return persist(UserModel(
        email=email,
        hashed_password=get_password_hash("password123"),
        first_name="Jane",
        last_name="Buyer",
        role=role,
        is_active=True,
    ))


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(str(user.id))}"}


@pytest.fixture
def customer(database):
    return create_user()


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def admin_headers(database):
    return auth_headers(create_user(email="admin@example.com", role=UserRole.ADMIN))


def create_catalog_model(slug="dcf-valuation", title="DCF Valuation Model", price="4985.00",
                         excel_url=None, file_url=None, status="active"):
    return persist(CatalogModelORM(
        slug=slug,
        title=title,
        description="Three statement DCF",
        category="valuation",
        price=Decimal(price),
        excel_url=excel_url,
        file_url=file_url,
        status=status,
        tags=["dcf"],
    ))


def create_order(session_id="cs_test_existing", email="buyer@example.com", model=None,
                 status="completed", download_count=0, max_downloads=5,
                 expires_in=timedelta(days=30), amount="4985.00"):
    now = datetime.utcnow()
    return persist(OrderModel(
        stripe_session_id=session_id,
        customer_email=email,
        customer_name="Jane Buyer",
        model_id=model.id if model else None,
        model_title=model.title if model else "Unknown Model",
        model_slug=model.slug if model else "",
        amount=Decimal(amount),
        currency="usd",
        status=status,
        payment_status="paid",
        download_expires_at=now + expires_in if expires_in is not None else None,
        download_count=download_count,
        max_downloads=max_downloads,
        order_metadata={},
        created_at=now,
        updated_at=now,
    ))
