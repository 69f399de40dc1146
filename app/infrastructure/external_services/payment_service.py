"""Payment service for Stripe checkout sessions"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import stripe
from starlette.concurrency import run_in_threadpool

from ...core.config import settings
from ...domain.entities.catalog_model import CatalogModel
from ...domain.value_objects.money import Money


logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Stripe could not be reached or rejected the request"""


class WebhookVerificationError(Exception):
    """The webhook payload or its signature is invalid"""


@dataclass(frozen=True)
class CheckoutSessionSnapshot:
    """The parts of a Stripe checkout session the order flow relies on"""

    id: str
    payment_status: str
    amount_total: int = 0
    currency: Optional[str] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    payment_intent_id: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"


@dataclass(frozen=True)
class WebhookEvent:
    type: str
    session: Optional[CheckoutSessionSnapshot] = None


def _as_dict(obj: Any) -> Dict[str, Any]:
    if obj is None:
        return {}
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return dict(obj)


def snapshot_from_session(session: Any) -> CheckoutSessionSnapshot:
    """Flatten a Stripe checkout session object"""
    data = _as_dict(session)
    details = _as_dict(data.get("customer_details"))
    metadata = {str(k): str(v) for k, v in _as_dict(data.get("metadata")).items() if v is not None}
    payment_intent = data.get("payment_intent")
    if isinstance(payment_intent, dict):
        payment_intent = payment_intent.get("id")

    return CheckoutSessionSnapshot(
        id=data["id"],
        payment_status=data.get("payment_status") or "unpaid",
        amount_total=data.get("amount_total") or 0,
        currency=data.get("currency"),
        customer_email=details.get("email") or data.get("customer_email"),
        customer_name=details.get("name") or metadata.get("customerName"),
        payment_intent_id=payment_intent,
        metadata=metadata,
    )


class PaymentService:

    def __init__(self):
        # Initialize Stripe
        stripe.api_key = settings.STRIPE_SECRET_KEY
        stripe.api_version = settings.STRIPE_API_VERSION
        self.webhook_secret = settings.STRIPE_WEBHOOK_SECRET

    async def create_checkout_session(
        self,
        model: CatalogModel,
        customer_email: Optional[str] = None,
        customer_name: Optional[str] = None,
    ) -> Dict[str, str]:
        """Create a Stripe checkout session for one catalog model"""
        price = Money(amount=model.price)
        params: Dict[str, Any] = {
            "mode": "payment",
            "line_items": [{
                "price_data": {
                    "currency": price.currency,
                    "product_data": {
                        "name": model.title,
                        "description": f"Professional Financial Model - {model.title}",
                    },
                    "unit_amount": price.to_cents(),
                },
                "quantity": 1,
            }],
            "allow_promotion_codes": True,
            "metadata": {
                "modelId": str(model.id.value),
                "modelTitle": model.title,
                "modelSlug": model.slug,
                "customerName": customer_name or "",
            },
            "success_url": f"{settings.FRONTEND_URL}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{settings.FRONTEND_URL}/checkout/cancel?modelSlug={model.slug}",
        }
        if customer_email:
            params["customer_email"] = customer_email

        try:
            session = await run_in_threadpool(stripe.checkout.Session.create, **params)
        except stripe.StripeError as e:
            logger.error("Stripe error creating checkout for model %s: %s", model.slug, e)
            raise PaymentGatewayError(f"Failed to create checkout: {e}") from e

        logger.info("Created checkout session %s for model %s", session.id, model.slug)
        return {"url": session.url, "session_id": session.id}

    async def retrieve_checkout_session(self, session_id: str) -> Optional[CheckoutSessionSnapshot]:
        """Fetch a checkout session; None when Stripe does not know it"""
        try:
            session = await run_in_threadpool(stripe.checkout.Session.retrieve, session_id)
        except stripe.InvalidRequestError as e:
            if getattr(e, "code", None) == "resource_missing" or getattr(e, "http_status", None) == 404:
                logger.info("Checkout session %s not found at Stripe", session_id)
                return None
            raise PaymentGatewayError(str(e)) from e
        except stripe.StripeError as e:
            logger.error("Stripe error retrieving session %s: %s", session_id, e)
            raise PaymentGatewayError(str(e)) from e

        return snapshot_from_session(session)

    def construct_webhook_event(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        """Verify the Stripe signature and decode the event"""
        if not self.webhook_secret:
            raise WebhookVerificationError("Webhook secret is not configured")
        if not signature:
            raise WebhookVerificationError("Missing Stripe-Signature header")

        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as e:
            logger.warning("Stripe webhook signature verification failed: %s", e)
            raise WebhookVerificationError("Invalid signature") from e
        except ValueError as e:
            raise WebhookVerificationError("Invalid payload") from e

        session = None
        if event.type.startswith("checkout.session."):
            session = snapshot_from_session(event.data.object)
        return WebhookEvent(type=event.type, session=session)
