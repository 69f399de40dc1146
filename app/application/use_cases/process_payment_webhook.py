"""Process Stripe webhooks"""

import logging
from typing import Optional

from ...core.exceptions import InvalidInputError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...infrastructure.external_services.payment_service import PaymentService, WebhookVerificationError
from .reconcile_order import ReconcileOrderUseCase


logger = logging.getLogger(__name__)

RECONCILE_EVENTS = ("checkout.session.completed", "checkout.session.async_payment_succeeded")


class ProcessPaymentWebhookUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, payment_service: PaymentService):
        self.unit_of_work = unit_of_work
        self.payment_service = payment_service

    async def execute(self, payload: bytes, signature: Optional[str]) -> dict:
        try:
            event = self.payment_service.construct_webhook_event(payload, signature)
        except WebhookVerificationError as e:
            raise InvalidInputError(f"Webhook Error: {e}") from e

        if event.type in RECONCILE_EVENTS and event.session is not None:
            if event.session.is_paid:
                order = await ReconcileOrderUseCase(self.unit_of_work, self.payment_service).execute(
                    event.session.id, session=event.session
                )
                logger.info("Purchase processed successfully: %s -> order %s", event.session.id, order.id)
            else:
                logger.info("Checkout %s completed but payment is %s", event.session.id, event.session.payment_status)
        else:
            logger.info("Unhandled event type %s", event.type)

        return {"received": True}
