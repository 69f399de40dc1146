"""Reconcile a Stripe checkout session into a durable order"""

import logging
import re
from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ...core.config import settings
from ...core.exceptions import AppError, InvalidInputError, NotFoundError, InternalError
from ...domain.entities.order import Order
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import CatalogModelId
from ...domain.value_objects.money import Money
from ...infrastructure.external_services.payment_service import (
    PaymentService,
    PaymentGatewayError,
    CheckoutSessionSnapshot,
)
from ..dtos.order_dtos import OrderResponseDTO


logger = logging.getLogger(__name__)

SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_]{1,255}$")


def validate_session_id(session_id: Optional[str]) -> str:
    session_id = (session_id or "").strip()
    if not session_id:
        raise InvalidInputError("Session ID is required")
    if not SESSION_ID_PATTERN.match(session_id):
        raise InvalidInputError("Invalid session ID")
    return session_id


class ReconcileOrderUseCase:
    """Find the order for a checkout session, creating it on first sight.

    Safe to call repeatedly and concurrently for the same session: the unique
    session id decides the winner and every caller gets the same order back.
    """

    def __init__(self, unit_of_work: IUnitOfWork, payment_service: PaymentService):
        self.unit_of_work = unit_of_work
        self.payment_service = payment_service
        self.download_window = timedelta(days=settings.DOWNLOAD_WINDOW_DAYS)

    async def execute(
        self,
        session_id: Optional[str],
        session: Optional[CheckoutSessionSnapshot] = None,
    ) -> OrderResponseDTO:
        session_id = validate_session_id(session_id)

        try:
            async with self.unit_of_work:
                order = await self.unit_of_work.orders.get_by_session_id(session_id)
                if order is None:
                    order = await self._materialize(session_id, session)

                # Legacy rows predate the download window
                if order.backfill_download_window(self.download_window):
                    await self.unit_of_work.orders.set_download_expiry(order)

                await self.unit_of_work.commit()
        except AppError:
            raise
        except PaymentGatewayError as e:
            raise InternalError("Failed to retrieve order", detail=str(e)) from e
        except SQLAlchemyError as e:
            logger.exception("Order reconciliation failed for session %s", session_id)
            raise InternalError("Failed to retrieve order", detail=str(e)) from e

        for event in order.get_events():
            logger.info("Order event: %s", event)

        return OrderResponseDTO.from_entity(order)

    async def _materialize(
        self, session_id: str, session: Optional[CheckoutSessionSnapshot]
    ) -> Order:
        if session is None:
            session = await self.payment_service.retrieve_checkout_session(session_id)
        if session is None:
            raise NotFoundError("Order not found")
        if not session.is_paid:
            raise NotFoundError("Order not found or payment incomplete")

        metadata = session.metadata
        email = (session.customer_email or "").lower()
        name = session.customer_name or ""

        customer_id = None
        if email:
            customer_id = await self.unit_of_work.customers.upsert(email, name)

        order = Order.from_paid_session(
            stripe_session_id=session.id,
            customer_email=email,
            customer_name=name,
            amount=Money.from_cents(session.amount_total, session.currency or "usd"),
            model_id=await self._catalog_model_id(metadata.get("modelId")),
            model_title=metadata.get("modelTitle"),
            model_slug=metadata.get("modelSlug"),
            max_downloads=settings.MAX_DOWNLOADS,
            download_window=self.download_window,
            payment_intent_id=session.payment_intent_id,
            metadata=metadata,
        )
        order.customer_id = customer_id

        stored, created = await self.unit_of_work.orders.add_if_absent(order)
        if created:
            stored.record_reconciled()
        return stored

    async def _catalog_model_id(self, raw: Optional[str]) -> Optional[CatalogModelId]:
        """Only reference catalog rows that exist"""
        if not raw or not raw.isdigit():
            return None
        try:
            model_id = CatalogModelId(int(raw))
        except ValueError:
            logger.warning("Checkout metadata has an out-of-range model id %s", raw)
            return None
        if await self.unit_of_work.models.get_by_id(model_id) is None:
            logger.warning("Checkout metadata references unknown model %s", raw)
            return None
        return model_id
