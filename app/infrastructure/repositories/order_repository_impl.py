"""Order repository implementation using SQLAlchemy ORM"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...domain.entities.order import Order
from ...domain.entities.catalog_model import CatalogModel
from ...domain.repositories.order_repository import IOrderRepository
from ...domain.value_objects.entity_ids import OrderId, CatalogModelId
from ...domain.value_objects.money import Money
from ...domain.enums import OrderStatus
from ..orm.order_model import OrderModel
from ..orm.catalog_model import CatalogModelORM
from .catalog_repository_impl import map_catalog_model


logger = logging.getLogger(__name__)


class OrderRepositoryImpl(IOrderRepository):
    """Repository implementation for Order aggregate"""

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, order_id: OrderId) -> Optional[Order]:
        """Get order by ID"""
        model = self.session.query(OrderModel).filter(OrderModel.id == order_id.value).first()
        return self._map_to_entity(model) if model else None

    async def get_by_session_id(self, stripe_session_id: str) -> Optional[Order]:
        """Get order by Stripe checkout session ID"""
        model = self.session.query(OrderModel).filter(
            OrderModel.stripe_session_id == stripe_session_id
        ).first()
        return self._map_to_entity(model) if model else None

    async def add_if_absent(self, order: Order) -> Tuple[Order, bool]:
        """Insert the order; on a session-id conflict return the existing row"""
        model = self._create_model_from_entity(order)
        try:
            with self.session.begin_nested():
                self.session.add(model)
        except IntegrityError:
            existing = self.session.query(OrderModel).filter(
                OrderModel.stripe_session_id == order.stripe_session_id
            ).first()
            if existing is None:
                raise
            logger.info(
                "Order for session %s was created concurrently, using order %s",
                order.stripe_session_id, existing.id
            )
            return self._map_to_entity(existing), False

        return self._map_to_entity(model), True

    async def set_download_expiry(self, order: Order) -> Order:
        """Persist a backfilled download window"""
        self.session.query(OrderModel).filter(
            OrderModel.id == order.id.value,
            OrderModel.download_expires_at.is_(None)
        ).update(
            {
                OrderModel.download_expires_at: order.download_expires_at,
                OrderModel.updated_at: order.updated_at,
            },
            synchronize_session=False
        )
        self.session.flush()
        return order

    async def get_downloadable(
        self, order_id: OrderId, customer_email: str, now: datetime
    ) -> Optional[Tuple[Order, Optional[CatalogModel]]]:
        row = (
            self.session.query(OrderModel, CatalogModelORM)
            .outerjoin(CatalogModelORM, OrderModel.model_id == CatalogModelORM.id)
            .filter(
                OrderModel.id == order_id.value,
                func.lower(OrderModel.customer_email) == customer_email.lower(),
                OrderModel.status == OrderStatus.COMPLETED.value,
                OrderModel.download_expires_at > now,
                OrderModel.download_count < OrderModel.max_downloads,
            )
            .first()
        )
        if row is None:
            return None
        order_model, catalog_model = row
        catalog = map_catalog_model(catalog_model) if catalog_model is not None else None
        return self._map_to_entity(order_model), catalog

    async def increment_download_count(self, order_id: OrderId, now: datetime) -> Optional[Order]:
        # Evaluated by the database in one statement so concurrent requests
        # cannot both take the last slot.
        updated = self.session.query(OrderModel).filter(
            OrderModel.id == order_id.value,
            OrderModel.status == OrderStatus.COMPLETED.value,
            OrderModel.download_expires_at > now,
            OrderModel.download_count < OrderModel.max_downloads,
        ).update(
            {
                OrderModel.download_count: OrderModel.download_count + 1,
                OrderModel.updated_at: now,
            },
            synchronize_session=False
        )
        if not updated:
            return None

        model = (
            self.session.query(OrderModel)
            .populate_existing()
            .filter(OrderModel.id == order_id.value)
            .first()
        )
        return self._map_to_entity(model)

    async def get_by_customer_email(self, customer_email: str) -> List[Order]:
        """Orders owned by an email address, newest first"""
        models = (
            self.session.query(OrderModel)
            .filter(func.lower(OrderModel.customer_email) == customer_email.lower())
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .all()
        )
        return [self._map_to_entity(model) for model in models]

    def _create_model_from_entity(self, order: Order) -> OrderModel:
        """Create ORM model from domain entity"""
        status_value = order.status.value if hasattr(order.status, 'value') else str(order.status)

        return OrderModel(
            stripe_session_id=order.stripe_session_id,
            stripe_payment_intent_id=order.stripe_payment_intent_id,
            customer_id=order.customer_id,
            customer_email=order.customer_email,
            customer_name=order.customer_name,
            model_id=order.model_id.value if order.model_id else None,
            model_title=order.model_title,
            model_slug=order.model_slug,
            amount=order.amount.amount,
            currency=order.amount.currency,
            status=status_value,
            payment_status=order.payment_status,
            download_expires_at=order.download_expires_at,
            download_count=order.download_count,
            max_downloads=order.max_downloads,
            order_metadata=order.metadata,
            created_at=order.created_at,
            updated_at=order.updated_at
        )

    def _map_to_entity(self, model: OrderModel) -> Order:
        """Map ORM model to domain entity"""
        return Order(
            id=OrderId(model.id),
            stripe_session_id=model.stripe_session_id,
            stripe_payment_intent_id=model.stripe_payment_intent_id,
            customer_email=model.customer_email,
            customer_name=model.customer_name or "",
            customer_id=model.customer_id,
            model_id=CatalogModelId(model.model_id) if model.model_id else None,
            model_title=model.model_title,
            model_slug=model.model_slug or "",
            amount=Money(Decimal(model.amount), model.currency),
            status=OrderStatus(model.status),
            payment_status=model.payment_status,
            download_expires_at=model.download_expires_at,
            download_count=model.download_count,
            max_downloads=model.max_downloads,
            metadata=model.order_metadata or {},
            created_at=model.created_at,
            updated_at=model.updated_at
        )
