"""Order repository interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List, Tuple

from ..entities.order import Order
from ..entities.catalog_model import CatalogModel
from ..value_objects.entity_ids import OrderId


class IOrderRepository(ABC):

    @abstractmethod
    async def get_by_id(self, order_id: OrderId) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_by_session_id(self, stripe_session_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def add_if_absent(self, order: Order) -> Tuple[Order, bool]:
        """Insert unless an order for the same session exists.

        Returns the stored order and whether this call created it.
        """
        pass

    @abstractmethod
    async def set_download_expiry(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def get_downloadable(
        self, order_id: OrderId, customer_email: str, now: datetime
    ) -> Optional[Tuple[Order, Optional[CatalogModel]]]:
        """Single read enforcing ownership, status, expiry and remaining quota"""
        pass

    @abstractmethod
    async def increment_download_count(self, order_id: OrderId, now: datetime) -> Optional[Order]:
        """Guarded increment; None when the quota or window no longer allows it"""
        pass

    @abstractmethod
    async def get_by_customer_email(self, customer_email: str) -> List[Order]:
        pass
