"""Order domain events"""

from dataclasses import dataclass
from datetime import datetime

from ..value_objects.money import Money
from ..value_objects.entity_ids import OrderId


@dataclass(frozen=True)
class OrderReconciled:
    order_id: OrderId
    stripe_session_id: str
    customer_email: str
    amount: Money


@dataclass(frozen=True)
class DownloadWindowBackfilled:
    order_id: OrderId
    download_expires_at: datetime
