"""Order entity with business logic"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional, List, Dict, Any

from ..value_objects.money import Money
from ..value_objects.entity_ids import OrderId, CatalogModelId
from ..enums import OrderStatus, PaymentStatus
from ..events.order_events import OrderReconciled, DownloadWindowBackfilled


UNKNOWN_MODEL_TITLE = "Unknown Model"


@dataclass
class Order:
    """A completed purchase and its download entitlement.

    ``model_title`` and ``model_slug`` are a snapshot taken at purchase time;
    later catalog edits never rewrite them.
    """

    id: Optional[OrderId]
    stripe_session_id: str
    customer_email: str
    amount: Money
    customer_name: str = ""
    customer_id: Optional[int] = None
    model_id: Optional[CatalogModelId] = None
    model_title: str = UNKNOWN_MODEL_TITLE
    model_slug: str = ""
    status: OrderStatus = OrderStatus.PENDING
    payment_status: Optional[str] = None
    stripe_payment_intent_id: Optional[str] = None
    download_expires_at: Optional[datetime] = None
    download_count: int = 0
    max_downloads: int = 5
    metadata: Dict[str, Any] = field(default_factory=dict)

    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    # Domain events
    _events: List = field(default_factory=list, init=False, repr=False)

    @classmethod
    def from_paid_session(
        cls,
        stripe_session_id: str,
        customer_email: str,
        customer_name: str,
        amount: Money,
        model_id: Optional[CatalogModelId],
        model_title: Optional[str],
        model_slug: Optional[str],
        max_downloads: int,
        download_window: timedelta,
        payment_intent_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> 'Order':
        """Factory for an order materialized from a paid checkout session"""
        now = now or datetime.utcnow()
        return cls(
            id=None,
            stripe_session_id=stripe_session_id,
            customer_email=customer_email.lower(),
            customer_name=customer_name or "",
            amount=amount,
            model_id=model_id,
            model_title=model_title or UNKNOWN_MODEL_TITLE,
            model_slug=model_slug or "",
            status=OrderStatus.COMPLETED,
            payment_status=PaymentStatus.PAID.value,
            stripe_payment_intent_id=payment_intent_id,
            download_expires_at=now + download_window,
            download_count=0,
            max_downloads=max_downloads,
            metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
        )

    def record_reconciled(self) -> None:
        self._events.append(OrderReconciled(
            order_id=self.id,
            stripe_session_id=self.stripe_session_id,
            customer_email=self.customer_email,
            amount=self.amount,
        ))

    def backfill_download_window(self, download_window: timedelta, now: Optional[datetime] = None) -> bool:
        """Give legacy orders without an expiry a fresh window. Returns True if changed."""
        if self.download_expires_at is not None:
            return False
        now = now or datetime.utcnow()
        self.download_expires_at = now + download_window
        self.updated_at = now
        self._events.append(DownloadWindowBackfilled(
            order_id=self.id,
            download_expires_at=self.download_expires_at,
        ))
        return True

    @property
    def downloads_remaining(self) -> int:
        return max(self.max_downloads - self.download_count, 0)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.download_expires_at is None:
            return True
        return self.download_expires_at <= (now or datetime.utcnow())

    def is_downloadable(self, now: Optional[datetime] = None) -> bool:
        return (
            self.status == OrderStatus.COMPLETED
            and not self.is_expired(now)
            and self.download_count < self.max_downloads
        )

    def denial_reason(self, caller_email: str, now: Optional[datetime] = None) -> Optional[str]:
        """Internal-only explanation of why a download would be refused"""
        if self.customer_email.lower() != caller_email.lower():
            return "wrong_owner"
        if self.status != OrderStatus.COMPLETED:
            return "not_completed"
        if self.is_expired(now):
            return "expired"
        if self.download_count >= self.max_downloads:
            return "limit_reached"
        return None

    def get_events(self) -> List:
        """Get and clear domain events"""
        events = self._events.copy()
        self._events.clear()
        return events
