"""Order DTOs for API responses"""

from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime


class OrderResponseDTO(BaseModel):
    """Response DTO for order data"""
    id: int
    stripe_session_id: str
    customer_email: str
    customer_name: str
    model_id: Optional[int] = None
    model_title: str
    model_slug: str
    amount: float
    currency: str
    status: str
    payment_status: Optional[str] = None
    download_expires_at: Optional[datetime] = None
    download_count: int
    max_downloads: int
    downloads_remaining: int
    download_available: bool
    metadata: Dict[str, Any] = {}
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        protected_namespaces = ()

    @classmethod
    def from_entity(cls, order):
        """Convert domain entity to DTO"""
        return cls(
            id=order.id.value,
            stripe_session_id=order.stripe_session_id,
            customer_email=order.customer_email,
            customer_name=order.customer_name,
            model_id=order.model_id.value if order.model_id else None,
            model_title=order.model_title,
            model_slug=order.model_slug,
            amount=float(order.amount.amount),
            currency=order.amount.currency,
            status=order.status.value,
            payment_status=order.payment_status,
            download_expires_at=order.download_expires_at,
            download_count=order.download_count,
            max_downloads=order.max_downloads,
            downloads_remaining=order.downloads_remaining,
            download_available=order.is_downloadable(),
            metadata=order.metadata,
            created_at=order.created_at
        )
