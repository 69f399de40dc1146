"""Order ORM Model"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ...db.models import Base


class OrderModel(Base):
    __tablename__ = 'orders'
    __table_args__ = (
        CheckConstraint('download_count >= 0', name='ck_orders_download_count_non_negative'),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Payment details
    stripe_session_id = Column(String(255), unique=True, index=True, nullable=False)
    stripe_payment_intent_id = Column(String(255), nullable=True)

    # Customer (ownership is matched on customer_email)
    customer_id = Column(Integer, ForeignKey('customers.id'), nullable=True, index=True)
    customer_email = Column(String(255), nullable=False, index=True)
    customer_name = Column(String(255), nullable=True)

    # Snapshot of the purchased model
    model_id = Column(Integer, ForeignKey('models.id'), nullable=True, index=True)
    model_title = Column(String(255), nullable=False)
    model_slug = Column(String(255), nullable=True)

    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), default='usd', nullable=False)
    status = Column(String(20), default='pending', nullable=False, index=True)
    payment_status = Column(String(50), nullable=True)

    # Download entitlement
    download_expires_at = Column(DateTime, nullable=True)
    download_count = Column(Integer, default=0, nullable=False)
    max_downloads = Column(Integer, default=5, nullable=False)

    # "metadata" is reserved on declarative classes
    order_metadata = Column('metadata', JSON, nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now(), index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    customer = relationship('CustomerModel', back_populates='orders')
    model = relationship('CatalogModelORM')
