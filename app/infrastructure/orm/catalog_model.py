"""Catalog ORM Model (the ``models`` table)"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, JSON
from sqlalchemy.sql import func

from ...db.models import Base


class CatalogModelORM(Base):
    __tablename__ = 'models'

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True, index=True)
    thumbnail_url = Column(String, nullable=True)
    file_url = Column(String, nullable=True)
    excel_url = Column(String, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), default='active', nullable=False, index=True)
    tags = Column(JSON, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
