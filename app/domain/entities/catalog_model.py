"""Catalog entry for a purchasable financial model"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from ..value_objects.entity_ids import CatalogModelId
from ..enums import CatalogStatus


@dataclass
class CatalogModel:
    id: Optional[CatalogModelId]
    slug: str
    title: str
    price: Decimal
    description: str = ""
    category: Optional[str] = None
    thumbnail_url: Optional[str] = None
    file_url: Optional[str] = None
    excel_url: Optional[str] = None
    status: CatalogStatus = CatalogStatus.ACTIVE
    tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_purchasable(self) -> bool:
        return self.status == CatalogStatus.ACTIVE and self.price > 0

    def asset_candidates(self) -> List[str]:
        """Stored asset paths in lookup order: Excel file first, then generic file"""
        return [url for url in (self.excel_url, self.file_url) if url]
