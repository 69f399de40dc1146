"""Catalog (financial model) repository interface"""

from abc import ABC, abstractmethod
from typing import Optional, List

from ..entities.catalog_model import CatalogModel
from ..value_objects.entity_ids import CatalogModelId


class ICatalogRepository(ABC):

    @abstractmethod
    async def get_by_id(self, model_id: CatalogModelId) -> Optional[CatalogModel]:
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[CatalogModel]:
        pass

    @abstractmethod
    async def list_active(self, category: Optional[str] = None, limit: int = 50) -> List[CatalogModel]:
        pass

    @abstractmethod
    async def add(self, model: CatalogModel) -> CatalogModel:
        pass

    @abstractmethod
    async def update(self, model: CatalogModel) -> CatalogModel:
        pass
