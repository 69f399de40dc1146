"""Catalog repository implementation using SQLAlchemy ORM"""

from decimal import Decimal
from typing import Optional, List

from sqlalchemy.orm import Session

from ...domain.entities.catalog_model import CatalogModel
from ...domain.repositories.catalog_repository import ICatalogRepository
from ...domain.value_objects.entity_ids import CatalogModelId
from ...domain.enums import CatalogStatus
from ..orm.catalog_model import CatalogModelORM


def map_catalog_model(model: CatalogModelORM) -> CatalogModel:
    """Map ORM row to domain entity"""
    return CatalogModel(
        id=CatalogModelId(model.id),
        slug=model.slug,
        title=model.title,
        price=Decimal(model.price),
        description=model.description or "",
        category=model.category,
        thumbnail_url=model.thumbnail_url,
        file_url=model.file_url,
        excel_url=model.excel_url,
        status=CatalogStatus(model.status),
        tags=list(model.tags or []),
        created_at=model.created_at,
        updated_at=model.updated_at
    )


class CatalogRepositoryImpl(ICatalogRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, model_id: CatalogModelId) -> Optional[CatalogModel]:
        model = self.session.query(CatalogModelORM).filter(CatalogModelORM.id == model_id.value).first()
        return map_catalog_model(model) if model else None

    async def get_by_slug(self, slug: str) -> Optional[CatalogModel]:
        model = self.session.query(CatalogModelORM).filter(CatalogModelORM.slug == slug).first()
        return map_catalog_model(model) if model else None

    async def list_active(self, category: Optional[str] = None, limit: int = 50) -> List[CatalogModel]:
        query = self.session.query(CatalogModelORM).filter(
            CatalogModelORM.status == CatalogStatus.ACTIVE.value
        )
        if category:
            query = query.filter(CatalogModelORM.category == category)
        models = query.order_by(CatalogModelORM.created_at.desc(), CatalogModelORM.id.desc()).limit(limit).all()
        return [map_catalog_model(model) for model in models]

    async def add(self, model: CatalogModel) -> CatalogModel:
        orm = CatalogModelORM(
            slug=model.slug,
            title=model.title,
            description=model.description,
            category=model.category,
            thumbnail_url=model.thumbnail_url,
            file_url=model.file_url,
            excel_url=model.excel_url,
            price=model.price,
            status=model.status.value,
            tags=model.tags,
        )
        self.session.add(orm)
        self.session.flush()
        return map_catalog_model(orm)

    async def update(self, model: CatalogModel) -> CatalogModel:
        orm = self.session.query(CatalogModelORM).filter(CatalogModelORM.id == model.id.value).first()
        if orm is None:
            raise ValueError(f"Model {model.id.value} does not exist")
        orm.title = model.title
        orm.description = model.description
        orm.category = model.category
        orm.thumbnail_url = model.thumbnail_url
        orm.file_url = model.file_url
        orm.excel_url = model.excel_url
        orm.price = model.price
        orm.status = model.status.value
        orm.tags = model.tags
        self.session.flush()
        return map_catalog_model(orm)
