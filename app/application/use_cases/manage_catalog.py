"""Catalog administration use cases"""

from datetime import datetime

from sqlalchemy.exc import IntegrityError

from ...core.exceptions import InvalidInputError, NotFoundError
from ...domain.entities.catalog_model import CatalogModel
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.catalog_dtos import CatalogModelCreateDTO, CatalogModelUpdateDTO, CatalogModelResponseDTO


class CreateCatalogModelUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: CatalogModelCreateDTO) -> CatalogModelResponseDTO:
        try:
            async with self.unit_of_work:
                if await self.unit_of_work.models.get_by_slug(request.slug):
                    raise InvalidInputError(f"Model with slug '{request.slug}' already exists")
                model = await self.unit_of_work.models.add(CatalogModel(id=None, **request.model_dump()))
                await self.unit_of_work.commit()
        except IntegrityError as e:
            raise InvalidInputError(f"Model with slug '{request.slug}' already exists") from e
        return CatalogModelResponseDTO.from_entity(model)


class UpdateCatalogModelUseCase:
    """Edits never touch existing orders; they keep their purchase-time snapshot."""

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, slug: str, request: CatalogModelUpdateDTO) -> CatalogModelResponseDTO:
        try:
            async with self.unit_of_work:
                model = await self.unit_of_work.models.get_by_slug(slug)
                if model is None:
                    raise NotFoundError("Model not found")

                for name, value in request.model_dump(exclude_unset=True).items():
                    setattr(model, name, value)
                model.updated_at = datetime.utcnow()

                model = await self.unit_of_work.models.update(model)
                await self.unit_of_work.commit()
        except IntegrityError as e:
            raise InvalidInputError(f"Model '{slug}' could not be updated", detail=str(e.orig)) from e
        return CatalogModelResponseDTO.from_entity(model)
