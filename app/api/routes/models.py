"""Public catalog routes"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...application.dtos.catalog_dtos import CatalogModelResponseDTO, CatalogModelListDTO
from ...api.dependencies import get_unit_of_work
from ...core.exceptions import NotFoundError
from ...domain.enums import CatalogStatus


router = APIRouter(tags=["models"])


@router.get("/", response_model=CatalogModelListDTO)
async def list_models(
    category: Optional[str] = Query(default=None, max_length=100),
    limit: int = Query(default=50, ge=1, le=100),
    unit_of_work = Depends(get_unit_of_work)
):
    """List active models"""
    async with unit_of_work:
        models = await unit_of_work.models.list_active(category=category, limit=limit)

    return CatalogModelListDTO(
        models=[CatalogModelResponseDTO.from_entity(model) for model in models],
        total=len(models),
        category=category or "all"
    )


@router.get("/{slug}", response_model=CatalogModelResponseDTO)
async def get_model(slug: str, unit_of_work = Depends(get_unit_of_work)):
    """Get an active model by slug"""
    async with unit_of_work:
        model = await unit_of_work.models.get_by_slug(slug)

    if model is None or model.status != CatalogStatus.ACTIVE:
        raise NotFoundError("Model not found")
    return CatalogModelResponseDTO.from_entity(model)
