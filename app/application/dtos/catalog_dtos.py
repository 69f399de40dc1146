"""Catalog DTOs"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator

from ...domain.enums import CatalogStatus


class CatalogModelCreateDTO(BaseModel):
    slug: str = Field(..., min_length=1, max_length=255, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    category: Optional[str] = Field(default=None, max_length=100)
    thumbnail_url: Optional[str] = None
    file_url: Optional[str] = None
    excel_url: Optional[str] = None
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    status: CatalogStatus = CatalogStatus.ACTIVE
    tags: List[str] = []

    class Config:
        extra = "forbid"


class CatalogModelUpdateDTO(BaseModel):
    """Partial update; omitted fields are left unchanged"""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    thumbnail_url: Optional[str] = None
    file_url: Optional[str] = None
    excel_url: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    status: Optional[CatalogStatus] = None
    tags: Optional[List[str]] = None

    class Config:
        extra = "forbid"

    @field_validator("title", "price", "status", "tags", mode="before")
    @classmethod
    def reject_null(cls, value):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if value is None:
            raise ValueError("may not be null")
        return value


class CatalogModelResponseDTO(BaseModel):
    id: int
    slug: str
    title: str
    description: str
    category: Optional[str] = None
    thumbnail_url: Optional[str] = None
    price: float
    status: str
    tags: List[str] = []
    has_excel: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, model):
        return cls(
            id=model.id.value,
            slug=model.slug,
            title=model.title,
            description=model.description,
            category=model.category,
            thumbnail_url=model.thumbnail_url,
            price=float(model.price),
            status=model.status.value,
            tags=model.tags,
            has_excel=bool(model.excel_url),
            created_at=model.created_at
        )


class CatalogModelListDTO(BaseModel):
    models: List[CatalogModelResponseDTO]
    total: int
    category: str
