"""Checkout DTOs"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class CreateCheckoutSessionDTO(BaseModel):
    """Request DTO for starting a Stripe checkout"""
    model_slug: str = Field(..., min_length=1, max_length=255)
    customer_email: Optional[EmailStr] = None
    customer_name: Optional[str] = Field(default=None, max_length=255)

    class Config:
        extra = "forbid"
        protected_namespaces = ()


class CheckoutSessionResponseDTO(BaseModel):
    url: str
    session_id: str
