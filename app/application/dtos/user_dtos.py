"""User DTOs for API layer"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class CreateUserDto(BaseModel):
    """DTO for user registration"""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    class Config:
        extra = "forbid"


class LoginUserDto(BaseModel):
    """DTO for user login"""
    email: EmailStr
    password: str

    class Config:
        extra = "forbid"


class UserDto(BaseModel):
    """DTO for user response"""
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user):
        return cls(
            id=user.id.value,
            email=str(user.email),
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
            created_at=user.created_at,
            last_login=user.last_login
        )


class TokenDto(BaseModel):
    """DTO for authentication tokens"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """DTO for authentication response"""
    user: UserDto
    tokens: TokenDto
