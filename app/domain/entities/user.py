"""User entity with business logic"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..value_objects.email import Email
from ..value_objects.entity_ids import UserId
from ..enums import UserRole


@dataclass
class User:
    id: Optional[UserId]
    email: Email
    hashed_password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole = UserRole.USER
    is_active: bool = True

    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    last_login: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        email: Email,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None
    ) -> 'User':
        """Factory method to create a new user with proper defaults"""
        return cls(
            id=None,
            email=email,
            hashed_password=password,
            first_name=first_name,
            last_name=last_name,
            role=UserRole.USER,
            created_at=datetime.utcnow(),
            updated_at=datetime.utcnow()
        )

    def promote_to_admin(self) -> None:
        """Business logic: promote to admin"""
        if not self.is_active:
            raise ValueError("Can only promote active users")

        self.role = UserRole.ADMIN
        self.updated_at = datetime.utcnow()

    def record_login(self) -> None:
        """Record user login"""
        self.last_login = datetime.utcnow()

    @property
    def full_name(self) -> str:
        """Get full name"""
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name or self.last_name or str(self.email)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
