"""User repository implementation"""

from typing import Optional
from sqlalchemy.orm import Session

from ...domain.repositories.user_repository import IUserRepository
from ...domain.entities.user import User
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import UserId
from ...domain.enums import UserRole
from ..orm.user_model import UserModel


class UserRepositoryImpl(IUserRepository):
    """Repository implementation for User aggregate"""

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        """Get user by ID"""
        model = self.session.query(UserModel).filter(UserModel.id == user_id.value).first()
        return self._map_to_entity(model) if model else None

    async def get_by_email(self, email: Email) -> Optional[User]:
        """Get user by email"""
        model = self.session.query(UserModel).filter(UserModel.email == str(email)).first()
        return self._map_to_entity(model) if model else None

    async def exists_by_email(self, email: Email) -> bool:
        """Check if user exists by email"""
        return self.session.query(UserModel).filter(UserModel.email == str(email)).first() is not None

    async def add(self, user: User) -> User:
        """Add a new user"""
        model = UserModel(
            email=str(user.email),
            hashed_password=user.hashed_password,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login=user.last_login
        )
        self.session.add(model)
        self.session.flush()
        return self._map_to_entity(model)

    async def update(self, user: User) -> User:
        """Update an existing user"""
        model = self.session.query(UserModel).filter(UserModel.id == user.id.value).first()
        if model:
            model.first_name = user.first_name
            model.last_name = user.last_name
            model.role = user.role
            model.is_active = user.is_active
            model.last_login = user.last_login
            self.session.flush()
        return user

    def _map_to_entity(self, model: UserModel) -> User:
        """Map ORM model to domain entity"""
        return User(
            id=UserId(model.id),
            email=Email(model.email),
            hashed_password=model.hashed_password,
            first_name=model.first_name,
            last_name=model.last_name,
            role=UserRole(model.role),
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
            last_login=model.last_login
        )
