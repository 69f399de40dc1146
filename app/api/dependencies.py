"""API dependencies"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..core.exceptions import UnauthorizedError, ForbiddenError
from ..core.security import verify_token
from ..db.database import get_db
from ..domain.entities.user import User
from ..domain.repositories.unit_of_work import IUnitOfWork
from ..domain.value_objects.entity_ids import UserId
from ..infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl
from ..infrastructure.external_services.payment_service import PaymentService
from ..infrastructure.external_services.storage_service import ExcelStorageService


# auto_error=False so a missing header is a 401, not FastAPI's default 403
security = HTTPBearer(auto_error=False)


def get_unit_of_work(db: Session = Depends(get_db)) -> IUnitOfWork:
    """Get unit of work"""
    return UnitOfWorkImpl(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
) -> User:
    """Get current authenticated user"""
    if credentials is None:
        raise UnauthorizedError("Unauthorized")

    subject = verify_token(credentials.credentials)
    try:
        user_id = UserId.from_str(subject)
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token")

    async with unit_of_work:
        user = await unit_of_work.users.get_by_id(user_id)

    if not user or not user.is_active:
        raise UnauthorizedError("User not found")
    return user


async def get_current_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """Get current admin user"""
    if not current_user.is_admin:
        raise ForbiddenError("Admin access required")
    return current_user


def get_payment_service() -> PaymentService:
    """Get payment service"""
    return PaymentService()


def get_storage_service(request: Request) -> ExcelStorageService:
    """Storage service created and initialized during application startup"""
    return request.app.state.storage_service
