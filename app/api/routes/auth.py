"""Authentication routes"""

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_unit_of_work, get_current_user
from ...application.use_cases.register_user import RegisterUserUseCase
from ...application.use_cases.login_user import LoginUserUseCase
from ...application.dtos.user_dtos import CreateUserDto, LoginUserDto, UserResponse, UserDto
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: CreateUserDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Register a new user"""
    return await RegisterUserUseCase(unit_of_work).execute(user_data)


@router.post("/login", response_model=UserResponse)
async def login_user(
    login_data: LoginUserDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Login user"""
    return await LoginUserUseCase(unit_of_work).execute(login_data)


@router.get("/me", response_model=UserDto)
async def read_current_user(current_user: User = Depends(get_current_user)):
    """Current user profile"""
    return UserDto.from_entity(current_user)
