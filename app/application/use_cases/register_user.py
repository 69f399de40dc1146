"""Register user use case"""

from ...core.exceptions import InvalidInputError
from ...domain.entities.user import User
from ...domain.value_objects.email import Email
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...application.dtos.user_dtos import CreateUserDto, UserResponse, UserDto, TokenDto
from ...core.security import get_password_hash, create_access_token, create_refresh_token


class RegisterUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: CreateUserDto) -> UserResponse:
        async with self.unit_of_work:
            email = Email(request.email)

            # Check if user exists
            if await self.unit_of_work.users.exists_by_email(email):
                raise InvalidInputError("User with this email already exists")

            user = User.create(
                email=email,
                password=get_password_hash(request.password),
                first_name=request.first_name,
                last_name=request.last_name
            )

            user = await self.unit_of_work.users.add(user)
            await self.unit_of_work.commit()

        return UserResponse(
            user=UserDto.from_entity(user),
            tokens=TokenDto(
                access_token=create_access_token(str(user.id.value)),
                refresh_token=create_refresh_token(str(user.id.value))
            )
        )
