"""Login user use case"""

from ...core.exceptions import UnauthorizedError
from ...domain.value_objects.email import Email
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...application.dtos.user_dtos import LoginUserDto, UserResponse, UserDto, TokenDto
from ...core.security import verify_password, create_access_token, create_refresh_token


class LoginUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: LoginUserDto) -> UserResponse:
        async with self.unit_of_work:
            email = Email(request.email)

            # Get user by email
            user = await self.unit_of_work.users.get_by_email(email)
            if not user or not user.is_active:
                raise UnauthorizedError("Invalid email or password")

            # Verify password
            if not verify_password(request.password, user.hashed_password):
                raise UnauthorizedError("Invalid email or password")

            user.record_login()
            await self.unit_of_work.users.update(user)
            await self.unit_of_work.commit()

        return UserResponse(
            user=UserDto.from_entity(user),
            tokens=TokenDto(
                access_token=create_access_token(str(user.id.value)),
                refresh_token=create_refresh_token(str(user.id.value))
            )
        )
