"""
User Management Use Cases (Use Case Layer)
"""

from uuid import UUID

from src.platform.exception.exceptions import NotFoundError, UnauthorizedError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.app.interface.i_mail_publisher import IMailPublisher
from src.service.user.app.interface.i_user_command_repo import IUserCommandRepo
from src.service.user.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.user.domain.user_entity import SuperUserUpdate, UserEntity, UserUpdate


class UserCommandUseCase:
    """Create, login and profile updates for users (CQRS command side)"""

    def __init__(
        self,
        *,
        user_command_repo: IUserCommandRepo,
        user_query_repo: IUserQueryRepo,
        mail_publisher: IMailPublisher,
    ) -> None:
        self.user_command_repo = user_command_repo
        self.user_query_repo = user_query_repo
        self.mail_publisher = mail_publisher

    @Logger.io
    async def create(
        self, *, feide_id: str, email: str, first_name: str, last_name: str, username: str
    ) -> UserEntity:
        user = UserEntity.create(
            feide_id=feide_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            username=username,
        )
        created = await self.user_command_repo.create(user=user)
        await self.mail_publisher.send_user_registration(recipient_id=created.id)
        Logger.base.info(f'👤 [USER] Registered {created.username}')
        return created

    @Logger.io
    async def login(self, *, user_id: UUID) -> UserEntity:
        user = await self._get_user(user_id)
        user.mark_logged_in()
        return await self.user_command_repo.update(user=user)

    @Logger.io
    async def update(self, *, user_id: UUID | None, data: UserUpdate) -> UserEntity:
        if user_id is None:
            raise UnauthorizedError()
        user = await self._get_user(user_id)
        user.apply_update(data)
        return await self.user_command_repo.update(user=user)

    @Logger.io
    async def super_update(
        self, *, current_user_id: UUID | None, user_id: UUID, data: SuperUserUpdate
    ) -> UserEntity:
        current = (
            await self.user_query_repo.get_by_id(user_id=current_user_id)
            if current_user_id
            else None
        )
        UserEntity.validate_super_user(current)
        user = await self._get_user(user_id)
        user.apply_super_update(data)
        return await self.user_command_repo.update(user=user)

    async def _get_user(self, user_id: UUID) -> UserEntity:
        user = await self.user_query_repo.get_by_id(user_id=user_id)
        if not user:
            raise NotFoundError('User not found')
        return user
