from typing import AsyncContextManager, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.user.app.interface.i_user_command_repo import IUserCommandRepo
from src.service.user.domain.user_entity import UserEntity
from src.service.user.driven_adapter.model.user_model import UserModel
from src.service.user.driven_adapter.repo.user_query_repo_impl import UserQueryRepoImpl


_MUTABLE_FIELDS = (
    'email',
    'first_name',
    'last_name',
    'graduation_year',
    'graduation_year_updated_at',
    'first_login',
    'last_login',
    'allergies',
    'phone_number',
    'is_super_user',
    'study_program_id',
    'confirmed_study_program_id',
)


class UserCommandRepoImpl(IUserCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create(self, *, user: UserEntity) -> UserEntity:
        async with self.session_factory() as session:
            user_model = UserModel(
                id=user.id,
                feide_id=user.feide_id,
                username=user.username,
                **{field: getattr(user, field) for field in _MUTABLE_FIELDS},
            )
            session.add(user_model)
            await session.commit()
            await session.refresh(user_model)
            return UserQueryRepoImpl._model_to_entity(user_model)

    @Logger.io
    async def update(self, *, user: UserEntity) -> UserEntity:
        async with self.session_factory() as session:
            user_model = await session.get(UserModel, user.id)
            if not user_model:
                raise NotFoundError(f'User {user.id} not found')
            for field in _MUTABLE_FIELDS:
                setattr(user_model, field, getattr(user, field))
            await session.commit()
            await session.refresh(user_model)
            return UserQueryRepoImpl._model_to_entity(user_model)
