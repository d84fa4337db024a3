from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.user.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.user.domain.user_entity import StudyProgramEntity, UserEntity


class UserQueryUseCase:
    def __init__(self, *, user_query_repo: IUserQueryRepo) -> None:
        self.user_query_repo = user_query_repo

    @Logger.io
    async def get(self, *, user_id: UUID) -> UserEntity:
        user = await self.user_query_repo.get_by_id(user_id=user_id)
        if not user:
            raise NotFoundError('User not found')
        return user

    @Logger.io
    async def get_optional(self, *, user_id: Optional[UUID]) -> Optional[UserEntity]:
        if user_id is None:
            return None
        return await self.user_query_repo.get_by_id(user_id=user_id)

    @Logger.io
    async def find_many(self, *, current_user_id: Optional[UUID]) -> list[UserEntity]:
        current = await self.get_optional(user_id=current_user_id)
        UserEntity.validate_super_user(current)
        return await self.user_query_repo.find_many()

    @Logger.io
    async def get_study_program(self, *, study_program_id: UUID) -> Optional[StudyProgramEntity]:
        return await self.user_query_repo.get_study_program(study_program_id=study_program_id)

    @Logger.io
    async def find_many_study_programs(self) -> list[StudyProgramEntity]:
        return await self.user_query_repo.find_many_study_programs()
