from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.user.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.user.domain.user_entity import StudyProgramEntity, UserEntity
from src.service.user.driven_adapter.model.user_model import StudyProgramModel, UserModel


class UserQueryRepoImpl(IUserQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, *, user_id: UUID) -> Optional[UserEntity]:
        async with self.session_factory() as session:
            result = await session.execute(select(UserModel).where(UserModel.id == user_id))
            user_model = result.scalar_one_or_none()
            return self._model_to_entity(user_model) if user_model else None

    @Logger.io
    async def get_by_feide_id(self, *, feide_id: str) -> Optional[UserEntity]:
        async with self.session_factory() as session:
            result = await session.execute(select(UserModel).where(UserModel.feide_id == feide_id))
            user_model = result.scalar_one_or_none()
            return self._model_to_entity(user_model) if user_model else None

    @Logger.io
    async def find_many(self) -> list[UserEntity]:
        async with self.session_factory() as session:
            result = await session.execute(select(UserModel).order_by(UserModel.created_at))
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def get_study_program(self, *, study_program_id: UUID) -> Optional[StudyProgramEntity]:
        async with self.session_factory() as session:
            model = await session.get(StudyProgramModel, study_program_id)
            return self._study_program_to_entity(model) if model else None

    @Logger.io
    async def find_many_study_programs(self) -> list[StudyProgramEntity]:
        async with self.session_factory() as session:
            result = await session.execute(select(StudyProgramModel).order_by(StudyProgramModel.name))
            return [self._study_program_to_entity(m) for m in result.scalars().all()]

    @staticmethod
    def _study_program_to_entity(model: StudyProgramModel) -> StudyProgramEntity:
        return StudyProgramEntity(
            id=model.id,
            name=model.name,
            external_id=model.external_id,
            feature_permissions=[FeaturePermission(p) for p in model.feature_permissions],
        )

    @staticmethod
    def _model_to_entity(user_model: UserModel) -> UserEntity:
        return UserEntity(
            id=user_model.id,
            feide_id=user_model.feide_id,
            email=user_model.email,
            username=user_model.username,
            first_name=user_model.first_name,
            last_name=user_model.last_name,
            graduation_year=user_model.graduation_year,
            graduation_year_updated_at=user_model.graduation_year_updated_at,
            first_login=user_model.first_login,
            last_login=user_model.last_login,
            allergies=user_model.allergies,
            phone_number=user_model.phone_number,
            is_super_user=user_model.is_super_user,
            study_program_id=user_model.study_program_id,
            confirmed_study_program_id=user_model.confirmed_study_program_id,
            created_at=user_model.created_at,
        )
