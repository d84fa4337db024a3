from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.organization.app.interface.i_member_repo import IMemberRepo
from src.service.organization.domain.organization_entity import MemberEntity
from src.service.organization.driven_adapter.model.organization_model import MemberModel
from src.service.shared_kernel.domain.enum.role import Role


class MemberRepoImpl(IMemberRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create(self, *, member: MemberEntity) -> MemberEntity:
        async with self.session_factory() as session:
            model = MemberModel(
                id=member.id,
                user_id=member.user_id,
                organization_id=member.organization_id,
                role=member.role.value,
            )
            session.add(model)
            await session.commit()
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def get_by_id(self, *, member_id: UUID) -> Optional[MemberEntity]:
        async with self.session_factory() as session:
            model = await session.get(MemberModel, member_id)
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_user_and_organization(
        self, *, user_id: UUID, organization_id: UUID
    ) -> Optional[MemberEntity]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(MemberModel).where(
                    MemberModel.user_id == user_id,
                    MemberModel.organization_id == organization_id,
                )
            )
            model = result.scalar_one_or_none()
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def find_many(
        self,
        *,
        organization_id: Optional[UUID] = None,
        user_id: Optional[UUID] = None,
        role: Optional[Role] = None,
    ) -> list[MemberEntity]:
        async with self.session_factory() as session:
            stmt = select(MemberModel).order_by(MemberModel.created_at)
            if organization_id is not None:
                stmt = stmt.where(MemberModel.organization_id == organization_id)
            if user_id is not None:
                stmt = stmt.where(MemberModel.user_id == user_id)
            if role is not None:
                stmt = stmt.where(MemberModel.role == role.value)
            result = await session.execute(stmt)
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def update_role(self, *, member_id: UUID, role: Role) -> MemberEntity:
        async with self.session_factory() as session:
            model = await session.get(MemberModel, member_id)
            if not model:
                raise NotFoundError('Member not found')
            model.role = role.value
            await session.commit()
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def delete(self, *, member_id: UUID) -> MemberEntity:
        async with self.session_factory() as session:
            model = await session.get(MemberModel, member_id)
            if not model:
                raise NotFoundError('Member not found')
            entity = self._model_to_entity(model)
            await session.delete(model)
            await session.commit()
            return entity

    @staticmethod
    def _model_to_entity(model: MemberModel) -> MemberEntity:
        return MemberEntity(
            id=model.id,
            user_id=model.user_id,
            organization_id=model.organization_id,
            role=Role(model.role),
            created_at=model.created_at,
        )
