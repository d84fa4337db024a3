from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.organization.app.interface.i_organization_repo import IOrganizationRepo
from src.service.organization.domain.organization_entity import OrganizationEntity
from src.service.organization.driven_adapter.model.organization_model import (
    MemberModel,
    OrganizationModel,
)
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.shared_kernel.domain.enum.role import Role


class OrganizationRepoImpl(IOrganizationRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create(
        self, *, organization: OrganizationEntity, admin_user_id: UUID
    ) -> OrganizationEntity:
        async with self.session_factory() as session:
            model = OrganizationModel(
                id=organization.id,
                name=organization.name,
                description=organization.description,
                logo_file_id=organization.logo_file_id,
                feature_permissions=[p.value for p in organization.feature_permissions],
            )
            session.add(model)
            session.add(
                MemberModel(
                    id=uuid7(),
                    user_id=admin_user_id,
                    organization_id=organization.id,
                    role=Role.ADMIN.value,
                )
            )
            try:
                await session.commit()
            except IntegrityError as e:
                raise InvalidArgumentError(
                    f'An organization named {organization.name} already exists'
                ) from e
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def update(self, *, organization: OrganizationEntity) -> OrganizationEntity:
        async with self.session_factory() as session:
            model = await session.get(OrganizationModel, organization.id)
            if not model:
                raise NotFoundError('Organization not found')
            model.name = organization.name
            model.description = organization.description
            model.logo_file_id = organization.logo_file_id
            model.feature_permissions = [p.value for p in organization.feature_permissions]
            await session.commit()
            await session.refresh(model)
            return self._model_to_entity(model)

    @Logger.io
    async def get_by_id(self, *, organization_id: UUID) -> Optional[OrganizationEntity]:
        async with self.session_factory() as session:
            model = await session.get(OrganizationModel, organization_id)
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def find_many(self, *, user_id: Optional[UUID] = None) -> list[OrganizationEntity]:
        async with self.session_factory() as session:
            stmt = select(OrganizationModel).order_by(OrganizationModel.name)
            if user_id is not None:
                stmt = stmt.join(MemberModel).where(MemberModel.user_id == user_id)
            result = await session.execute(stmt)
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @staticmethod
    def _model_to_entity(model: OrganizationModel) -> OrganizationEntity:
        return OrganizationEntity(
            id=model.id,
            name=model.name,
            description=model.description,
            logo_file_id=model.logo_file_id,
            feature_permissions=[FeaturePermission(p) for p in model.feature_permissions],
            created_at=model.created_at,
        )
