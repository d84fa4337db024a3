from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.organization.app.interface.i_organization_repo import IOrganizationRepo
from src.service.organization.domain.organization_entity import OrganizationEntity


class OrganizationQueryUseCase:
    def __init__(self, *, organization_repo: IOrganizationRepo) -> None:
        self.organization_repo = organization_repo

    @Logger.io
    async def get(self, *, organization_id: UUID) -> OrganizationEntity:
        organization = await self.organization_repo.get_by_id(organization_id=organization_id)
        if not organization:
            raise NotFoundError('Organization not found')
        return organization

    @Logger.io
    async def find_many(self, *, user_id: Optional[UUID] = None) -> list[OrganizationEntity]:
        return await self.organization_repo.find_many(user_id=user_id)
