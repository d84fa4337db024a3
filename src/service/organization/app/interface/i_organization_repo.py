from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.organization.domain.organization_entity import OrganizationEntity


class IOrganizationRepo(ABC):
    @abstractmethod
    async def create(
        self, *, organization: OrganizationEntity, admin_user_id: UUID
    ) -> OrganizationEntity:
        """Create the organization and its first ADMIN member in one transaction"""
        pass

    @abstractmethod
    async def update(self, *, organization: OrganizationEntity) -> OrganizationEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, organization_id: UUID) -> Optional[OrganizationEntity]:
        pass

    @abstractmethod
    async def find_many(self, *, user_id: Optional[UUID] = None) -> list[OrganizationEntity]:
        """All organizations, or only those the user is a member of"""
        pass
