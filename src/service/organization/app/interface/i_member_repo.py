from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.organization.domain.organization_entity import MemberEntity
from src.service.shared_kernel.domain.enum.role import Role


class IMemberRepo(ABC):
    @abstractmethod
    async def create(self, *, member: MemberEntity) -> MemberEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, member_id: UUID) -> Optional[MemberEntity]:
        pass

    @abstractmethod
    async def get_by_user_and_organization(
        self, *, user_id: UUID, organization_id: UUID
    ) -> Optional[MemberEntity]:
        pass

    @abstractmethod
    async def find_many(
        self,
        *,
        organization_id: Optional[UUID] = None,
        user_id: Optional[UUID] = None,
        role: Optional[Role] = None,
    ) -> list[MemberEntity]:
        pass

    @abstractmethod
    async def update_role(self, *, member_id: UUID, role: Role) -> MemberEntity:
        pass

    @abstractmethod
    async def delete(self, *, member_id: UUID) -> MemberEntity:
        pass
