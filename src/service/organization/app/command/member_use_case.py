from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.organization.app.interface.i_member_repo import IMemberRepo
from src.service.organization.domain.organization_entity import MemberEntity
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService
from src.service.shared_kernel.domain.enum.role import Role


class MemberUseCase:
    """
    Organization membership management

    Invariant: an organization always keeps at least one ADMIN, so the last
    admin can neither be removed nor demoted.
    """

    def __init__(self, *, member_repo: IMemberRepo, permission_service: IPermissionService) -> None:
        self.member_repo = member_repo
        self.permission_service = permission_service

    @Logger.io
    async def find_many(
        self, *, user_id: Optional[UUID], organization_id: UUID
    ) -> list[MemberEntity]:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to view members.')
        is_member = await self.permission_service.has_role(
            user_id=user_id, organization_id=organization_id, role=Role.MEMBER
        )
        if not is_member:
            raise PermissionDeniedError(
                'You must be a member of the organization to view its members.'
            )
        return await self.member_repo.find_many(organization_id=organization_id)

    @Logger.io
    async def add_member(
        self, *, user_id: Optional[UUID], organization_id: UUID, member_user_id: UUID, role: Role
    ) -> MemberEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to add a member.')
        await self._require_admin(
            user_id, organization_id, 'You must be an admin of the organization to add a member.'
        )

        existing = await self.member_repo.get_by_user_and_organization(
            user_id=member_user_id, organization_id=organization_id
        )
        if existing:
            raise InvalidArgumentError('The user is already a member of the organization.')

        member = MemberEntity(user_id=member_user_id, organization_id=organization_id, role=role)
        return await self.member_repo.create(member=member)

    @Logger.io
    async def remove_member(self, *, user_id: Optional[UUID], member_id: UUID) -> MemberEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to remove a member.')
        member = await self._get_member(member_id)

        # Leaving an organization only requires membership
        required_role = Role.MEMBER if member.user_id == user_id else Role.ADMIN
        has_role = await self.permission_service.has_role(
            user_id=user_id, organization_id=member.organization_id, role=required_role
        )
        if not has_role:
            raise PermissionDeniedError(
                'You must be an admin of the organization to remove a member.'
            )

        if member.is_admin:
            await self._ensure_not_last_admin(member, 'remove')

        removed = await self.member_repo.delete(member_id=member_id)
        Logger.base.info(f'🏢 [ORG] Member {member_id} removed')
        return removed

    @Logger.io
    async def update_role(
        self, *, user_id: Optional[UUID], member_id: UUID, role: Role
    ) -> MemberEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to update a role.')
        member = await self._get_member(member_id)
        await self._require_admin(
            user_id,
            member.organization_id,
            'You must be an admin of the organization to update a role.',
        )

        if member.is_admin and role != Role.ADMIN:
            await self._ensure_not_last_admin(member, 'demote')

        return await self.member_repo.update_role(member_id=member_id, role=role)

    async def _get_member(self, member_id: UUID) -> MemberEntity:
        member = await self.member_repo.get_by_id(member_id=member_id)
        if not member:
            raise NotFoundError('Member not found')
        return member

    async def _require_admin(self, user_id: UUID, organization_id: UUID, message: str) -> None:
        is_admin = await self.permission_service.has_role(
            user_id=user_id, organization_id=organization_id, role=Role.ADMIN
        )
        if not is_admin:
            raise PermissionDeniedError(message)

    async def _ensure_not_last_admin(self, member: MemberEntity, action: str) -> None:
        admins = await self.member_repo.find_many(
            organization_id=member.organization_id, role=Role.ADMIN
        )
        if len(admins) <= 1:
            raise InvalidArgumentError(
                f'Cannot {action} the last admin of the organization. '
                'Make another member admin first.'
            )
