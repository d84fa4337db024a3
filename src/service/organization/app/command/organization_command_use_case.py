from typing import Optional
from uuid import UUID

from src.platform.exception.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.organization.app.interface.i_organization_repo import IOrganizationRepo
from src.service.organization.domain.organization_entity import (
    OrganizationEntity,
    OrganizationUpdate,
)
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.shared_kernel.domain.enum.role import Role


class OrganizationCommandUseCase:
    """
    Create and update organizations

    Only super users can grant feature permissions; for everyone else the
    requested permissions are silently dropped.
    """

    def __init__(
        self, *, organization_repo: IOrganizationRepo, permission_service: IPermissionService
    ) -> None:
        self.organization_repo = organization_repo
        self.permission_service = permission_service

    @Logger.io
    async def create(
        self,
        *,
        user_id: Optional[UUID],
        name: str,
        description: Optional[str] = None,
        feature_permissions: Optional[list[FeaturePermission]] = None,
    ) -> OrganizationEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to create an organization.')

        if not await self.permission_service.is_super_user(user_id=user_id):
            feature_permissions = None

        organization = OrganizationEntity.create(
            name=name, description=description, feature_permissions=feature_permissions
        )
        created = await self.organization_repo.create(
            organization=organization, admin_user_id=user_id
        )
        Logger.base.info(f'🏢 [ORG] Created organization {created.name}')
        return created

    @Logger.io
    async def update(
        self, *, user_id: Optional[UUID], organization_id: UUID, data: OrganizationUpdate
    ) -> OrganizationEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to update an organization.')

        is_super_user = await self.permission_service.is_super_user(user_id=user_id)
        if not is_super_user:
            is_member = await self.permission_service.has_role(
                user_id=user_id, organization_id=organization_id, role=Role.MEMBER
            )
            if not is_member:
                raise PermissionDeniedError(
                    'You must be a member of the organization to update it.'
                )
            data.feature_permissions = None

        organization = await self.organization_repo.get_by_id(organization_id=organization_id)
        if not organization:
            raise NotFoundError('Organization not found')

        organization.apply_update(data)
        return await self.organization_repo.update(organization=organization)
