"""
Permission checks (Use Case Layer)

Answers "may this user do X" for every other service through the
IPermissionService port. Rules:
- Super users pass every check
- Organization ADMINs satisfy any role requirement in their organization
- Feature permissions come from the user's organizations or confirmed study program
"""

from typing import Optional
from uuid import UUID

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.organization.app.interface.i_member_repo import IMemberRepo
from src.service.organization.app.interface.i_organization_repo import IOrganizationRepo
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.shared_kernel.domain.enum.role import Role
from src.service.user.app.interface.i_user_query_repo import IUserQueryRepo


class PermissionService(IPermissionService):
    def __init__(
        self,
        *,
        member_repo: IMemberRepo,
        organization_repo: IOrganizationRepo,
        user_query_repo: IUserQueryRepo,
    ) -> None:
        self.member_repo = member_repo
        self.organization_repo = organization_repo
        self.user_query_repo = user_query_repo
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def is_super_user(self, *, user_id: Optional[UUID]) -> bool:
        if user_id is None:
            return False
        user = await self.user_query_repo.get_by_id(user_id=user_id)
        return bool(user and user.is_super_user)

    @Logger.io
    async def has_role(
        self,
        *,
        user_id: Optional[UUID],
        organization_id: UUID,
        role: Role,
        feature_permission: Optional[FeaturePermission] = None,
    ) -> bool:
        with self.tracer.start_as_current_span(
            'permission.has_role',
            attributes={'organization.id': str(organization_id), 'role': role.value},
        ):
            if user_id is None:
                return False
            if await self.is_super_user(user_id=user_id):
                return True

            member = await self.member_repo.get_by_user_and_organization(
                user_id=user_id, organization_id=organization_id
            )
            if member is None:
                return False
            if not member.is_admin and member.role != role:
                return False

            if feature_permission is None:
                return True
            organization = await self.organization_repo.get_by_id(organization_id=organization_id)
            return bool(organization and organization.has_feature_permission(feature_permission))

    @Logger.io
    async def has_feature_permission(
        self, *, user_id: Optional[UUID], feature_permission: FeaturePermission
    ) -> bool:
        if user_id is None:
            return False
        user = await self.user_query_repo.get_by_id(user_id=user_id)
        if user is None:
            return False
        if user.is_super_user:
            return True

        organizations = await self.organization_repo.find_many(user_id=user_id)
        if any(org.has_feature_permission(feature_permission) for org in organizations):
            return True

        if user.confirmed_study_program_id is None:
            return False
        study_program = await self.user_query_repo.get_study_program(
            study_program_id=user.confirmed_study_program_id
        )
        return bool(study_program and feature_permission in study_program.feature_permissions)
