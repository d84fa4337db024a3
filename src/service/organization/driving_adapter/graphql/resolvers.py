from typing import Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.platform.graphql.context import GraphQLInfo
from src.service.organization.driving_adapter.graphql.types import (
    AddMemberInput,
    CreateOrganizationInput,
    HasFeaturePermissionResponse,
    HasRoleResponse,
    Member,
    MemberResponse,
    Organization,
    OrganizationResponse,
    OrganizationsResponse,
    UpdateOrganizationInput,
    UpdateRoleInput,
)
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.shared_kernel.domain.enum.role import Role


@strawberry.type
class OrganizationQuery:
    @strawberry.field
    async def organization(self, id: UUID) -> OrganizationResponse:
        organization = await container.organization_query_use_case().get(organization_id=id)
        return OrganizationResponse(organization=Organization.from_entity(organization))

    @strawberry.field
    async def organizations(self) -> OrganizationsResponse:
        organizations = await container.organization_query_use_case().find_many()
        return OrganizationsResponse(
            organizations=[Organization.from_entity(o) for o in organizations]
        )

    @strawberry.field
    async def has_role(
        self,
        info: GraphQLInfo,
        organization_id: UUID,
        role: Role,
        feature_permission: Optional[FeaturePermission] = None,
    ) -> HasRoleResponse:
        has_role = await container.permission_service().has_role(
            user_id=info.context.user_id,
            organization_id=organization_id,
            role=role,
            feature_permission=feature_permission,
        )
        return HasRoleResponse(has_role=has_role)

    @strawberry.field
    async def has_feature_permission(
        self, info: GraphQLInfo, feature_permission: FeaturePermission
    ) -> HasFeaturePermissionResponse:
        has_permission = await container.permission_service().has_feature_permission(
            user_id=info.context.user_id, feature_permission=feature_permission
        )
        return HasFeaturePermissionResponse(
            id=feature_permission, has_feature_permission=has_permission
        )


@strawberry.type
class OrganizationMutation:
    @strawberry.mutation
    async def create_organization(
        self, info: GraphQLInfo, data: CreateOrganizationInput
    ) -> OrganizationResponse:
        organization = await container.organization_command_use_case().create(
            user_id=info.context.user_id,
            name=data.name,
            description=data.description,
            feature_permissions=data.feature_permissions,
        )
        return OrganizationResponse(organization=Organization.from_entity(organization))

    @strawberry.mutation
    async def update_organization(
        self, info: GraphQLInfo, data: UpdateOrganizationInput
    ) -> OrganizationResponse:
        organization = await container.organization_command_use_case().update(
            user_id=info.context.user_id, organization_id=data.id, data=data.to_update()
        )
        return OrganizationResponse(organization=Organization.from_entity(organization))

    @strawberry.mutation
    async def add_member(self, info: GraphQLInfo, data: AddMemberInput) -> MemberResponse:
        member = await container.member_use_case().add_member(
            user_id=info.context.user_id,
            organization_id=data.organization_id,
            member_user_id=data.user_id,
            role=data.role,
        )
        return MemberResponse(member=Member.from_entity(member))

    @strawberry.mutation
    async def remove_member(self, info: GraphQLInfo, member_id: UUID) -> MemberResponse:
        member = await container.member_use_case().remove_member(
            user_id=info.context.user_id, member_id=member_id
        )
        return MemberResponse(member=Member.from_entity(member))

    @strawberry.mutation
    async def update_role(self, info: GraphQLInfo, data: UpdateRoleInput) -> MemberResponse:
        member = await container.member_use_case().update_role(
            user_id=info.context.user_id, member_id=data.member_id, role=data.role
        )
        return MemberResponse(member=Member.from_entity(member))
