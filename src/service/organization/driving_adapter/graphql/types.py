from datetime import datetime
from typing import TYPE_CHECKING, Annotated, Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.platform.exception.exceptions import PermissionDeniedError, UnauthorizedError
from src.platform.graphql.context import GraphQLInfo
from src.service.organization.domain.organization_entity import (
    MemberEntity,
    OrganizationEntity,
    OrganizationUpdate,
)
from src.service.shared_kernel.domain.enum.feature_permission import FeaturePermission
from src.service.shared_kernel.domain.enum.role import Role
from src.service.user.driving_adapter.graphql.types import User


if TYPE_CHECKING:
    from src.service.event.driving_adapter.graphql.types import Event
    from src.service.listing.driving_adapter.graphql.types import Listing

EventRef = Annotated['Event', strawberry.lazy('src.service.event.driving_adapter.graphql.types')]
ListingRef = Annotated[
    'Listing', strawberry.lazy('src.service.listing.driving_adapter.graphql.types')
]

strawberry.enum(Role)
strawberry.enum(FeaturePermission)


@strawberry.type
class Member:
    id: UUID
    user_id: UUID
    organization_id: UUID
    role: Role

    @classmethod
    def from_entity(cls, entity: MemberEntity) -> 'Member':
        return cls(
            id=entity.id,
            user_id=entity.user_id,
            organization_id=entity.organization_id,
            role=entity.role,
        )

    @strawberry.field
    async def user(self) -> User:
        user = await container.user_query_use_case().get(user_id=self.user_id)
        return User.from_entity(user)

    @strawberry.field
    async def organization(self) -> 'Organization':
        organization = await container.organization_query_use_case().get(
            organization_id=self.organization_id
        )
        return Organization.from_entity(organization)


@strawberry.type
class Organization:
    id: UUID
    name: str
    description: str
    logo_file_id: Optional[UUID]
    feature_permissions: list[FeaturePermission]
    created_at: Optional[datetime]

    @classmethod
    def from_entity(cls, entity: OrganizationEntity) -> 'Organization':
        return cls(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            logo_file_id=entity.logo_file_id,
            feature_permissions=list(entity.feature_permissions),
            created_at=entity.created_at,
        )

    @strawberry.field(description='Null unless the current user is a member')
    async def members(self, info: GraphQLInfo) -> Optional[list[Member]]:
        try:
            members = await container.member_use_case().find_many(
                user_id=info.context.user_id, organization_id=self.id
            )
        except (UnauthorizedError, PermissionDeniedError):
            return None
        return [Member.from_entity(m) for m in members]

    @strawberry.field
    async def events(self) -> list[EventRef]:
        from src.service.event.driving_adapter.graphql.types import Event

        events = await container.event_query_use_case().find_many(organization_id=self.id)
        return [Event.from_entity(e) for e in events]

    @strawberry.field
    async def listings(self) -> list[ListingRef]:
        from src.service.listing.driving_adapter.graphql.types import Listing

        listings = await container.listing_use_case().find_many(organization_id=self.id)
        return [Listing.from_entity(listing) for listing in listings]


@strawberry.type
class OrganizationResponse:
    organization: Organization


@strawberry.type
class OrganizationsResponse:
    organizations: list[Organization]


@strawberry.type
class MemberResponse:
    member: Member


@strawberry.type
class HasRoleResponse:
    has_role: bool


@strawberry.type
class HasFeaturePermissionResponse:
    id: FeaturePermission
    has_feature_permission: bool


@strawberry.input
class CreateOrganizationInput:
    name: str
    description: Optional[str] = None
    feature_permissions: Optional[list[FeaturePermission]] = None


@strawberry.input
class UpdateOrganizationInput:
    id: UUID
    name: Optional[str] = None
    description: Optional[str] = None
    logo_file_id: Optional[UUID] = None
    feature_permissions: Optional[list[FeaturePermission]] = None

    def to_update(self) -> OrganizationUpdate:
        return OrganizationUpdate(
            name=self.name,
            description=self.description,
            logo_file_id=self.logo_file_id,
            feature_permissions=self.feature_permissions,
        )


@strawberry.input
class AddMemberInput:
    organization_id: UUID
    user_id: UUID
    role: Role = Role.MEMBER


@strawberry.input
class UpdateRoleInput:
    member_id: UUID
    role: Role
