from datetime import datetime
from typing import TYPE_CHECKING, Annotated, Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.service.listing.domain.listing_entity import ListingEntity


if TYPE_CHECKING:
    from src.service.organization.driving_adapter.graphql.types import Organization

OrganizationRef = Annotated[
    'Organization', strawberry.lazy('src.service.organization.driving_adapter.graphql.types')
]


@strawberry.type
class Listing:
    id: UUID
    name: str
    description: str
    closes_at: datetime
    application_url: str
    organization_id: UUID

    @classmethod
    def from_entity(cls, entity: ListingEntity) -> 'Listing':
        return cls(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            closes_at=entity.closes_at,
            application_url=entity.application_url,
            organization_id=entity.organization_id,
        )

    @strawberry.field
    async def organization(self) -> OrganizationRef:
        from src.service.organization.driving_adapter.graphql.types import Organization

        organization = await container.organization_query_use_case().get(
            organization_id=self.organization_id
        )
        return Organization.from_entity(organization)


@strawberry.type
class ListingResponse:
    listing: Listing


@strawberry.type
class ListingsResponse:
    listings: list[Listing]


@strawberry.input
class CreateListingInput:
    name: str
    closes_at: datetime
    organization_id: UUID
    description: Optional[str] = None
    application_url: Optional[str] = None


@strawberry.input
class UpdateListingInput:
    name: Optional[str] = None
    description: Optional[str] = None
    closes_at: Optional[datetime] = None
    application_url: Optional[str] = None
