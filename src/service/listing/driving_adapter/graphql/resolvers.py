from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.platform.graphql.context import GraphQLInfo
from src.service.listing.driving_adapter.graphql.types import (
    CreateListingInput,
    Listing,
    ListingResponse,
    ListingsResponse,
    UpdateListingInput,
)


@strawberry.type
class ListingQuery:
    @strawberry.field
    async def listing(self, id: UUID) -> ListingResponse:
        listing = await container.listing_use_case().get(listing_id=id)
        return ListingResponse(listing=Listing.from_entity(listing))

    @strawberry.field
    async def listings(self) -> ListingsResponse:
        listings = await container.listing_use_case().find_many()
        return ListingsResponse(listings=[Listing.from_entity(listing) for listing in listings])


@strawberry.type
class ListingMutation:
    @strawberry.mutation
    async def create_listing(self, info: GraphQLInfo, data: CreateListingInput) -> ListingResponse:
        listing = await container.listing_use_case().create(
            user_id=info.context.user_id,
            organization_id=data.organization_id,
            name=data.name,
            closes_at=data.closes_at,
            description=data.description,
            application_url=data.application_url,
        )
        return ListingResponse(listing=Listing.from_entity(listing))

    @strawberry.mutation
    async def update_listing(
        self, info: GraphQLInfo, id: UUID, data: UpdateListingInput
    ) -> ListingResponse:
        listing = await container.listing_use_case().update(
            user_id=info.context.user_id,
            listing_id=id,
            name=data.name,
            description=data.description,
            closes_at=data.closes_at,
            application_url=data.application_url,
        )
        return ListingResponse(listing=Listing.from_entity(listing))

    @strawberry.mutation
    async def delete_listing(self, info: GraphQLInfo, id: UUID) -> ListingResponse:
        listing = await container.listing_use_case().delete(
            user_id=info.context.user_id, listing_id=id
        )
        return ListingResponse(listing=Listing.from_entity(listing))
