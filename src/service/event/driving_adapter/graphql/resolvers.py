from typing import Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.platform.graphql.context import GraphQLInfo
from src.service.event.driving_adapter.graphql.types import (
    CategoriesResponse,
    CategoryResponse,
    CreateEventInput,
    Event,
    EventCategory,
    EventResponse,
    EventsInput,
    EventsResponse,
    SignUp,
    SignUpResponse,
    UpdateEventInput,
)


@strawberry.type
class EventQuery:
    @strawberry.field
    async def event(self, id: UUID) -> EventResponse:
        event = await container.event_query_use_case().get(event_id=id)
        return EventResponse(event=Event.from_entity(event))

    @strawberry.field
    async def events(self, data: Optional[EventsInput] = None) -> EventsResponse:
        data = data or EventsInput()
        events = await container.event_query_use_case().find_many(
            only_future_events=data.only_future_events,
            organization_id=data.organization_id,
            category_ids=data.category_ids,
        )
        return EventsResponse(events=[Event.from_entity(e) for e in events], total=len(events))

    @strawberry.field
    async def categories(self, event_id: Optional[UUID] = None) -> CategoriesResponse:
        categories = await container.event_query_use_case().find_many_categories(
            event_id=event_id
        )
        return CategoriesResponse(categories=[EventCategory.from_entity(c) for c in categories])


@strawberry.type
class EventMutation:
    @strawberry.mutation
    async def create_event(self, info: GraphQLInfo, data: CreateEventInput) -> EventResponse:
        event = await container.event_command_use_case().create(
            user_id=info.context.user_id,
            type=data.type,
            data=data.to_event_data(),
            signup_details=data.to_sign_up_details(),
            slots=data.to_slots(),
            tickets=data.to_tickets(),
        )
        return EventResponse(event=Event.from_entity(event))

    @strawberry.mutation
    async def update_event(
        self, info: GraphQLInfo, id: UUID, data: UpdateEventInput
    ) -> EventResponse:
        event = await container.event_command_use_case().update(
            user_id=info.context.user_id,
            event_id=id,
            data=data.to_update(),
            slots=data.slots.to_changes() if data.slots else None,
            category_ids=data.category_ids,
        )
        return EventResponse(event=Event.from_entity(event))

    @strawberry.mutation
    async def sign_up(
        self, info: GraphQLInfo, event_id: UUID, user_provided_information: str = ''
    ) -> SignUpResponse:
        sign_up = await container.sign_up_use_case().sign_up(
            user_id=info.context.user_id,
            event_id=event_id,
            user_provided_information=user_provided_information,
        )
        return SignUpResponse(sign_up=SignUp.from_entity(sign_up))

    @strawberry.mutation
    async def retract_sign_up(self, info: GraphQLInfo, event_id: UUID) -> SignUpResponse:
        sign_up = await container.sign_up_use_case().retract_sign_up(
            user_id=info.context.user_id, event_id=event_id
        )
        return SignUpResponse(sign_up=SignUp.from_entity(sign_up))

    @strawberry.mutation
    async def remove_sign_up(self, info: GraphQLInfo, sign_up_id: UUID) -> SignUpResponse:
        sign_up = await container.sign_up_use_case().remove_sign_up(
            user_id=info.context.user_id, sign_up_id=sign_up_id
        )
        return SignUpResponse(sign_up=SignUp.from_entity(sign_up))

    @strawberry.mutation
    async def create_category(self, info: GraphQLInfo, name: str) -> CategoryResponse:
        category = await container.event_command_use_case().create_category(
            user_id=info.context.user_id, name=name
        )
        return CategoryResponse(category=EventCategory.from_entity(category))

    @strawberry.mutation
    async def update_category(self, info: GraphQLInfo, id: UUID, name: str) -> CategoryResponse:
        category = await container.event_command_use_case().update_category(
            user_id=info.context.user_id, category_id=id, name=name
        )
        return CategoryResponse(category=EventCategory.from_entity(category))

    @strawberry.mutation
    async def delete_category(self, info: GraphQLInfo, id: UUID) -> CategoryResponse:
        category = await container.event_command_use_case().delete_category(
            user_id=info.context.user_id, category_id=id
        )
        return CategoryResponse(category=EventCategory.from_entity(category))
