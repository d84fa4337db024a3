from datetime import datetime
from typing import TYPE_CHECKING, Annotated, Optional
from uuid import UUID

import strawberry

from src.platform.config.di import container
from src.platform.exception.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.graphql.context import GraphQLInfo
from src.service.event.app.command.event_command_use_case import (
    NewEventData,
    NewSlotData,
    SlotChanges,
    TicketInformation,
)
from src.service.event.domain.event_entity import (
    EventCategoryEntity,
    EventEntity,
    EventType,
    EventUpdate,
    SignUpDetails,
    SlotEntity,
    SlotUpdate,
)
from src.service.event.domain.sign_up_entity import (
    SignUpAvailability,
    SignUpEntity,
    SignUpStatus,
)
from src.service.user.driving_adapter.graphql.types import User


if TYPE_CHECKING:
    from src.service.organization.driving_adapter.graphql.types import Organization
    from src.service.product.driving_adapter.graphql.types import Order, Product

OrganizationRef = Annotated[
    'Organization', strawberry.lazy('src.service.organization.driving_adapter.graphql.types')
]
OrderRef = Annotated['Order', strawberry.lazy('src.service.product.driving_adapter.graphql.types')]
ProductRef = Annotated[
    'Product', strawberry.lazy('src.service.product.driving_adapter.graphql.types')
]

strawberry.enum(EventType)
strawberry.enum(SignUpStatus)
strawberry.enum(SignUpAvailability)


@strawberry.type
class EventCategory:
    id: UUID
    name: str

    @classmethod
    def from_entity(cls, entity: EventCategoryEntity) -> 'EventCategory':
        return cls(id=entity.id, name=entity.name)


@strawberry.type
class EventSlot:
    id: UUID
    capacity: int
    remaining_capacity: int
    grade_years: list[int]

    @classmethod
    def from_entity(cls, entity: SlotEntity) -> 'EventSlot':
        return cls(
            id=entity.id,
            capacity=entity.capacity,
            remaining_capacity=entity.remaining_capacity,
            grade_years=list(entity.grade_years),
        )


@strawberry.type
class SignUp:
    id: UUID
    user_id: UUID
    event_id: UUID
    slot_id: Optional[UUID]
    participation_status: SignUpStatus
    active: bool
    user_provided_information: str
    order_id: Optional[UUID]
    created_at: Optional[datetime]

    @classmethod
    def from_entity(cls, entity: SignUpEntity) -> 'SignUp':
        return cls(
            id=entity.id,
            user_id=entity.user_id,
            event_id=entity.event_id,
            slot_id=entity.slot_id,
            participation_status=entity.participation_status,
            active=entity.active,
            user_provided_information=entity.user_provided_information,
            order_id=entity.order_id,
            created_at=entity.created_at,
        )

    @strawberry.field
    async def user(self) -> User:
        user = await container.user_query_use_case().get(user_id=self.user_id)
        return User.from_entity(user)

    @strawberry.field
    async def event(self) -> 'Event':
        event = await container.event_query_use_case().get(event_id=self.event_id)
        return Event.from_entity(event)

    @strawberry.field
    async def order(self, info: GraphQLInfo) -> Optional[OrderRef]:
        from src.service.product.driving_adapter.graphql.types import Order

        if self.order_id is None:
            return None
        try:
            order = await container.order_use_case().get_order(
                user_id=info.context.user_id, order_id=self.order_id
            )
        except (UnauthorizedError, NotFoundError):
            return None
        return Order.from_entity(order)

    @strawberry.field
    async def approximate_position_on_wait_list(self) -> Optional[int]:
        if self.participation_status != SignUpStatus.ON_WAITLIST:
            return None
        return await container.wait_list_use_case().get_approximate_wait_list_position(
            user_id=self.user_id, event_id=self.event_id
        )


@strawberry.type
class SignUpList:
    sign_ups: list[SignUp]
    total: int


@strawberry.type
class SignUps:
    """Sign-ups of an event grouped by status, visible to organization members"""

    event_id: strawberry.Private[UUID]

    async def _by_status(self, info: GraphQLInfo, status: SignUpStatus) -> SignUpList:
        try:
            sign_ups = await container.sign_up_query_use_case().find_many_sign_ups(
                user_id=info.context.user_id, event_id=self.event_id, status=status
            )
        except (UnauthorizedError, PermissionDeniedError, NotFoundError):
            return SignUpList(sign_ups=[], total=0)
        return SignUpList(sign_ups=[SignUp.from_entity(s) for s in sign_ups], total=len(sign_ups))

    @strawberry.field
    async def confirmed(self, info: GraphQLInfo) -> SignUpList:
        return await self._by_status(info, SignUpStatus.CONFIRMED)

    @strawberry.field
    async def wait_list(self, info: GraphQLInfo) -> SignUpList:
        return await self._by_status(info, SignUpStatus.ON_WAITLIST)

    @strawberry.field
    async def retracted(self, info: GraphQLInfo) -> SignUpList:
        return await self._by_status(info, SignUpStatus.RETRACTED)

    @strawberry.field
    async def removed(self, info: GraphQLInfo) -> SignUpList:
        return await self._by_status(info, SignUpStatus.REMOVED)


@strawberry.type
class EventTicketInformation:
    product_id: Optional[UUID]

    @strawberry.field
    async def product(self) -> Optional[ProductRef]:
        from src.service.product.driving_adapter.graphql.types import Product

        if self.product_id is None:
            return None
        try:
            product = await container.product_use_case().get_product(product_id=self.product_id)
        except NotFoundError:
            return None
        return Product.from_entity(product)


@strawberry.type
class Event:
    id: UUID
    name: str
    description: str
    type: EventType
    start_at: datetime
    end_at: datetime
    location: str
    contact_email: str
    organization_id: Optional[UUID]
    signups_enabled: bool
    signups_start_at: Optional[datetime]
    signups_end_at: Optional[datetime]
    capacity: Optional[int]
    remaining_capacity: Optional[int]
    product_id: Optional[UUID]
    categories: list[EventCategory]
    slots: list[EventSlot]

    @classmethod
    def from_entity(cls, entity: EventEntity) -> 'Event':
        return cls(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            type=entity.type,
            start_at=entity.start_at,
            end_at=entity.end_at,
            location=entity.location,
            contact_email=entity.contact_email,
            organization_id=entity.organization_id,
            signups_enabled=entity.signups_enabled,
            signups_start_at=entity.signups_start_at,
            signups_end_at=entity.signups_end_at,
            capacity=entity.capacity,
            remaining_capacity=entity.remaining_capacity,
            product_id=entity.product_id,
            categories=[EventCategory.from_entity(c) for c in entity.categories],
            slots=[EventSlot.from_entity(s) for s in entity.slots],
        )

    @strawberry.field
    async def can_sign_up(self, info: GraphQLInfo) -> bool:
        if info.context.user_id is None:
            return False
        return await container.sign_up_query_use_case().can_sign_up_for_event(
            user_id=info.context.user_id, event_id=self.id
        )

    @strawberry.field
    async def sign_up_availability(self, info: GraphQLInfo) -> SignUpAvailability:
        return await container.sign_up_query_use_case().get_sign_up_availability(
            user_id=info.context.user_id, event_id=self.id
        )

    @strawberry.field(description="The current user's sign-up, if any")
    async def sign_up(self, info: GraphQLInfo) -> Optional[SignUp]:
        if info.context.user_id is None:
            return None
        sign_up = await container.sign_up_query_use_case().get_sign_up(
            user_id=info.context.user_id, event_id=self.id
        )
        return SignUp.from_entity(sign_up) if sign_up else None

    @strawberry.field
    def sign_ups(self) -> Optional[SignUps]:
        if self.type == EventType.BASIC:
            return None
        return SignUps(event_id=self.id)

    @strawberry.field
    def ticket_information(self) -> Optional[EventTicketInformation]:
        if self.type != EventType.TICKETS:
            return None
        return EventTicketInformation(product_id=self.product_id)

    @strawberry.field
    async def organization(self) -> Optional[OrganizationRef]:
        from src.service.organization.driving_adapter.graphql.types import Organization

        if self.organization_id is None:
            return None
        organization = await container.organization_query_use_case().get(
            organization_id=self.organization_id
        )
        return Organization.from_entity(organization)


@strawberry.type
class EventResponse:
    event: Event


@strawberry.type
class EventsResponse:
    events: list[Event]
    total: int


@strawberry.type
class CategoriesResponse:
    categories: list[EventCategory]


@strawberry.type
class CategoryResponse:
    category: EventCategory


@strawberry.type
class SignUpResponse:
    sign_up: SignUp


@strawberry.input
class EventsInput:
    only_future_events: bool = False
    organization_id: Optional[UUID] = None
    category_ids: Optional[list[UUID]] = None


@strawberry.input
class NewSlotInput:
    capacity: int
    grade_years: Optional[list[int]] = None

    def to_data(self) -> NewSlotData:
        return NewSlotData(capacity=self.capacity, grade_years=self.grade_years)


@strawberry.input
class TicketInformationInput:
    price: int
    merchant_id: UUID


@strawberry.input
class SignUpDetailsInput:
    signups_start_at: datetime
    signups_end_at: datetime
    capacity: int
    signups_enabled: bool = False
    slots: list[NewSlotInput] = strawberry.field(default_factory=list)
    tickets: Optional[TicketInformationInput] = None


@strawberry.input
class NewEventInput:
    name: str
    start_at: datetime
    organization_id: UUID
    end_at: Optional[datetime] = None
    description: Optional[str] = None
    location: Optional[str] = None
    contact_email: Optional[str] = None
    category_ids: Optional[list[UUID]] = None


@strawberry.input
class CreateEventInput:
    event: NewEventInput
    type: EventType = EventType.BASIC
    sign_up_details: Optional[SignUpDetailsInput] = None

    def to_event_data(self) -> NewEventData:
        return NewEventData(
            name=self.event.name,
            start_at=self.event.start_at,
            organization_id=self.event.organization_id,
            end_at=self.event.end_at,
            description=self.event.description,
            location=self.event.location,
            contact_email=self.event.contact_email,
            category_ids=list(self.event.category_ids or []),
        )

    def to_sign_up_details(self) -> Optional[SignUpDetails]:
        if self.sign_up_details is None:
            return None
        return SignUpDetails(
            signups_start_at=self.sign_up_details.signups_start_at,
            signups_end_at=self.sign_up_details.signups_end_at,
            capacity=self.sign_up_details.capacity,
            signups_enabled=self.sign_up_details.signups_enabled,
        )

    def to_slots(self) -> Optional[list[NewSlotData]]:
        if self.sign_up_details is None:
            return None
        return [slot.to_data() for slot in self.sign_up_details.slots]

    def to_tickets(self) -> Optional[TicketInformation]:
        if self.sign_up_details is None or self.sign_up_details.tickets is None:
            return None
        tickets = self.sign_up_details.tickets
        return TicketInformation(price=tickets.price, merchant_id=tickets.merchant_id)


@strawberry.input
class UpdateSlotInput:
    id: UUID
    capacity: Optional[int] = None
    grade_years: Optional[list[int]] = None


@strawberry.input
class UpdateSlotsInput:
    create: list[NewSlotInput] = strawberry.field(default_factory=list)
    update: list[UpdateSlotInput] = strawberry.field(default_factory=list)
    delete: list[UUID] = strawberry.field(default_factory=list)

    def to_changes(self) -> SlotChanges:
        return SlotChanges(
            create=[slot.to_data() for slot in self.create],
            update=[
                SlotUpdate(id=slot.id, capacity=slot.capacity, grade_years=slot.grade_years)
                for slot in self.update
            ],
            delete=list(self.delete),
        )


@strawberry.input
class UpdateEventInput:
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    contact_email: Optional[str] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    signups_enabled: Optional[bool] = None
    signups_start_at: Optional[datetime] = None
    signups_end_at: Optional[datetime] = None
    capacity: Optional[int] = None
    category_ids: Optional[list[UUID]] = None
    slots: Optional[UpdateSlotsInput] = None

    def to_update(self) -> EventUpdate:
        return EventUpdate(
            name=self.name,
            description=self.description,
            location=self.location,
            contact_email=self.contact_email,
            start_at=self.start_at,
            end_at=self.end_at,
            signups_enabled=self.signups_enabled,
            signups_start_at=self.signups_start_at,
            signups_end_at=self.signups_end_at,
            capacity=self.capacity,
        )
