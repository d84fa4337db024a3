from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    UnauthorizedError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.message_queue.job_name import JobName
from src.service.event.app.interface.i_event_repo import IEventRepo
from src.service.event.domain.event_entity import (
    EventCategoryEntity,
    EventEntity,
    EventType,
    EventUpdate,
    SignUpDetails,
    SlotEntity,
    SlotUpdate,
)
from src.service.product.app.command.product_use_case import ProductUseCase
from src.service.shared_kernel.app.interface.i_job_queue import IJobQueue
from src.service.shared_kernel.app.interface.i_permission_service import IPermissionService
from src.service.shared_kernel.domain.enum.role import Role


@attrs.define(kw_only=True)
class NewEventData:
    name: str
    start_at: datetime
    organization_id: UUID
    end_at: Optional[datetime] = None
    description: Optional[str] = None
    location: Optional[str] = None
    contact_email: Optional[str] = None
    category_ids: list[UUID] = attrs.field(factory=list)


@attrs.define(kw_only=True)
class TicketInformation:
    price: int  # øre
    merchant_id: UUID


@attrs.define(kw_only=True)
class NewSlotData:
    capacity: int
    grade_years: Optional[list[int]] = None


@attrs.define(kw_only=True)
class SlotChanges:
    create: list[NewSlotData] = attrs.field(factory=list)
    update: list[SlotUpdate] = attrs.field(factory=list)
    delete: list[UUID] = attrs.field(factory=list)


class EventCommandUseCase:
    """
    Create and update events, manage event categories

    Events belong to an organization; any MEMBER of it may create and edit them.
    Categories are global and reserved for super users.
    """

    def __init__(
        self,
        *,
        event_repo: IEventRepo,
        permission_service: IPermissionService,
        product_use_case: ProductUseCase,
        job_queue: IJobQueue,
    ) -> None:
        self.event_repo = event_repo
        self.permission_service = permission_service
        self.product_use_case = product_use_case
        self.job_queue = job_queue

    @Logger.io
    async def create(
        self,
        *,
        user_id: Optional[UUID],
        type: EventType,
        data: NewEventData,
        signup_details: Optional[SignUpDetails] = None,
        slots: Optional[list[NewSlotData]] = None,
        tickets: Optional[TicketInformation] = None,
    ) -> EventEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to create an event.')
        is_member = await self.permission_service.has_role(
            user_id=user_id, organization_id=data.organization_id, role=Role.MEMBER
        )
        if not is_member:
            raise PermissionDeniedError(
                'You do not have permission to create an event for this organization.'
            )

        new_slots = [
            SlotEntity.create(capacity=slot.capacity, grade_years=slot.grade_years)
            for slot in slots or []
        ]

        product_id = None
        if type == EventType.TICKETS:
            if tickets is None:
                raise InvalidArgumentError('TICKETS events require ticket information')
            product = await self.product_use_case.create_ticket_product(
                name=data.name,
                description=f'Billetter til {data.name}',
                price=tickets.price,
                merchant_id=tickets.merchant_id,
            )
            product_id = product.id

        event = EventEntity.create(
            type=type,
            name=data.name,
            start_at=data.start_at,
            end_at=data.end_at,
            organization_id=data.organization_id,
            description=data.description,
            location=data.location,
            contact_email=data.contact_email,
            signup_details=signup_details,
            product_id=product_id,
            categories=[EventCategoryEntity(id=c, name='') for c in data.category_ids],
        )
        created = await self.event_repo.create(event=event, slots=new_slots)
        Logger.base.info(f'📅 [EVENT] Created {type} event {created.id}')
        return created

    @Logger.io
    async def update(
        self,
        *,
        user_id: Optional[UUID],
        event_id: UUID,
        data: EventUpdate,
        slots: Optional[SlotChanges] = None,
        category_ids: Optional[list[UUID]] = None,
    ) -> EventEntity:
        if user_id is None:
            raise UnauthorizedError('You must be logged in to update an event.')
        event = await self.event_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError('Event not found')
        if event.organization_id is None:
            raise InvalidArgumentError('Event must belong to an organization')

        is_member = await self.permission_service.has_role(
            user_id=user_id, organization_id=event.organization_id, role=Role.MEMBER
        )
        if not is_member:
            raise PermissionDeniedError('You do not have permission to update this event')

        previous_remaining_capacity = event.remaining_capacity or 0
        event.apply_update(data)

        slots = slots or SlotChanges()
        existing_slots = {slot.id: slot for slot in event.slots}
        slots_to_create = [
            SlotEntity.create(capacity=slot.capacity, grade_years=slot.grade_years)
            for slot in slots.create
        ]

        slots_to_update = []
        for slot_update in slots.update:
            slot = existing_slots.get(slot_update.id)
            if slot is None:
                raise InvalidArgumentError('Slot to update not found')
            slot.apply_update(capacity=slot_update.capacity, grade_years=slot_update.grade_years)
            slots_to_update.append(slot)

        slots_to_delete = []
        for slot_id in slots.delete:
            slot = existing_slots.get(slot_id)
            if slot is None:
                raise InvalidArgumentError('Slot to delete not found')
            if slot.has_sign_ups:
                raise InvalidArgumentError('Cannot delete a slot with existing sign ups')
            slots_to_delete.append(slot)

        updated = await self.event_repo.update(
            event=event,
            slots_to_create=slots_to_create,
            slots_to_update=slots_to_update,
            slots_to_delete=slots_to_delete,
            category_ids=category_ids,
        )
        # Freed seats may let waitlisted users in
        if (updated.remaining_capacity or 0) > previous_remaining_capacity:
            await self.job_queue.enqueue(JobName.EVENT_CAPACITY_INCREASED, event_id=str(event_id))
        return updated

    @Logger.io
    async def create_category(self, *, user_id: Optional[UUID], name: str) -> EventCategoryEntity:
        await self._require_super_user(user_id, 'You do not have permission to create a category.')
        return await self.event_repo.create_category(category=EventCategoryEntity.create(name=name))

    @Logger.io
    async def update_category(
        self, *, user_id: Optional[UUID], category_id: UUID, name: str
    ) -> EventCategoryEntity:
        await self._require_super_user(user_id, 'You do not have permission to update a category.')
        EventCategoryEntity.validate_name(name)
        return await self.event_repo.update_category(
            category=EventCategoryEntity(id=category_id, name=name)
        )

    @Logger.io
    async def delete_category(
        self, *, user_id: Optional[UUID], category_id: UUID
    ) -> EventCategoryEntity:
        await self._require_super_user(user_id, 'You do not have permission to delete a category.')
        return await self.event_repo.delete_category(category_id=category_id)

    async def _require_super_user(self, user_id: Optional[UUID], message: str) -> None:
        if user_id is None:
            raise UnauthorizedError()
        if not await self.permission_service.is_super_user(user_id=user_id):
            raise PermissionDeniedError(message)
