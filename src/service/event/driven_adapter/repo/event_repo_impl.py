from datetime import datetime
from typing import AsyncContextManager, Callable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import InvalidArgumentError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.event.app.interface.i_event_repo import IEventRepo
from src.service.event.domain.event_entity import (
    ALL_GRADE_YEARS,
    EventCategoryEntity,
    EventEntity,
    EventType,
    SlotEntity,
)
from src.service.event.driven_adapter.model.event_model import (
    EventCategoryModel,
    EventModel,
    EventSlotModel,
    event_category_link,
)


CONCURRENT_UPDATE_MESSAGE = 'The event was modified by someone else, please try again'


class EventRepoImpl(IEventRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @Logger.io
    async def create(self, *, event: EventEntity, slots: list[SlotEntity]) -> EventEntity:
        async with self.session_factory() as session:
            model = EventModel(
                id=event.id,
                type=event.type.value,
                name=event.name,
                description=event.description,
                location=event.location,
                contact_email=event.contact_email,
                start_at=event.start_at,
                end_at=event.end_at,
                organization_id=event.organization_id,
                signups_enabled=event.signups_enabled,
                signups_start_at=event.signups_start_at,
                signups_end_at=event.signups_end_at,
                capacity=event.capacity,
                remaining_capacity=event.remaining_capacity,
                product_id=event.product_id,
                version=event.version,
            )
            model.slots = [self._slot_to_model(slot, event.id) for slot in slots]
            model.categories = await self._load_categories(
                session, [c.id for c in event.categories]
            )
            session.add(model)
            try:
                await session.commit()
            except IntegrityError as e:
                raise InvalidArgumentError('Could not create event') from e
            return await self._reload(session, event.id)

    @Logger.io
    async def get_by_id(self, *, event_id: UUID) -> Optional[EventEntity]:
        async with self.session_factory() as session:
            model = await session.get(EventModel, event_id)
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def find_many(
        self,
        *,
        end_at_gte: Optional[datetime] = None,
        organization_id: Optional[UUID] = None,
        category_ids: Optional[list[UUID]] = None,
    ) -> list[EventEntity]:
        async with self.session_factory() as session:
            stmt = select(EventModel).order_by(EventModel.start_at)
            if end_at_gte is not None:
                stmt = stmt.where(EventModel.end_at >= end_at_gte)
            if organization_id is not None:
                stmt = stmt.where(EventModel.organization_id == organization_id)
            if category_ids:
                stmt = stmt.where(EventModel.categories.any(EventCategoryModel.id.in_(category_ids)))
            result = await session.execute(stmt)
            return [self._model_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def update(
        self,
        *,
        event: EventEntity,
        slots_to_create: list[SlotEntity],
        slots_to_update: list[SlotEntity],
        slots_to_delete: list[SlotEntity],
        category_ids: Optional[list[UUID]] = None,
    ) -> EventEntity:
        async with self.session_factory() as session:
            model = await session.get(EventModel, event.id, with_for_update=True)
            if not model:
                raise NotFoundError(f'Event {event.id} not found')
            if model.version != event.version:
                raise InvalidArgumentError(CONCURRENT_UPDATE_MESSAGE)

            model.name = event.name
            model.description = event.description
            model.location = event.location
            model.contact_email = event.contact_email
            model.start_at = event.start_at
            model.end_at = event.end_at
            model.signups_enabled = event.signups_enabled
            model.signups_start_at = event.signups_start_at
            model.signups_end_at = event.signups_end_at
            model.capacity = event.capacity
            model.remaining_capacity = event.remaining_capacity
            model.version = event.version + 1

            slot_models = {slot.id: slot for slot in model.slots}
            for slot in slots_to_update:
                slot_model = slot_models.get(slot.id)
                if slot_model is None or slot_model.version != slot.version:
                    raise InvalidArgumentError(CONCURRENT_UPDATE_MESSAGE)
                slot_model.capacity = slot.capacity
                slot_model.remaining_capacity = slot.remaining_capacity
                slot_model.grade_years = list(slot.grade_years)
                slot_model.version = slot.version + 1
            for slot in slots_to_delete:
                slot_model = slot_models.get(slot.id)
                if slot_model is None or slot_model.version != slot.version:
                    raise InvalidArgumentError(CONCURRENT_UPDATE_MESSAGE)
                model.slots.remove(slot_model)
            for slot in slots_to_create:
                model.slots.append(self._slot_to_model(slot, event.id))

            if category_ids is not None:
                model.categories = await self._load_categories(session, category_ids)

            await session.commit()
            return await self._reload(session, event.id)

    @Logger.io
    async def find_many_slots(
        self, *, event_id: UUID, grade_year: Optional[int] = None
    ) -> list[SlotEntity]:
        async with self.session_factory() as session:
            stmt = select(EventSlotModel).where(EventSlotModel.event_id == event_id)
            if grade_year is not None:
                stmt = stmt.where(EventSlotModel.grade_years.any(grade_year))
            result = await session.execute(stmt)
            return [self._slot_to_entity(m) for m in result.scalars().all()]

    @Logger.io
    async def get_slot_with_remaining_capacity(
        self, *, event_id: UUID, grade_year: Optional[int] = None
    ) -> Optional[SlotEntity]:
        async with self.session_factory() as session:
            stmt = (
                select(EventSlotModel)
                .where(
                    EventSlotModel.event_id == event_id,
                    EventSlotModel.remaining_capacity > 0,
                )
                .order_by(EventSlotModel.remaining_capacity.desc())
                .limit(1)
            )
            if grade_year is not None:
                stmt = stmt.where(EventSlotModel.grade_years.any(grade_year))
            else:
                stmt = stmt.where(EventSlotModel.grade_years.contains(ALL_GRADE_YEARS))
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
            return self._slot_to_entity(model) if model else None

    @Logger.io
    async def create_category(self, *, category: EventCategoryEntity) -> EventCategoryEntity:
        async with self.session_factory() as session:
            model = EventCategoryModel(id=category.id, name=category.name)
            session.add(model)
            try:
                await session.commit()
            except IntegrityError as e:
                raise InvalidArgumentError(f'A category named {category.name} already exists') from e
            return EventCategoryEntity(id=model.id, name=model.name)

    @Logger.io
    async def update_category(self, *, category: EventCategoryEntity) -> EventCategoryEntity:
        async with self.session_factory() as session:
            model = await session.get(EventCategoryModel, category.id)
            if not model:
                raise NotFoundError('Category not found')
            model.name = category.name
            try:
                await session.commit()
            except IntegrityError as e:
                raise InvalidArgumentError(f'A category named {category.name} already exists') from e
            return EventCategoryEntity(id=model.id, name=model.name)

    @Logger.io
    async def delete_category(self, *, category_id: UUID) -> EventCategoryEntity:
        async with self.session_factory() as session:
            model = await session.get(EventCategoryModel, category_id)
            if not model:
                raise NotFoundError('Category not found')
            entity = EventCategoryEntity(id=model.id, name=model.name)
            await session.delete(model)
            await session.commit()
            return entity

    @Logger.io
    async def find_many_categories(
        self, *, event_id: Optional[UUID] = None
    ) -> list[EventCategoryEntity]:
        async with self.session_factory() as session:
            stmt = select(EventCategoryModel).order_by(EventCategoryModel.name)
            if event_id is not None:
                stmt = stmt.where(
                    EventCategoryModel.id.in_(
                        select(event_category_link.c.category_id).where(
                            event_category_link.c.event_id == event_id
                        )
                    )
                )
            result = await session.execute(stmt)
            return [EventCategoryEntity(id=m.id, name=m.name) for m in result.scalars().all()]

    async def _reload(self, session: AsyncSession, event_id: UUID) -> EventEntity:
        session.expunge_all()
        model = await session.get(EventModel, event_id)
        if not model:
            raise NotFoundError(f'Event {event_id} not found')
        return self._model_to_entity(model)

    @staticmethod
    async def _load_categories(
        session: AsyncSession, category_ids: list[UUID]
    ) -> list[EventCategoryModel]:
        if not category_ids:
            return []
        result = await session.execute(
            select(EventCategoryModel).where(EventCategoryModel.id.in_(category_ids))
        )
        categories = list(result.scalars().all())
        if len(categories) != len(set(category_ids)):
            raise InvalidArgumentError('One or more categories do not exist')
        return categories

    @staticmethod
    def _slot_to_model(slot: SlotEntity, event_id: UUID) -> EventSlotModel:
        return EventSlotModel(
            id=slot.id,
            event_id=event_id,
            capacity=slot.capacity,
            remaining_capacity=slot.remaining_capacity,
            grade_years=list(slot.grade_years),
            version=slot.version,
        )

    @staticmethod
    def _slot_to_entity(model: EventSlotModel) -> SlotEntity:
        return SlotEntity(
            id=model.id,
            event_id=model.event_id,
            capacity=model.capacity,
            remaining_capacity=model.remaining_capacity,
            grade_years=list(model.grade_years),
            version=model.version,
        )

    @classmethod
    def _model_to_entity(cls, model: EventModel) -> EventEntity:
        entity = EventEntity(
            id=model.id,
            type=EventType(model.type),
            name=model.name,
            description=model.description,
            location=model.location,
            contact_email=model.contact_email,
            start_at=model.start_at,
            end_at=model.end_at,
            organization_id=model.organization_id,
            signups_enabled=model.signups_enabled,
            signups_start_at=model.signups_start_at,
            signups_end_at=model.signups_end_at,
            capacity=model.capacity,
            remaining_capacity=model.remaining_capacity,
            product_id=model.product_id,
            version=model.version,
            categories=[EventCategoryEntity(id=c.id, name=c.name) for c in model.categories],
            slots=[cls._slot_to_entity(s) for s in model.slots],
        )
        return entity.degrade_incomplete()
