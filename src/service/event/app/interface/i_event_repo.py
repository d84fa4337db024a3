from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.service.event.domain.event_entity import EventCategoryEntity, EventEntity, SlotEntity


class IEventRepo(ABC):
    @abstractmethod
    async def create(self, *, event: EventEntity, slots: list[SlotEntity]) -> EventEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, event_id: UUID) -> Optional[EventEntity]:
        """Event with its slots and categories"""
        pass

    @abstractmethod
    async def find_many(
        self,
        *,
        end_at_gte: Optional[datetime] = None,
        organization_id: Optional[UUID] = None,
        category_ids: Optional[list[UUID]] = None,
    ) -> list[EventEntity]:
        pass

    @abstractmethod
    async def update(
        self,
        *,
        event: EventEntity,
        slots_to_create: list[SlotEntity],
        slots_to_update: list[SlotEntity],
        slots_to_delete: list[SlotEntity],
        category_ids: Optional[list[UUID]] = None,
    ) -> EventEntity:
        """
        Persist an updated event

        The event and every touched slot are matched on their loaded version;
        a concurrent modification raises InvalidArgumentError.
        """
        pass

    @abstractmethod
    async def find_many_slots(
        self, *, event_id: UUID, grade_year: Optional[int] = None
    ) -> list[SlotEntity]:
        pass

    @abstractmethod
    async def get_slot_with_remaining_capacity(
        self, *, event_id: UUID, grade_year: Optional[int] = None
    ) -> Optional[SlotEntity]:
        """
        Slot with the most remaining capacity open to grade_year

        Without a grade year only slots open to every grade year qualify.
        """
        pass

    @abstractmethod
    async def create_category(self, *, category: EventCategoryEntity) -> EventCategoryEntity:
        pass

    @abstractmethod
    async def update_category(self, *, category: EventCategoryEntity) -> EventCategoryEntity:
        pass

    @abstractmethod
    async def delete_category(self, *, category_id: UUID) -> EventCategoryEntity:
        pass

    @abstractmethod
    async def find_many_categories(
        self, *, event_id: Optional[UUID] = None
    ) -> list[EventCategoryEntity]:
        pass
